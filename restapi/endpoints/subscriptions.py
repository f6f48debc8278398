"""Subscription endpoints for the API."""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.core.schemas import ApiResponse, Pagination
from components.subscription.service import SubscriptionService
from components.subscription import schemas
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/subscriptions",
    tags=["subscriptions"],
    responses={404: {"description": "Not found"}},
)


async def _get_or_404(service: SubscriptionService, user: User, subscription_id: int):
    subscription = await service.subscriptions.get_active(user.id, subscription_id)
    if subscription is None:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription


def _data(subscription) -> schemas.SubscriptionData:
    return schemas.SubscriptionData(subscription=schemas.Subscription.model_validate(subscription))


@router.get("/summary/overview", response_model=ApiResponse[schemas.SubscriptionSummary])
async def subscription_summary(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get subscription summary overview.

    Returns total spend, counts, the monthly recurring cost parsed from
    "<amount>/month" plan strings of recurring subscriptions, and a
    per-category breakdown.
    """
    return ApiResponse(data=await SubscriptionService(db).summary(current_user.id))


@router.get("", response_model=ApiResponse[schemas.SubscriptionList])
async def list_subscriptions(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Case-insensitive name substring"),
    recurring_payment: Optional[str] = Query(None, alias="recurringPayment"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Get the user's active subscriptions."""
    subscriptions, total = await SubscriptionService(db).page(
        current_user.id,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        category=category,
        search=search,
        recurring_payment=recurring_payment,
    )
    return ApiResponse(data=schemas.SubscriptionList(
        subscriptions=[schemas.Subscription.model_validate(sub) for sub in subscriptions],
        pagination=Pagination.build(page, limit, total),
    ))


@router.post("", response_model=ApiResponse[schemas.SubscriptionData], status_code=201)
async def create_subscription(
    subscription_in: schemas.SubscriptionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Create a subscription, adding a savings expense when it is linked."""
    subscription = await SubscriptionService(db).create(current_user.id, subscription_in)
    return ApiResponse(message="Subscription created successfully", data=_data(subscription))


@router.get("/{subscription_id}", response_model=ApiResponse[schemas.SubscriptionData])
async def read_subscription(
    subscription_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Get a specific active subscription."""
    subscription = await _get_or_404(SubscriptionService(db), current_user, subscription_id)
    return ApiResponse(data=_data(subscription))


@router.put("/{subscription_id}", response_model=ApiResponse[schemas.SubscriptionData])
async def update_subscription(
    subscription_id: int,
    changes: schemas.SubscriptionUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Update a subscription and reconcile its savings expense."""
    service = SubscriptionService(db)
    subscription = await _get_or_404(service, current_user, subscription_id)
    subscription = await service.update(subscription, changes)
    return ApiResponse(message="Subscription updated successfully", data=_data(subscription))


@router.delete("/{subscription_id}", response_model=ApiResponse)
async def delete_subscription(
    subscription_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Soft delete a subscription and remove its savings expense."""
    service = SubscriptionService(db)
    await service.delete(await _get_or_404(service, current_user, subscription_id))
    return ApiResponse(message="Subscription deleted successfully")
