"""Dashboard endpoints for the API."""

from typing import Any
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.core.schemas import ApiResponse
from components.dashboard.service import DashboardService
from components.dashboard import schemas
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/overview", response_model=ApiResponse[schemas.DashboardOverview])
async def dashboard_overview(
    period: schemas.Period = Query("month"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get dashboard overview.

    Expenses are limited to the current week, month or year. Monthly savings
    are income minus regular expenses and savings plan expenses (which
    include subscription-linked ones).
    """
    return ApiResponse(data=await DashboardService(db).overview(current_user.id, period))


@router.get("/quick-stats", response_model=ApiResponse[schemas.QuickStats])
async def quick_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Spending today, this week and this month."""
    return ApiResponse(data=await DashboardService(db).quick_stats(current_user.id))


@router.get("/activity-feed", response_model=ApiResponse[schemas.ActivityFeed])
async def activity_feed(
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Latest expenses, budgets and subscriptions, newest first."""
    activities = await DashboardService(db).activity_feed(current_user.id, limit=limit)
    return ApiResponse(data=schemas.ActivityFeed(activities=activities))
