"""Budget endpoints for the API."""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.budget.repository import BudgetRepository
from components.budget import schemas
from components.core.init_db import get_db
from components.core.schemas import ApiResponse, Pagination
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/budgets",
    tags=["budgets"],
    responses={404: {"description": "Not found"}},
)


async def _get_or_404(repo: BudgetRepository, user: User, budget_id: int):
    budget = await repo.get(user.id, budget_id)
    if budget is None:
        raise HTTPException(status_code=404, detail="Budget not found")
    return budget


@router.get("/summary/overview", response_model=ApiResponse[schemas.BudgetSummary])
async def budget_summary(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Totals across the user's budgets."""
    return ApiResponse(data=await BudgetRepository(db).summary(current_user.id))


@router.get("", response_model=ApiResponse[schemas.BudgetList])
async def list_budgets(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Get the user's budgets with spending."""
    repo = BudgetRepository(db)
    budgets, total = await repo.get_page(current_user.id, page=page, limit=limit, category=category)
    return ApiResponse(data=schemas.BudgetList(
        budgets=await repo.with_spending(budgets),
        pagination=Pagination.build(page, limit, total),
    ))


@router.post("", response_model=ApiResponse[schemas.BudgetData], status_code=201)
async def create_budget(
    budget_in: schemas.BudgetCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Create a budget."""
    repo = BudgetRepository(db)
    budget = await repo.create(current_user.id, budget_in)
    (item,) = await repo.with_spending([budget])
    return ApiResponse(message="Budget created successfully", data=schemas.BudgetData(budget=item))


@router.get("/{budget_id}", response_model=ApiResponse[schemas.BudgetData])
async def read_budget(
    budget_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Get a specific budget."""
    repo = BudgetRepository(db)
    budget = await _get_or_404(repo, current_user, budget_id)
    (item,) = await repo.with_spending([budget])
    return ApiResponse(data=schemas.BudgetData(budget=item))


@router.put("/{budget_id}", response_model=ApiResponse[schemas.BudgetData])
async def update_budget(
    budget_id: int,
    changes: schemas.BudgetUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Update a budget."""
    repo = BudgetRepository(db)
    budget = await repo.update(await _get_or_404(repo, current_user, budget_id), changes)
    (item,) = await repo.with_spending([budget])
    return ApiResponse(message="Budget updated successfully", data=schemas.BudgetData(budget=item))


@router.delete("/{budget_id}", response_model=ApiResponse)
async def delete_budget(
    budget_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Delete a budget; its expenses are kept but unlinked."""
    repo = BudgetRepository(db)
    await repo.delete(await _get_or_404(repo, current_user, budget_id))
    return ApiResponse(message="Budget deleted successfully")
