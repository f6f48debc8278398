"""Savings plan endpoints for the API."""

from typing import Any
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.core.schemas import ApiResponse
from components.savings.repository import SavingsRepository
from components.savings import schemas
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/savings",
    tags=["savings"],
    responses={404: {"description": "Not found"}},
)


async def _income_or_404(repo: SavingsRepository, user: User, income_id: int):
    income = await repo.get_income(user.id, income_id)
    if income is None:
        raise HTTPException(status_code=404, detail="Income not found")
    return income


async def _expense_or_404(repo: SavingsRepository, user: User, expense_id: int):
    expense = await repo.get_expense(user.id, expense_id)
    if expense is None:
        raise HTTPException(status_code=404, detail="Savings expense not found")
    return expense


async def _reject_subscription_managed(repo: SavingsRepository, user: User, expense_id: int) -> None:
    subscription = await repo.subscription_for_expense(user.id, expense_id)
    if subscription is not None:
        raise HTTPException(
            status_code=400,
            detail=f"This expense is managed by the subscription '{subscription.name}'. "
                   "Change or unlink the subscription instead.",
        )


@router.get("/summary", response_model=ApiResponse[schemas.SavingsSummary])
async def savings_summary(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Income, monthly outflows, budget and resulting monthly savings."""
    return ApiResponse(data=await SavingsRepository(db).summary(current_user.id))


@router.get("/income", response_model=ApiResponse[schemas.IncomeList])
async def list_incomes(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    incomes = await SavingsRepository(db).get_incomes(current_user.id)
    return ApiResponse(data=schemas.IncomeList(
        incomes=[schemas.Income.model_validate(income) for income in incomes]
    ))


@router.post("/income", response_model=ApiResponse[schemas.IncomeData], status_code=201)
async def create_income(
    income_in: schemas.IncomeCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    income = await SavingsRepository(db).create_income(current_user.id, income_in)
    return ApiResponse(
        message="Income added successfully",
        data=schemas.IncomeData(income=schemas.Income.model_validate(income)),
    )


@router.put("/income/{income_id}", response_model=ApiResponse[schemas.IncomeData])
async def update_income(
    income_id: int,
    changes: schemas.IncomeUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    repo = SavingsRepository(db)
    income = await repo.update_income(await _income_or_404(repo, current_user, income_id), changes)
    return ApiResponse(
        message="Income updated successfully",
        data=schemas.IncomeData(income=schemas.Income.model_validate(income)),
    )


@router.delete("/income/{income_id}", response_model=ApiResponse)
async def delete_income(
    income_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    repo = SavingsRepository(db)
    await repo.delete_income(await _income_or_404(repo, current_user, income_id))
    return ApiResponse(message="Income deleted successfully")


@router.get("/expenses", response_model=ApiResponse[schemas.SavingsExpenseList])
async def list_savings_expenses(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Savings expenses, including the ones backing subscriptions."""
    expenses = await SavingsRepository(db).describe_expenses(current_user.id)
    return ApiResponse(data=schemas.SavingsExpenseList(expenses=expenses))


@router.post("/expenses", response_model=ApiResponse[schemas.SavingsExpenseData], status_code=201)
async def create_savings_expense(
    expense_in: schemas.SavingsExpenseCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    expense = await SavingsRepository(db).create_expense(
        current_user.id, expense_in.category, expense_in.per_month
    )
    return ApiResponse(
        message="Savings expense added successfully",
        data=schemas.SavingsExpenseData(expense=schemas.SavingsExpense.model_validate(expense)),
    )


@router.put("/expenses/{expense_id}", response_model=ApiResponse[schemas.SavingsExpenseData])
async def update_savings_expense(
    expense_id: int,
    changes: schemas.SavingsExpenseUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    repo = SavingsRepository(db)
    expense = await _expense_or_404(repo, current_user, expense_id)
    await _reject_subscription_managed(repo, current_user, expense_id)
    values = changes.model_dump(exclude_unset=True)
    expense = await repo.update_expense(
        expense,
        values.get("category", expense.category),
        values.get("per_month", expense.per_month),
    )
    return ApiResponse(
        message="Savings expense updated successfully",
        data=schemas.SavingsExpenseData(expense=schemas.SavingsExpense.model_validate(expense)),
    )


@router.delete("/expenses/{expense_id}", response_model=ApiResponse)
async def delete_savings_expense(
    expense_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    repo = SavingsRepository(db)
    expense = await _expense_or_404(repo, current_user, expense_id)
    await _reject_subscription_managed(repo, current_user, expense_id)
    await repo.delete_expense(expense)
    return ApiResponse(message="Savings expense deleted successfully")


@router.get("/budget", response_model=ApiResponse[schemas.SavingsBudget])
async def read_savings_budget(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    monthly = await SavingsRepository(db).get_budget(current_user.id)
    return ApiResponse(data=schemas.SavingsBudget(monthly_budget=monthly))


@router.post("/budget", response_model=ApiResponse[schemas.SavingsBudget])
async def set_savings_budget(
    budget_in: schemas.SavingsBudgetSet,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    monthly = await SavingsRepository(db).set_budget(current_user.id, budget_in.monthly_budget)
    return ApiResponse(
        message="Savings budget updated successfully",
        data=schemas.SavingsBudget(monthly_budget=monthly),
    )
