"""Expense endpoints for the API."""

import io
from datetime import datetime
from typing import Any, Optional
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.core.schemas import ApiResponse, Pagination
from components.expense.repository import ExpenseRepository
from components.expense import schemas
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/expenses",
    tags=["expenses"],
    responses={404: {"description": "Not found"}},
)


async def _get_or_404(repo: ExpenseRepository, user: User, expense_id: int):
    expense = await repo.get(user.id, expense_id)
    if expense is None:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


async def _check_budget(repo: ExpenseRepository, user: User, budget_id: Optional[int]) -> None:
    if budget_id is not None and not await repo.budget_owned(user.id, budget_id):
        raise HTTPException(status_code=400, detail="Budget not found")


@router.get("/summary/overview", response_model=ApiResponse[schemas.ExpenseSummary])
async def expense_summary(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Totals and category breakdown for a date window."""
    repo = ExpenseRepository(db)
    return ApiResponse(data=await repo.summary(current_user.id, start_date=start_date, end_date=end_date))


@router.get("", response_model=ApiResponse[schemas.ExpenseList])
async def list_expenses(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    receipt: Optional[bool] = Query(None),
    sort_by: str = Query("date", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Get the user's expenses with filtering and pagination."""
    expenses, total = await ExpenseRepository(db).get_page(
        current_user.id,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        category=category,
        search=search,
        start_date=start_date,
        end_date=end_date,
        receipt=receipt,
    )
    return ApiResponse(data=schemas.ExpenseList(
        expenses=[schemas.Expense.model_validate(expense) for expense in expenses],
        pagination=Pagination.build(page, limit, total),
    ))


@router.post("", response_model=ApiResponse[schemas.ExpenseData], status_code=201)
async def create_expense(
    expense_in: schemas.ExpenseCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Record an expense."""
    repo = ExpenseRepository(db)
    await _check_budget(repo, current_user, expense_in.budget_id)
    expense = await repo.create(current_user.id, expense_in)
    return ApiResponse(
        message="Expense created successfully",
        data=schemas.ExpenseData(expense=schemas.Expense.model_validate(expense)),
    )


@router.post("/import", response_model=ApiResponse[schemas.ImportResult])
async def import_expenses(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Import expenses from a CSV file.

    The CSV file must have the following columns:
    - name: what the money was spent on
    - amount: a positive number
    - category: one of the expense categories
    - date: ISO-8601 date or datetime

    Optional columns: receipt (true/false) and notes. Nothing is imported if
    any row is invalid.
    """
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="Invalid file format. Only CSV files (.csv) are supported.")

    content = await file.read()
    success, message, errors, imported = await ExpenseRepository(db).import_csv(current_user.id, io.BytesIO(content))
    if not success:
        return ApiResponse(
            success=False,
            message=message,
            data=schemas.ImportResult(errors=[schemas.ImportRowError(**error) for error in errors] or None),
        )

    return ApiResponse(message=message, data=schemas.ImportResult(imported=imported))


@router.get("/{expense_id}", response_model=ApiResponse[schemas.ExpenseData])
async def read_expense(
    expense_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Get a specific expense."""
    expense = await _get_or_404(ExpenseRepository(db), current_user, expense_id)
    return ApiResponse(data=schemas.ExpenseData(expense=schemas.Expense.model_validate(expense)))


@router.put("/{expense_id}", response_model=ApiResponse[schemas.ExpenseData])
async def update_expense(
    expense_id: int,
    changes: schemas.ExpenseUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Update an expense."""
    repo = ExpenseRepository(db)
    expense = await _get_or_404(repo, current_user, expense_id)
    await _check_budget(repo, current_user, changes.budget_id)
    expense = await repo.update(expense, changes)
    return ApiResponse(
        message="Expense updated successfully",
        data=schemas.ExpenseData(expense=schemas.Expense.model_validate(expense)),
    )


@router.delete("/{expense_id}", response_model=ApiResponse)
async def delete_expense(
    expense_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Delete an expense."""
    repo = ExpenseRepository(db)
    await repo.delete(await _get_or_404(repo, current_user, expense_id))
    return ApiResponse(message="Expense deleted successfully")
