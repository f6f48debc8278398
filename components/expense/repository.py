"""Repository for expense operations."""

import io
from datetime import datetime
from typing import BinaryIO, Dict, List, Optional, Tuple

import pandas as pd
from pydantic import ValidationError
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from components.budget.models import Budget
from components.expense.models import Expense
from components.expense import schemas

SORT_COLUMNS = {
    "createdAt": Expense.created_at,
    "date": Expense.date,
    "amount": Expense.amount,
    "name": Expense.name,
    "category": Expense.category,
}

CSV_COLUMNS = ["name", "amount", "category", "date"]
CSV_OPTIONAL_COLUMNS = ["receipt", "notes"]


class ExpenseRepository:
    """Repository for expense operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def budget_owned(self, user_id: int, budget_id: int) -> bool:
        """Check the budget exists and belongs to the user."""
        result = await self.session.execute(
            select(Budget.id).where(Budget.id == budget_id, Budget.user_id == user_id)
        )
        return result.scalar_one_or_none() is not None

    async def create(self, user_id: int, expense: schemas.ExpenseCreate) -> Expense:
        """Create a new expense."""
        db_expense = Expense(user_id=user_id, **expense.model_dump())
        self.session.add(db_expense)
        await self.session.commit()
        await self.session.refresh(db_expense)
        return db_expense

    async def get(self, user_id: int, expense_id: int) -> Optional[Expense]:
        """Get an expense owned by the user."""
        result = await self.session.execute(
            select(Expense).where(Expense.id == expense_id, Expense.user_id == user_id)
        )
        return result.scalar_one_or_none()

    def _filtered(
        self,
        user_id: int,
        category: Optional[str] = None,
        search: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        receipt: Optional[bool] = None,
    ):
        query = select(Expense).where(Expense.user_id == user_id)
        if category and category != "All":
            query = query.where(Expense.category == category)
        if search:
            query = query.where(func.lower(Expense.name).contains(search.lower(), autoescape=True))
        if start_date:
            query = query.where(Expense.date >= start_date)
        if end_date:
            query = query.where(Expense.date <= end_date)
        if receipt is not None:
            query = query.where(Expense.receipt == receipt)
        return query

    async def get_page(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "date",
        sort_order: str = "desc",
        **filters,
    ) -> Tuple[List[Expense], int]:
        """Get a page of expenses and the total count."""
        query = self._filtered(user_id, **filters)
        total = await self.session.scalar(
            select(func.count()).select_from(query.subquery())
        )

        column = SORT_COLUMNS.get(sort_by, Expense.date)
        ordering = column.asc() if sort_order == "asc" else column.desc()
        result = await self.session.execute(
            query.order_by(ordering, Expense.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def get_all(self, user_id: int, **filters) -> List[Expense]:
        result = await self.session.execute(self._filtered(user_id, **filters))
        return list(result.scalars().all())

    async def recent(self, user_id: int, limit: int = 5) -> List[Expense]:
        result = await self.session.execute(
            select(Expense)
            .where(Expense.user_id == user_id)
            .order_by(Expense.date.desc(), Expense.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def total(
        self,
        user_id: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> float:
        """Sum of expense amounts in an optional date window."""
        query = select(func.coalesce(func.sum(Expense.amount), 0)).where(Expense.user_id == user_id)
        if start_date:
            query = query.where(Expense.date >= start_date)
        if end_date:
            query = query.where(Expense.date <= end_date)
        return float(await self.session.scalar(query) or 0)

    async def update(self, db_expense: Expense, changes: schemas.ExpenseUpdate) -> Expense:
        """Apply a partial update."""
        for field, value in changes.model_dump(exclude_unset=True).items():
            setattr(db_expense, field, value)
        await self.session.commit()
        await self.session.refresh(db_expense)
        return db_expense

    async def delete(self, db_expense: Expense) -> None:
        await self.session.delete(db_expense)
        await self.session.commit()

    async def summary(
        self,
        user_id: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> schemas.ExpenseSummary:
        """Totals and per-category breakdown in a date window."""
        expenses = await self.get_all(user_id, start_date=start_date, end_date=end_date)
        breakdown: Dict[str, schemas.CategoryTotals] = {}
        for expense in expenses:
            totals = breakdown.setdefault(expense.category, schemas.CategoryTotals())
            totals.total += float(expense.amount)
            totals.count += 1

        total_amount = sum(float(expense.amount) for expense in expenses)
        return schemas.ExpenseSummary(
            total_amount=total_amount,
            expense_count=len(expenses),
            average_amount=total_amount / len(expenses) if expenses else 0,
            category_breakdown=breakdown,
        )

    async def import_csv(self, user_id: int, file_content: BinaryIO) -> Tuple[bool, str, List[Dict], int]:
        """
        Import expenses from a CSV file.

        The file must have the columns name, amount, category and date; receipt
        and notes are optional. Every row is validated before anything is
        written, so a single bad row rejects the whole file.

        Returns:
            Tuple containing:
            - Success status (bool)
            - Message (str)
            - List of errors if any (List[Dict])
            - Number of imported rows (int)
        """
        try:
            frame = pd.read_csv(io.BytesIO(file_content.read()), dtype=str, keep_default_na=False)
        except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
            return False, f"Error reading file: {e}", [], 0

        missing = [column for column in CSV_COLUMNS if column not in frame.columns]
        if missing:
            return False, f"CSV file must contain {', '.join(repr(c) for c in CSV_COLUMNS)} columns", [], 0
        if frame.empty:
            return False, "CSV file contains no rows", [], 0

        errors = []
        rows = []
        # Start at 2 to account for header row
        for row_num, record in enumerate(frame.to_dict("records"), start=2):
            values = {
                key: value.strip()
                for key, value in record.items()
                if key in CSV_COLUMNS + CSV_OPTIONAL_COLUMNS and value.strip()
            }
            try:
                rows.append(schemas.ExpenseCreate(**values))
            except ValidationError as e:
                for error in e.errors():
                    field = ".".join(str(part) for part in error["loc"]) or "row"
                    errors.append({"row": row_num, "message": f"{field}: {error['msg']}"})

        if errors:
            return False, "Validation errors occurred", errors, 0

        for expense in rows:
            self.session.add(Expense(user_id=user_id, **expense.model_dump()))
        await self.session.commit()
        return True, f"Imported {len(rows)} expenses", [], len(rows)
