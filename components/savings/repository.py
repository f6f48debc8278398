"""Repository for savings plan operations."""

from typing import List, Optional, Set

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.savings.models import Income, SavingsBudget, SavingsExpense
from components.savings import schemas
from components.savings.summary import build_summary
from components.subscription.models import Subscription


class SavingsRepository:
    """Repository for incomes, savings expenses and the savings budget.

    Expense mutations take ``commit=False`` when they are one step of a larger
    unit of work (subscription linking); the caller commits.
    """

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def _finish(self, commit: bool, instance=None) -> None:
        if commit:
            await self.session.commit()
            if instance is not None:
                await self.session.refresh(instance)
        else:
            await self.session.flush()

    # Income

    async def get_incomes(self, user_id: int) -> List[Income]:
        result = await self.session.execute(
            select(Income).where(Income.user_id == user_id).order_by(Income.id)
        )
        return list(result.scalars().all())

    async def get_income(self, user_id: int, income_id: int) -> Optional[Income]:
        result = await self.session.execute(
            select(Income).where(Income.id == income_id, Income.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def create_income(self, user_id: int, income: schemas.IncomeCreate) -> Income:
        db_income = Income(user_id=user_id, **income.model_dump())
        self.session.add(db_income)
        await self._finish(True, db_income)
        return db_income

    async def update_income(self, db_income: Income, changes: schemas.IncomeUpdate) -> Income:
        for field, value in changes.model_dump(exclude_unset=True).items():
            setattr(db_income, field, value)
        await self._finish(True, db_income)
        return db_income

    async def delete_income(self, db_income: Income) -> None:
        await self.session.delete(db_income)
        await self._finish(True)

    # Savings expenses

    async def get_expenses(self, user_id: int) -> List[SavingsExpense]:
        result = await self.session.execute(
            select(SavingsExpense).where(SavingsExpense.user_id == user_id).order_by(SavingsExpense.id)
        )
        return list(result.scalars().all())

    async def get_expense(self, user_id: int, expense_id: int) -> Optional[SavingsExpense]:
        result = await self.session.execute(
            select(SavingsExpense).where(
                SavingsExpense.id == expense_id,
                SavingsExpense.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def create_expense(
        self, user_id: int, category: str, per_month: float, commit: bool = True
    ) -> SavingsExpense:
        db_expense = SavingsExpense(user_id=user_id, category=category, per_month=per_month)
        self.session.add(db_expense)
        await self._finish(commit, db_expense)
        return db_expense

    async def update_expense(
        self, db_expense: SavingsExpense, category: str, per_month: float, commit: bool = True
    ) -> SavingsExpense:
        db_expense.category = category
        db_expense.per_month = per_month
        await self._finish(commit, db_expense)
        return db_expense

    async def delete_expense(self, db_expense: SavingsExpense, commit: bool = True) -> None:
        await self.session.delete(db_expense)
        await self._finish(commit)

    async def subscription_for_expense(self, user_id: int, expense_id: int) -> Optional[Subscription]:
        """The subscription that owns a savings expense, if any."""
        result = await self.session.execute(
            select(Subscription).where(
                Subscription.user_id == user_id,
                Subscription.savings_expense_id == expense_id,
            )
        )
        return result.scalars().first()

    async def subscription_expense_ids(self, user_id: int) -> Set[int]:
        result = await self.session.execute(
            select(Subscription.savings_expense_id).where(
                Subscription.user_id == user_id,
                Subscription.savings_expense_id.is_not(None),
            )
        )
        return set(result.scalars().all())

    async def describe_expenses(self, user_id: int) -> List[schemas.SavingsExpense]:
        """Savings expenses flagged with whether a subscription manages them."""
        managed = await self.subscription_expense_ids(user_id)
        items = []
        for expense in await self.get_expenses(user_id):
            item = schemas.SavingsExpense.model_validate(expense)
            item.subscription_managed = expense.id in managed
            items.append(item)
        return items

    # Budget

    async def get_budget(self, user_id: int) -> float:
        result = await self.session.execute(
            select(SavingsBudget.monthly_budget).where(SavingsBudget.user_id == user_id)
        )
        return float(result.scalar_one_or_none() or 0)

    async def set_budget(self, user_id: int, monthly_budget: float) -> float:
        result = await self.session.execute(
            select(SavingsBudget).where(SavingsBudget.user_id == user_id)
        )
        db_budget = result.scalar_one_or_none()
        if db_budget is None:
            db_budget = SavingsBudget(user_id=user_id, monthly_budget=monthly_budget)
            self.session.add(db_budget)
        else:
            db_budget.monthly_budget = monthly_budget
        await self._finish(True, db_budget)
        return float(db_budget.monthly_budget)

    async def summary(self, user_id: int) -> schemas.SavingsSummary:
        incomes = [schemas.Income.model_validate(income) for income in await self.get_incomes(user_id)]
        return build_summary(
            incomes,
            await self.describe_expenses(user_id),
            await self.get_budget(user_id),
        )
