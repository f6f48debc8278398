"""Repository for budget operations."""

from typing import Dict, List, Optional, Tuple
from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from components.budget.models import Budget
from components.budget import schemas
from components.expense.models import Expense


class BudgetRepository:
    """Repository for budget operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, user_id: int, budget: schemas.BudgetCreate) -> Budget:
        """Create a new budget."""
        db_budget = Budget(user_id=user_id, **budget.model_dump())
        self.session.add(db_budget)
        await self.session.commit()
        await self.session.refresh(db_budget)
        return db_budget

    async def get(self, user_id: int, budget_id: int) -> Optional[Budget]:
        """Get a budget owned by the user."""
        result = await self.session.execute(
            select(Budget).where(Budget.id == budget_id, Budget.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_page(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 10,
        category: Optional[str] = None,
    ) -> Tuple[List[Budget], int]:
        """Get a page of budgets and the total count."""
        query = select(Budget).where(Budget.user_id == user_id)
        if category and category != "All":
            query = query.where(Budget.category == category)

        total = await self.session.scalar(
            select(func.count()).select_from(query.subquery())
        )
        result = await self.session.execute(
            query.order_by(Budget.created_at.desc(), Budget.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def get_all(self, user_id: int) -> List[Budget]:
        result = await self.session.execute(
            select(Budget).where(Budget.user_id == user_id)
        )
        return list(result.scalars().all())

    async def update(self, db_budget: Budget, changes: schemas.BudgetUpdate) -> Budget:
        """Apply a partial update."""
        for field, value in changes.model_dump(exclude_unset=True).items():
            setattr(db_budget, field, value)
        await self.session.commit()
        await self.session.refresh(db_budget)
        return db_budget

    async def delete(self, db_budget: Budget) -> None:
        """Delete a budget and unlink its expenses."""
        await self.session.execute(
            update(Expense).where(Expense.budget_id == db_budget.id).values(budget_id=None)
        )
        await self.session.delete(db_budget)
        await self.session.commit()

    async def spent_by_budget(self, budget_ids: List[int]) -> Dict[int, float]:
        """Sum of linked expenses per budget."""
        if not budget_ids:
            return {}
        result = await self.session.execute(
            select(Expense.budget_id, func.coalesce(func.sum(Expense.amount), 0))
            .where(Expense.budget_id.in_(budget_ids))
            .group_by(Expense.budget_id)
        )
        return {budget_id: float(total) for budget_id, total in result.all()}

    async def with_spending(self, budgets: List[Budget]) -> List[schemas.Budget]:
        """Attach spent/remaining to budget rows."""
        spent = await self.spent_by_budget([budget.id for budget in budgets])
        items = []
        for budget in budgets:
            item = schemas.Budget.model_validate(budget)
            item.spent = spent.get(budget.id, 0.0)
            item.remaining = float(budget.amount) - item.spent
            items.append(item)
        return items

    async def summary(self, user_id: int) -> schemas.BudgetSummary:
        """Totals across all of the user's budgets."""
        budgets = await self.with_spending(await self.get_all(user_id))
        breakdown: Dict[str, schemas.CategoryTotals] = {}
        for budget in budgets:
            totals = breakdown.setdefault(budget.category, schemas.CategoryTotals())
            totals.amount += budget.amount
            totals.spent += budget.spent
            totals.count += 1

        total_budget = sum(budget.amount for budget in budgets)
        total_spent = sum(budget.spent for budget in budgets)
        return schemas.BudgetSummary(
            total_budget=total_budget,
            total_spent=total_spent,
            remaining=total_budget - total_spent,
            budget_count=len(budgets),
            category_breakdown=breakdown,
        )
