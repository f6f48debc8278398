"""Repository for subscription operations.

Reads go through the *active* methods only; soft-deleted subscriptions are
invisible to them.
"""

from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from components.subscription.models import Subscription
from components.subscription import schemas

SORT_COLUMNS = {
    "createdAt": Subscription.created_at,
    "name": Subscription.name,
    "totalSpend": Subscription.total_spend,
    "nextPaymentDate": Subscription.next_payment_date,
    "category": Subscription.category,
    "monthlyAmount": Subscription.monthly_amount,
}


class SubscriptionRepository:
    """Repository for subscription operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    def _active(self, user_id: int):
        return select(Subscription).where(
            Subscription.user_id == user_id,
            Subscription.is_active.is_(True),
        )

    def _filtered(
        self,
        user_id: int,
        category: Optional[str] = None,
        search: Optional[str] = None,
        recurring_payment: Optional[str] = None,
    ):
        query = self._active(user_id)
        if category and category != "All":
            query = query.where(Subscription.category == category)
        if search:
            query = query.where(func.lower(Subscription.name).contains(search.lower(), autoescape=True))
        if recurring_payment and recurring_payment != "All":
            query = query.where(Subscription.recurring_payment == recurring_payment)
        return query

    async def list_active(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        **filters,
    ) -> List[Subscription]:
        """Get a page of active subscriptions."""
        column = SORT_COLUMNS.get(sort_by, Subscription.created_at)
        ordering = column.asc() if sort_order == "asc" else column.desc()
        result = await self.session.execute(
            self._filtered(user_id, **filters)
            .order_by(ordering, Subscription.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_active(self, user_id: int, **filters) -> int:
        query = self._filtered(user_id, **filters)
        total = await self.session.scalar(select(func.count()).select_from(query.subquery()))
        return total or 0

    async def get_active(self, user_id: int, subscription_id: int) -> Optional[Subscription]:
        """Get an active subscription owned by the user."""
        result = await self.session.execute(
            self._active(user_id).where(Subscription.id == subscription_id)
        )
        return result.scalar_one_or_none()

    async def all_active(self, user_id: int) -> List[Subscription]:
        result = await self.session.execute(self._active(user_id))
        return list(result.scalars().all())

    async def add(
        self,
        user_id: int,
        subscription: schemas.SubscriptionCreate,
        savings_expense_id: Optional[int] = None,
    ) -> Subscription:
        """Stage a new subscription; the caller commits."""
        db_subscription = Subscription(
            user_id=user_id,
            savings_expense_id=savings_expense_id,
            **subscription.model_dump(),
        )
        self.session.add(db_subscription)
        await self.session.flush()
        return db_subscription

    async def apply(self, db_subscription: Subscription, values: Dict[str, Any]) -> Subscription:
        """Stage field changes; the caller commits."""
        for field, value in values.items():
            setattr(db_subscription, field, value)
        await self.session.flush()
        return db_subscription

    async def deactivate(self, db_subscription: Subscription) -> Subscription:
        """Soft delete; the caller commits."""
        return await self.apply(db_subscription, {"is_active": False, "savings_expense_id": None})
