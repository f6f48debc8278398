"""Subscription mutations with savings plan linkage."""

import logging
from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from components.savings.repository import SavingsRepository
from components.subscription import linkage, schemas
from components.subscription.models import Subscription
from components.subscription.repository import SubscriptionRepository
from components.subscription.summary import summarize

logger = logging.getLogger(__name__)


class SubscriptionService:
    """
    Creates, updates and soft-deletes subscriptions.

    The linked savings expense is reconciled before the subscription row is
    written, and both changes are committed in one transaction. Any store
    error propagates and nothing is committed.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.subscriptions = SubscriptionRepository(session)
        self.reconciler = linkage.SubscriptionLinkReconciler(SavingsRepository(session))

    async def create(self, user_id: int, data: schemas.SubscriptionCreate) -> Subscription:
        plan = linkage.plan_create(data.link_to_savings_plan, data.monthly_amount, data.category)
        savings_expense_id = await self.reconciler.apply(user_id, plan)
        subscription = await self.subscriptions.add(user_id, data, savings_expense_id=savings_expense_id)
        await self.session.commit()
        await self.session.refresh(subscription)
        logger.info("Created subscription %s (link: %s)", subscription.id, plan.action.value)
        return subscription

    async def update(self, subscription: Subscription, changes: schemas.SubscriptionUpdate) -> Subscription:
        values = changes.model_dump(exclude_unset=True)
        plan = linkage.plan_update(linkage.LinkState.of(subscription), values)
        values["savings_expense_id"] = await self.reconciler.apply(subscription.user_id, plan)
        await self.subscriptions.apply(subscription, values)
        await self.session.commit()
        await self.session.refresh(subscription)
        logger.info("Updated subscription %s (link: %s)", subscription.id, plan.action.value)
        return subscription

    async def delete(self, subscription: Subscription) -> None:
        plan = linkage.plan_delete(linkage.LinkState.of(subscription))
        await self.reconciler.apply(subscription.user_id, plan)
        await self.subscriptions.deactivate(subscription)
        await self.session.commit()
        logger.info("Deleted subscription %s (link: %s)", subscription.id, plan.action.value)

    async def page(self, user_id: int, page: int, limit: int, **options) -> Tuple[List[Subscription], int]:
        sort_by = options.pop("sort_by", "createdAt")
        sort_order = options.pop("sort_order", "desc")
        items = await self.subscriptions.list_active(
            user_id, page=page, limit=limit, sort_by=sort_by, sort_order=sort_order, **options
        )
        total = await self.subscriptions.count_active(user_id, **options)
        return items, total

    async def summary(self, user_id: int) -> schemas.SubscriptionSummary:
        return summarize(await self.subscriptions.all_active(user_id))
