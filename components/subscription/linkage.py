"""
Keeps a subscription's linked savings expense in step with the subscription.

A subscription flagged ``link_to_savings_plan`` with a positive
``monthly_amount`` owns exactly one SavingsExpense, referenced by
``savings_expense_id``. Reconciliation is split in two phases:

1. ``plan_create`` / ``plan_update`` / ``plan_delete`` are pure functions that
   look at the current link state and the incoming change and return a
   ``LinkPlan`` (create, update in place, delete, or nothing);
2. ``SubscriptionLinkReconciler.apply`` executes that plan against the
   savings store and returns the ``savings_expense_id`` the subscription must
   carry afterwards.

When an update carries a new ``category`` together with (or without) link
changes, the new category is used to derive the savings category.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from components.savings.repository import SavingsRepository

logger = logging.getLogger(__name__)

CATEGORY_MAP = {
    "Streaming": "Entertainment",
    "Software": "Other",
    "Gym": "Healthcare",
    "Music": "Entertainment",
    "News": "Other",
    "Other": "Other",
}

# Subscription fields whose change can alter the linked expense
LINK_FIELDS = frozenset({"link_to_savings_plan", "monthly_amount", "category"})


def map_category(category: Optional[str]) -> str:
    """Savings expense category for a subscription category."""
    return CATEGORY_MAP.get(category or "Other", "Other")


class LinkAction(str, enum.Enum):
    NONE = "none"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class LinkState:
    """The part of a subscription the linkage depends on."""
    link_to_savings_plan: bool
    monthly_amount: float
    category: str
    savings_expense_id: Optional[int] = None

    @classmethod
    def of(cls, subscription: Any) -> "LinkState":
        return cls(
            link_to_savings_plan=bool(subscription.link_to_savings_plan),
            monthly_amount=float(subscription.monthly_amount or 0),
            category=subscription.category or "Other",
            savings_expense_id=subscription.savings_expense_id,
        )

    @property
    def wants_link(self) -> bool:
        return self.link_to_savings_plan and self.monthly_amount > 0


@dataclass(frozen=True)
class LinkPlan:
    """
    What to do with the linked savings expense.

    ``savings_expense_id`` is the expense the action targets (UPDATE, DELETE)
    or keeps (NONE); ``category`` and ``per_month`` are the values to write
    for CREATE and UPDATE.
    """
    action: LinkAction
    savings_expense_id: Optional[int] = None
    category: Optional[str] = None
    per_month: float = 0


def _plan(state: LinkState) -> LinkPlan:
    if state.wants_link:
        action = LinkAction.UPDATE if state.savings_expense_id else LinkAction.CREATE
        return LinkPlan(
            action=action,
            savings_expense_id=state.savings_expense_id,
            category=map_category(state.category),
            per_month=state.monthly_amount,
        )
    if state.savings_expense_id:
        return LinkPlan(action=LinkAction.DELETE, savings_expense_id=state.savings_expense_id)
    return LinkPlan(action=LinkAction.NONE)


def plan_create(link_to_savings_plan: bool, monthly_amount: float, category: Optional[str]) -> LinkPlan:
    """Plan for a brand new subscription: create an expense or nothing."""
    return _plan(LinkState(
        link_to_savings_plan=bool(link_to_savings_plan),
        monthly_amount=float(monthly_amount or 0),
        category=category or "Other",
    ))


def plan_update(current: LinkState, changes: Mapping[str, Any]) -> LinkPlan:
    """
    Plan for a partial update.

    Fields missing from ``changes`` keep their current value. An update that
    touches none of the link fields leaves the expense alone.
    """
    if not LINK_FIELDS.intersection(changes):
        return LinkPlan(action=LinkAction.NONE, savings_expense_id=current.savings_expense_id)

    effective = LinkState(
        link_to_savings_plan=bool(changes.get("link_to_savings_plan", current.link_to_savings_plan)),
        monthly_amount=float(changes.get("monthly_amount", current.monthly_amount) or 0),
        category=changes.get("category") or current.category,
        savings_expense_id=current.savings_expense_id,
    )
    return _plan(effective)


def plan_delete(current: LinkState) -> LinkPlan:
    """Plan for a soft delete: the expense goes whenever one exists."""
    if current.savings_expense_id:
        return LinkPlan(action=LinkAction.DELETE, savings_expense_id=current.savings_expense_id)
    return LinkPlan(action=LinkAction.NONE)


class SubscriptionLinkReconciler:
    """Applies link plans to the savings store.

    Writes are flushed, not committed; the subscription service commits the
    expense change together with the subscription row.
    """

    def __init__(self, savings: SavingsRepository):
        self.savings = savings

    async def apply(self, user_id: int, plan: LinkPlan) -> Optional[int]:
        """Execute ``plan`` and return the resulting ``savings_expense_id``."""
        if plan.action is LinkAction.CREATE:
            return await self._create(user_id, plan)

        if plan.action is LinkAction.UPDATE:
            expense = await self.savings.get_expense(user_id, plan.savings_expense_id)
            if expense is None:
                logger.warning(
                    "Linked savings expense %s is gone, creating a new one", plan.savings_expense_id
                )
                return await self._create(user_id, plan)
            await self.savings.update_expense(expense, plan.category, plan.per_month, commit=False)
            logger.info("Updated savings expense %s (%s, %.2f/month)", expense.id, plan.category, plan.per_month)
            return expense.id

        if plan.action is LinkAction.DELETE:
            expense = await self.savings.get_expense(user_id, plan.savings_expense_id)
            if expense is not None:
                await self.savings.delete_expense(expense, commit=False)
                logger.info("Deleted savings expense %s", plan.savings_expense_id)
            return None

        return plan.savings_expense_id

    async def _create(self, user_id: int, plan: LinkPlan) -> int:
        expense = await self.savings.create_expense(user_id, plan.category, plan.per_month, commit=False)
        logger.info("Created savings expense %s (%s, %.2f/month)", expense.id, plan.category, plan.per_month)
        return expense.id
