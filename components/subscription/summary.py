"""Read-only subscription aggregates."""

import re
from typing import Dict, Iterable

from components.subscription import schemas

MONTHLY_COST_PATTERN = re.compile(r"(\d+)/month")


def parse_monthly_cost(plan: str) -> int:
    """Monthly cost embedded in a plan string, e.g. "Premium ₹499/month" -> 499."""
    match = MONTHLY_COST_PATTERN.search(plan or "")
    return int(match.group(1)) if match else 0


def summarize(subscriptions: Iterable) -> schemas.SubscriptionSummary:
    """Totals over active subscriptions; callers pass only active rows."""
    subscriptions = list(subscriptions)
    breakdown: Dict[str, schemas.CategoryTotals] = {}
    for subscription in subscriptions:
        totals = breakdown.setdefault(subscription.category, schemas.CategoryTotals())
        totals.total_spend += float(subscription.total_spend)
        totals.count += 1

    recurring = [sub for sub in subscriptions if sub.recurring_payment == "Yes"]
    return schemas.SubscriptionSummary(
        overview=schemas.SubscriptionOverview(
            total_spend=sum(float(sub.total_spend) for sub in subscriptions),
            subscription_count=len(subscriptions),
            recurring_count=len(recurring),
            monthly_recurring_cost=sum(parse_monthly_cost(sub.plan) for sub in recurring),
        ),
        category_breakdown=breakdown,
    )
