"""Dashboard aggregation over budgets, expenses, savings and subscriptions."""

from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from components.budget.repository import BudgetRepository
from components.core.database import utcnow
from components.dashboard import schemas
from components.expense import schemas as expense_schemas
from components.expense.repository import ExpenseRepository
from components.savings.repository import SavingsRepository
from components.subscription.repository import SubscriptionRepository


def period_start(period: str, now: Optional[datetime] = None) -> datetime:
    """First instant of the current week (Monday), month or year."""
    now = now or utcnow()
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "week":
        return today - timedelta(days=today.weekday())
    if period == "year":
        return today.replace(month=1, day=1)
    return today.replace(day=1)


def category_totals(expenses: Iterable) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, 0.0) + float(expense.amount)
    return totals


def compute_overview(
    total_budget: float,
    total_expenses: float,
    total_income: float,
    savings_expenses: float,
    savings_budget: float,
    budget_count: int = 0,
    expense_count: int = 0,
    subscription_count: int = 0,
) -> schemas.Overview:
    """
    Combine budgets, expenses and the savings plan into headline figures.

    Savings expenses include the ones backing subscriptions, so subscription
    costs are counted once through them.
    monthly_savings = income - (expenses + savings expenses).
    """
    actual_expenses = total_expenses + savings_expenses
    return schemas.Overview(
        total_budget=total_budget,
        total_expenses=total_expenses,
        budget_count=budget_count,
        expense_count=expense_count,
        remaining_budget=total_budget - total_expenses,
        total_income=total_income,
        savings_expenses=savings_expenses,
        savings_budget=savings_budget,
        combined_budget=total_budget + savings_budget,
        actual_expenses=actual_expenses,
        monthly_savings=total_income - actual_expenses,
        subscription_count=subscription_count,
    )


class DashboardService:
    """Read-only dashboard queries."""

    def __init__(self, session: AsyncSession):
        self.budgets = BudgetRepository(session)
        self.expenses = ExpenseRepository(session)
        self.savings = SavingsRepository(session)
        self.subscriptions = SubscriptionRepository(session)

    async def overview(self, user_id: int, period: str = "month") -> schemas.DashboardOverview:
        start = period_start(period)
        budgets = await self.budgets.get_all(user_id)
        expenses = await self.expenses.get_all(user_id, start_date=start)
        savings = await self.savings.summary(user_id)

        overview = compute_overview(
            total_budget=sum(float(budget.amount) for budget in budgets),
            total_expenses=sum(float(expense.amount) for expense in expenses),
            total_income=savings.income.total,
            savings_expenses=savings.expenses.monthly,
            savings_budget=savings.budget.monthly,
            budget_count=len(budgets),
            expense_count=len(expenses),
            subscription_count=await self.subscriptions.count_active(user_id),
        )

        recent_budgets = sorted(budgets, key=lambda budget: budget.created_at, reverse=True)[:5]
        return schemas.DashboardOverview(
            period=period,
            overview=overview,
            recent=schemas.Recent(
                expenses=[
                    expense_schemas.Expense.model_validate(expense)
                    for expense in await self.expenses.recent(user_id)
                ],
                budgets=await self.budgets.with_spending(recent_budgets),
            ),
            breakdowns=schemas.Breakdowns(category_expenses=category_totals(expenses)),
        )

    async def quick_stats(self, user_id: int) -> schemas.QuickStats:
        now = utcnow()
        return schemas.QuickStats(
            today_expenses=await self.expenses.total(
                user_id, start_date=now.replace(hour=0, minute=0, second=0, microsecond=0)
            ),
            week_expenses=await self.expenses.total(user_id, start_date=period_start("week", now)),
            month_expenses=await self.expenses.total(user_id, start_date=period_start("month", now)),
            active_budgets=len(await self.budgets.get_all(user_id)),
            active_subscriptions=await self.subscriptions.count_active(user_id),
        )

    async def activity_feed(self, user_id: int, limit: int = 20) -> List[schemas.Activity]:
        activities = [
            schemas.Activity(
                type="expense", id=expense.id, title=expense.name, amount=float(expense.amount),
                category=expense.category, created_at=expense.created_at,
            )
            for expense in await self.expenses.recent(user_id, limit=limit)
        ]
        activities += [
            schemas.Activity(
                type="budget", id=budget.id, title=budget.name, amount=float(budget.amount),
                category=budget.category, created_at=budget.created_at,
            )
            for budget in await self.budgets.get_all(user_id)
        ]
        activities += [
            schemas.Activity(
                type="subscription", id=sub.id, title=sub.name, amount=float(sub.total_spend),
                category=sub.category, created_at=sub.created_at,
            )
            for sub in await self.subscriptions.all_active(user_id)
        ]
        activities.sort(key=lambda activity: activity.created_at, reverse=True)
        return activities[:limit]
