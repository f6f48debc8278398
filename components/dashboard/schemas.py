"""Pydantic schemas for dashboard responses."""

from datetime import datetime
from typing import Dict, List, Literal

from components.budget.schemas import Budget
from components.core.schemas import ApiSchema
from components.expense.schemas import Expense

Period = Literal["week", "month", "year"]


class Overview(ApiSchema):
    """Headline figures for the dashboard."""
    total_budget: float
    total_expenses: float
    budget_count: int
    expense_count: int
    remaining_budget: float
    total_income: float
    savings_expenses: float
    savings_budget: float
    combined_budget: float
    actual_expenses: float
    monthly_savings: float
    subscription_count: int


class Recent(ApiSchema):
    expenses: List[Expense]
    budgets: List[Budget]


class Breakdowns(ApiSchema):
    category_expenses: Dict[str, float]


class DashboardOverview(ApiSchema):
    period: Period
    overview: Overview
    recent: Recent
    breakdowns: Breakdowns


class QuickStats(ApiSchema):
    today_expenses: float
    week_expenses: float
    month_expenses: float
    active_budgets: int
    active_subscriptions: int


class Activity(ApiSchema):
    type: Literal["expense", "budget", "subscription"]
    id: int
    title: str
    amount: float
    category: str
    created_at: datetime


class ActivityFeed(ApiSchema):
    activities: List[Activity]
