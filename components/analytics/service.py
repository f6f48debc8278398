"""Expense analytics computed with pandas."""

from datetime import datetime
from typing import Iterable, List, Optional

import pandas as pd
from sqlalchemy.ext.asyncio import AsyncSession

from components.analytics import schemas
from components.core.database import utcnow
from components.expense.repository import ExpenseRepository

COLUMNS = ["date", "amount", "category"]


def expense_frame(expenses: Iterable) -> pd.DataFrame:
    """Tabulate expense rows as date / amount / category."""
    frame = pd.DataFrame(
        [(expense.date, float(expense.amount), expense.category) for expense in expenses],
        columns=COLUMNS,
    )
    frame["date"] = pd.to_datetime(frame["date"])
    frame["amount"] = frame["amount"].astype(float)
    return frame


def year_summary(frame: pd.DataFrame, year: int) -> schemas.AnalyticsSummary:
    """Per-month and per-category totals for one calendar year."""
    frame = frame[frame["date"].dt.year == year]
    grouped = frame.groupby(frame["date"].dt.month)["amount"]
    totals = grouped.sum().reindex(range(1, 13), fill_value=0.0)
    counts = grouped.count().reindex(range(1, 13), fill_value=0)

    months = [
        schemas.MonthTotal(month=int(month), total=float(totals[month]), count=int(counts[month]))
        for month in range(1, 13)
    ]
    categories = frame.groupby("category")["amount"].sum().sort_values(ascending=False)
    year_total = float(totals.sum())
    return schemas.AnalyticsSummary(
        year=year,
        months=months,
        categories={str(name): float(total) for name, total in categories.items()},
        year_total=year_total,
        average_monthly=year_total / 12,
        highest_month=int(totals.idxmax()) if year_total > 0 else None,
    )


def _change(previous: float, current: float) -> Optional[float]:
    if previous == 0:
        return None
    return round((current - previous) / previous * 100, 2)


def year_trends(frame: pd.DataFrame, last_year: int, years: int) -> List[schemas.YearTrend]:
    """Yearly totals for ``years`` years ending at ``last_year``."""
    span = range(last_year - years + 1, last_year + 1)
    grouped = frame.groupby(frame["date"].dt.year)["amount"]
    totals = grouped.sum().reindex(span, fill_value=0.0)
    counts = grouped.count().reindex(span, fill_value=0)

    trends = []
    previous = None
    for year in span:
        total = float(totals[year])
        trends.append(schemas.YearTrend(
            year=year,
            total=total,
            count=int(counts[year]),
            change_percentage=_change(previous, total) if previous is not None else None,
        ))
        previous = total
    return trends


class AnalyticsService:
    """Expense analytics for one user."""

    def __init__(self, session: AsyncSession):
        self.expenses = ExpenseRepository(session)

    async def summary(self, user_id: int, year: Optional[int] = None) -> schemas.AnalyticsSummary:
        year = year or utcnow().year
        expenses = await self.expenses.get_all(
            user_id,
            start_date=datetime(year, 1, 1),
            end_date=datetime(year, 12, 31, 23, 59, 59, 999999),
        )
        return year_summary(expense_frame(expenses), year)

    async def trends(self, user_id: int, years: int = 3) -> schemas.AnalyticsTrends:
        last_year = utcnow().year
        expenses = await self.expenses.get_all(
            user_id, start_date=datetime(last_year - years + 1, 1, 1)
        )
        return schemas.AnalyticsTrends(years=year_trends(expense_frame(expenses), last_year, years))
