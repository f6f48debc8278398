"""Pydantic schemas for expense analytics."""

from typing import Dict, List, Optional

from components.core.schemas import ApiSchema


class MonthTotal(ApiSchema):
    month: int
    total: float
    count: int


class AnalyticsSummary(ApiSchema):
    """Schema for a one-year expense breakdown."""
    year: int
    months: List[MonthTotal]
    categories: Dict[str, float]
    year_total: float
    average_monthly: float
    highest_month: Optional[int] = None


class YearTrend(ApiSchema):
    year: int
    total: float
    count: int
    change_percentage: Optional[float] = None


class AnalyticsTrends(ApiSchema):
    years: List[YearTrend]
