"""Analytics endpoints for the API."""

from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.analytics.service import AnalyticsService
from components.analytics import schemas
from components.core.init_db import get_db
from components.core.schemas import ApiResponse
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/summary", response_model=ApiResponse[schemas.AnalyticsSummary])
async def analytics_summary(
    year: Optional[int] = Query(None, ge=1970, le=2100, description="Year to analyze (defaults to current year)"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get expense analytics for a year.

    Returns:
    - Monthly totals and counts for all twelve months
    - Totals per category, largest first
    - Year total, average per month and the month with the highest spend
    """
    return ApiResponse(data=await AnalyticsService(db).summary(current_user.id, year))


@router.get("/trends", response_model=ApiResponse[schemas.AnalyticsTrends])
async def analytics_trends(
    years: int = Query(3, ge=1, le=10, description="Number of years up to the current one"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """Yearly expense totals with year-over-year change."""
    return ApiResponse(data=await AnalyticsService(db).trends(current_user.id, years))
