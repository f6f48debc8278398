"""Pydantic schemas for subscription data validation."""

from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import Field, field_validator

from components.core.schemas import ApiSchema, Pagination, to_cents

SubscriptionCategory = Literal["Streaming", "Software", "Gym", "Music", "News", "Other"]
RecurringPayment = Literal["Yes", "No"]


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class SubscriptionCreate(ApiSchema):
    """Schema for subscription creation."""
    name: str = Field(..., min_length=1, max_length=100)
    plan: str = Field(..., min_length=1, max_length=50)
    total_spend: float = Field(..., ge=0)
    duration: str = Field(..., min_length=1, max_length=50)
    recurring_payment: RecurringPayment
    color: str = "blue"
    category: SubscriptionCategory = "Other"
    next_payment_date: Optional[datetime] = None
    link_to_savings_plan: bool = False
    monthly_amount: float = Field(0, ge=0)

    @field_validator("name", "plan", "duration")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field cannot be empty")
        return value

    @field_validator("color", "category", "link_to_savings_plan", "monthly_amount", mode="before")
    @classmethod
    def default_when_null(cls, value, info):
        # Optional fields sent as null fall back to their defaults
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("total_spend", "monthly_amount")
    @classmethod
    def cents(cls, value):
        return to_cents(value)

    @field_validator("next_payment_date")
    @classmethod
    def naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive_utc(value)


class SubscriptionUpdate(ApiSchema):
    """Schema for partial subscription update."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    plan: Optional[str] = Field(None, min_length=1, max_length=50)
    total_spend: Optional[float] = Field(None, ge=0)
    duration: Optional[str] = Field(None, min_length=1, max_length=50)
    recurring_payment: Optional[RecurringPayment] = None
    color: Optional[str] = None
    category: Optional[SubscriptionCategory] = None
    next_payment_date: Optional[datetime] = None
    link_to_savings_plan: Optional[bool] = None
    monthly_amount: Optional[float] = Field(None, ge=0)

    @field_validator(
        "name", "plan", "total_spend", "duration", "recurring_payment",
        "color", "category", "link_to_savings_plan", "monthly_amount",
    )
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        if isinstance(value, str) and not value.strip():
            raise ValueError("Field cannot be empty")
        return value

    @field_validator("total_spend", "monthly_amount")
    @classmethod
    def cents(cls, value):
        return to_cents(value)

    @field_validator("next_payment_date")
    @classmethod
    def naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive_utc(value)


class Subscription(ApiSchema):
    """Schema for subscription response."""
    id: int
    name: str
    plan: str
    total_spend: float
    duration: str
    recurring_payment: str
    color: str
    next_payment_date: Optional[datetime] = None
    category: str
    link_to_savings_plan: bool
    monthly_amount: float
    savings_expense_id: Optional[int] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class SubscriptionData(ApiSchema):
    subscription: Subscription


class SubscriptionList(ApiSchema):
    subscriptions: List[Subscription]
    pagination: Pagination


class CategoryTotals(ApiSchema):
    total_spend: float = 0
    count: int = 0


class SubscriptionOverview(ApiSchema):
    total_spend: float
    subscription_count: int
    recurring_count: int
    monthly_recurring_cost: int


class SubscriptionSummary(ApiSchema):
    """Schema for the subscription summary overview."""
    overview: SubscriptionOverview
    category_breakdown: Dict[str, CategoryTotals]
