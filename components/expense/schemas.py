"""Pydantic schemas for expense data validation."""

from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from components.core.database import utcnow
from components.core.schemas import ApiSchema, Pagination, positive_cents

ExpenseCategory = Literal[
    "Shopping", "Rent", "Food", "Transport", "Entertainment",
    "Healthcare", "Education", "Home", "Other",
]


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class ExpenseCreate(ApiSchema):
    """Schema for expense creation."""
    name: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., gt=0)
    category: ExpenseCategory = "Other"
    date: datetime = Field(default_factory=utcnow)
    receipt: bool = False
    budget_id: Optional[int] = None
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator("amount")
    @classmethod
    def cents(cls, value):
        return positive_cents(value)

    @field_validator("date")
    @classmethod
    def naive_utc(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class ExpenseUpdate(ApiSchema):
    """Schema for partial expense update."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    amount: Optional[float] = Field(None, gt=0)
    category: Optional[ExpenseCategory] = None
    date: Optional[datetime] = None
    receipt: Optional[bool] = None
    budget_id: Optional[int] = None
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator("name", "amount", "category", "date", "receipt")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    @field_validator("amount")
    @classmethod
    def cents(cls, value):
        return positive_cents(value)

    @field_validator("date")
    @classmethod
    def naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value) if value is not None else value


class Expense(ApiSchema):
    """Schema for expense response."""
    id: int
    name: str
    amount: float
    category: str
    date: datetime
    receipt: bool
    budget_id: Optional[int] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ExpenseData(ApiSchema):
    expense: Expense


class ExpenseList(ApiSchema):
    expenses: List[Expense]
    pagination: Pagination


class CategoryTotals(ApiSchema):
    total: float = 0
    count: int = 0


class ExpenseSummary(ApiSchema):
    """Schema for expense summary overview."""
    total_amount: float
    expense_count: int
    average_amount: float
    category_breakdown: Dict[str, CategoryTotals]


class ImportRowError(BaseModel):
    """Schema for a rejected CSV row."""
    row: int
    message: str


class ImportResult(ApiSchema):
    """Schema for expense import response."""
    imported: int = 0
    errors: Optional[List[ImportRowError]] = None
