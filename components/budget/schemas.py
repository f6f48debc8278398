"""Pydantic schemas for budget data validation."""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import Field, field_validator

from components.core.schemas import ApiSchema, Pagination, to_cents

BudgetCategory = Literal[
    "Shopping", "Food", "Transport", "Entertainment",
    "Healthcare", "Education", "Home", "Other",
]


class BudgetCreate(ApiSchema):
    """Schema for budget creation."""
    name: str = Field(..., min_length=1, max_length=100)
    category: BudgetCategory = "Other"
    amount: float = Field(..., ge=0)
    color: str = "blue"
    icon: Optional[str] = Field(None, max_length=20)

    @field_validator("amount")
    @classmethod
    def cents(cls, value):
        return to_cents(value)


class BudgetUpdate(ApiSchema):
    """Schema for partial budget update."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[BudgetCategory] = None
    amount: Optional[float] = Field(None, ge=0)
    color: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=20)

    @field_validator("name", "category", "amount", "color")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    @field_validator("amount")
    @classmethod
    def cents(cls, value):
        return to_cents(value)


class Budget(ApiSchema):
    """Schema for budget response."""
    id: int
    name: str
    category: str
    amount: float
    color: str
    icon: Optional[str] = None
    spent: float = 0
    remaining: float = 0
    created_at: datetime
    updated_at: datetime


class BudgetData(ApiSchema):
    budget: Budget


class BudgetList(ApiSchema):
    budgets: List[Budget]
    pagination: Pagination


class CategoryTotals(ApiSchema):
    amount: float = 0
    spent: float = 0
    count: int = 0


class BudgetSummary(ApiSchema):
    """Schema for budget summary overview."""
    total_budget: float
    total_spent: float
    remaining: float
    budget_count: int
    category_breakdown: Dict[str, CategoryTotals]
