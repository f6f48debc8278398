"""Core schemas for the application."""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Money columns are DECIMAL(12, 2)
CENT = Decimal("0.01")
MAX_AMOUNT = 9_999_999_999.99


def to_cents(value: Optional[float]) -> Optional[float]:
    """Round an amount the way the store keeps it, rejecting what does not fit."""
    if value is None:
        return value
    amount = Decimal(str(value))
    if amount >= Decimal(str(MAX_AMOUNT)) + CENT / 2:
        raise ValueError(f"Amount cannot exceed {MAX_AMOUNT:,.2f}")
    return float(amount.quantize(CENT, rounding=ROUND_HALF_UP))


def positive_cents(value: Optional[float]) -> Optional[float]:
    """Like ``to_cents`` but the rounded amount must stay above zero."""
    rounded = to_cents(value)
    if rounded is not None and rounded <= 0:
        raise ValueError("Amount must be at least 0.01")
    return rounded


class ApiSchema(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class HealthCheck(BaseModel):
    """Schema for health check response."""
    service_name: str
    status: str


class ApiResponse(ApiSchema, Generic[T]):
    """Envelope shared by every JSON response."""
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class FieldError(BaseModel):
    """A single rejected request field."""
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Schema for error responses."""
    success: bool = False
    message: str
    errors: Optional[List[FieldError]] = None


class Pagination(ApiSchema):
    """Pagination metadata for list endpoints."""
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(
            current_page=page,
            total_pages=math.ceil(total / limit) if limit else 0,
            total_items=total,
            items_per_page=limit,
        )
