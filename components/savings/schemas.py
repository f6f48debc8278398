"""Pydantic schemas for savings plan data validation."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, computed_field, field_validator

from components.core.schemas import ApiSchema, to_cents

IncomeSource = Literal["Salary", "Part Time", "Commissions", "Freelance", "Investment", "Other"]
SavingsCategory = Literal[
    "Rent", "Electricity", "Appliances", "Food", "Transport",
    "Healthcare", "Entertainment", "Other",
]


class IncomeCreate(ApiSchema):
    source: IncomeSource = "Salary"
    amount: float = Field(0, ge=0)

    @field_validator("amount")
    @classmethod
    def cents(cls, value):
        return to_cents(value)


class IncomeUpdate(ApiSchema):
    source: Optional[IncomeSource] = None
    amount: Optional[float] = Field(None, ge=0)

    @field_validator("source", "amount")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    @field_validator("amount")
    @classmethod
    def cents(cls, value):
        return to_cents(value)


class Income(ApiSchema):
    """Schema for income response."""
    id: int
    source: str
    amount: float
    created_at: datetime


class SavingsExpenseCreate(ApiSchema):
    category: SavingsCategory = "Other"
    per_month: float = Field(0, ge=0)

    @field_validator("per_month")
    @classmethod
    def cents(cls, value):
        return to_cents(value)


class SavingsExpenseUpdate(ApiSchema):
    category: Optional[SavingsCategory] = None
    per_month: Optional[float] = Field(None, ge=0)

    @field_validator("category", "per_month")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    @field_validator("per_month")
    @classmethod
    def cents(cls, value):
        return to_cents(value)


class SavingsExpense(ApiSchema):
    """Schema for savings expense response."""
    id: int
    category: str
    per_month: float
    subscription_managed: bool = False
    created_at: datetime

    @computed_field(alias="perYear")
    @property
    def per_year(self) -> float:
        return self.per_month * 12


class SavingsBudgetSet(ApiSchema):
    monthly_budget: float = Field(..., ge=0)

    @field_validator("monthly_budget")
    @classmethod
    def cents(cls, value):
        return to_cents(value)


class SavingsBudget(ApiSchema):
    monthly_budget: float = 0


class IncomeData(ApiSchema):
    income: Income


class IncomeList(ApiSchema):
    incomes: List[Income]


class SavingsExpenseData(ApiSchema):
    expense: SavingsExpense


class SavingsExpenseList(ApiSchema):
    expenses: List[SavingsExpense]


class IncomeTotals(ApiSchema):
    total: float
    breakdown: List[Income]


class ExpenseTotals(ApiSchema):
    monthly: float
    yearly: float
    breakdown: List[SavingsExpense]


class BudgetTotals(ApiSchema):
    monthly: float


class SavingsSummary(ApiSchema):
    """Schema for the savings plan summary."""
    income: IncomeTotals
    expenses: ExpenseTotals
    budget: BudgetTotals
    monthly_savings: float
    alerts: List[str] = []
