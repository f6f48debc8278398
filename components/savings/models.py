"""Savings plan models for the database."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric

from components.core.database import Base, utcnow


class Income(Base):
    """Monthly income source in a savings plan."""
    __tablename__ = "incomes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    source = Column(String(30), nullable=False, default="Salary")
    amount = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class SavingsExpense(Base):
    """Recurring monthly outflow in a savings plan.

    Rows backing a subscription are referenced from
    ``subscriptions.savings_expense_id``; nothing on this side points back.
    """
    __tablename__ = "savings_expenses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category = Column(String(30), nullable=False, default="Other")
    per_month = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class SavingsBudget(Base):
    """Monthly budget attached to a user's savings plan."""
    __tablename__ = "savings_budgets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    monthly_budget = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
