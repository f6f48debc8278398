"""Expense model for the database."""

from sqlalchemy import Boolean, Column, Integer, String, DateTime, ForeignKey, Numeric, Text
from sqlalchemy.orm import relationship

from components.core.database import Base, utcnow


class Expense(Base):
    """A single recorded spend."""
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    budget_id = Column(Integer, ForeignKey("budgets.id", ondelete="SET NULL"), nullable=True, index=True)
    name = Column(String(100), nullable=False)
    amount = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    category = Column(String(30), nullable=False, default="Other")
    date = Column(DateTime, nullable=False, default=utcnow, index=True)
    receipt = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="expenses")
    budget = relationship("Budget", back_populates="expenses")
