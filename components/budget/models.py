"""Budget model for the database."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from components.core.database import Base, utcnow


class Budget(Base):
    """Category spending limit set by a user."""
    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    category = Column(String(30), nullable=False, default="Other")
    amount = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    color = Column(String(30), nullable=False, default="blue")
    icon = Column(String(20), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="budgets")
    expenses = relationship("Expense", back_populates="budget")
