"""Subscription model for the database."""

from sqlalchemy import Boolean, Column, Integer, String, DateTime, ForeignKey, Index, Numeric
from sqlalchemy.orm import relationship

from components.core.database import Base, utcnow


class Subscription(Base):
    """Paid service tracked by a user, optionally counted in the savings plan."""
    __tablename__ = "subscriptions"
    __table_args__ = (
        Index("ix_subscriptions_user_active", "user_id", "is_active"),
        Index("ix_subscriptions_user_category", "user_id", "category"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), nullable=False)
    plan = Column(String(50), nullable=False)
    total_spend = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    duration = Column(String(50), nullable=False)
    recurring_payment = Column(String(3), nullable=False, default="Yes")
    color = Column(String(30), nullable=False, default="blue")
    next_payment_date = Column(DateTime, nullable=True)
    category = Column(String(20), nullable=False, default="Other")
    link_to_savings_plan = Column(Boolean, nullable=False, default=False)
    monthly_amount = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    # Owned by the subscription; set only while linked with a positive amount
    savings_expense_id = Column(
        Integer, ForeignKey("savings_expenses.id", ondelete="SET NULL"), nullable=True
    )
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="subscriptions")
