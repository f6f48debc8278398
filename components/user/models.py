"""User model for the database."""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from components.core.database import Base, utcnow


class User(Base):
    """User model representing an account holder."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # Hashed password
    created_at = Column(DateTime, nullable=False, default=utcnow)

    budgets = relationship("Budget", back_populates="user", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="user", cascade="all, delete-orphan")
    subscriptions = relationship("Subscription", back_populates="user", cascade="all, delete-orphan")
