"""
User and preference database models.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from curio_finance.database import Base


class User(Base):
    """Application user. Authentication lives outside this service."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    preferences = relationship("UserPreference", back_populates="user", uselist=False)
    categories = relationship("Category", back_populates="user")
    payment_methods = relationship("PaymentMethod", back_populates="user")
    expenses = relationship("Expense", back_populates="user")
    incomes = relationship("Income", back_populates="user")


class UserPreference(Base):
    """Per-user preferences used by budgeting and insights."""

    __tablename__ = "user_preferences"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)
    monthly_budget = Column(Numeric(12, 2), nullable=True)
    currency_symbol = Column(String(5), default="$", nullable=False)

    user = relationship("User", back_populates="preferences")
