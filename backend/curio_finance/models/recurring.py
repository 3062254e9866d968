"""
Recurring definition database models.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Date, Enum, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
import enum
from curio_finance.database import Base


class RecurringType(str, enum.Enum):
    """Recurrence pattern type."""
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class RecurringPattern(Base):
    """How often a recurring definition repeats and what it anchors to."""

    __tablename__ = "recurring_patterns"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    type = Column(Enum(RecurringType), nullable=False)
    frequency = Column(Integer, default=1, nullable=False)
    day_of_month = Column(Integer, nullable=True)  # 1-31
    day_of_week = Column(Integer, nullable=True)  # 0 = Sunday ... 6 = Saturday
    month_of_year = Column(Integer, nullable=True)  # 1-12

    __table_args__ = (
        CheckConstraint("frequency > 0", name="ck_pattern_frequency_positive"),
    )


class RecurringExpense(Base):
    """Links a template expense to a pattern and tracks the schedule."""

    __tablename__ = "recurring_expenses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    expense_id = Column(String(36), ForeignKey("expenses.id"), unique=True, nullable=False)
    pattern_id = Column(String(36), ForeignKey("recurring_patterns.id"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    last_processed = Column(Date, nullable=True)
    next_process_date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    expense = relationship("Expense", back_populates="recurring")
    pattern = relationship("RecurringPattern")


class RecurringIncome(Base):
    """Links a template income to a pattern and tracks the schedule."""

    __tablename__ = "recurring_incomes"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    income_id = Column(String(36), ForeignKey("incomes.id"), unique=True, nullable=False)
    pattern_id = Column(String(36), ForeignKey("recurring_patterns.id"), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    last_processed = Column(Date, nullable=True)
    next_process_date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    income = relationship("Income", back_populates="recurring")
    pattern = relationship("RecurringPattern")
