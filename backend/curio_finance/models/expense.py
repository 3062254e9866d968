"""
Expense database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Date, Numeric, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from curio_finance.database import Base


class Expense(Base):
    """A realized expense. Recurring definitions use one as their template."""

    __tablename__ = "expenses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    description = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)  # Always positive
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=False)
    payment_method_id = Column(String(36), ForeignKey("payment_methods.id"), nullable=True)
    date = Column(Date, nullable=False, index=True)
    notes = Column(Text, nullable=True)
    is_void = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="expenses")
    category = relationship("Category", back_populates="expenses")
    payment_method = relationship("PaymentMethod")
    recurring = relationship("RecurringExpense", back_populates="expense", uselist=False)

    __table_args__ = (
        Index("idx_expense_user_date", "user_id", "date"),
    )
