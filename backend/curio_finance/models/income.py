"""
Income database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Date, Numeric, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from curio_finance.database import Base


class Income(Base):
    """A realized income. Recurring definitions use one as their template."""

    __tablename__ = "incomes"

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
    user = relationship("User", back_populates="incomes")
    category = relationship("Category", back_populates="incomes")
    payment_method = relationship("PaymentMethod")
    recurring = relationship("RecurringIncome", back_populates="income", uselist=False)

    __table_args__ = (
        Index("idx_income_user_date", "user_id", "date"),
    )
