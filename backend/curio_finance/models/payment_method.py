"""
Payment method database model.
"""

import uuid
import enum
from sqlalchemy import Column, String, Boolean, Enum, ForeignKey
from sqlalchemy.orm import relationship
from curio_finance.database import Base


class PaymentMethodType(str, enum.Enum):
    """Payment method enumeration."""
    cash = "cash"
    card = "card"
    bank_transfer = "bank_transfer"
    other = "other"


class PaymentMethod(Base):
    """How a transaction was paid or received."""

    __tablename__ = "payment_methods"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    name = Column(String(100), nullable=False)
    type = Column(Enum(PaymentMethodType), default=PaymentMethodType.other, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)

    user = relationship("User", back_populates="payment_methods")
