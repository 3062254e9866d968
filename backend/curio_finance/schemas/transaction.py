"""
Expense and income schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

from curio_finance.schemas.recurring import RecurrenceRequest


class TransactionCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0)
    category_id: str
    payment_method_id: Optional[str] = None
    date: date
    notes: Optional[str] = None
    recurring: Optional[RecurrenceRequest] = None


class TransactionResponse(BaseModel):
    id: str
    description: str
    amount: Decimal
    category_id: str
    payment_method_id: Optional[str]
    date: date
    notes: Optional[str]
    is_void: bool
    created_at: datetime

    # Set when the transaction was created with a recurrence
    recurring_id: Optional[str] = None
    next_process_date: Optional[date] = None

    class Config:
        from_attributes = True
