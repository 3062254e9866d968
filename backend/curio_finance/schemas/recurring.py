"""Pydantic schemas for recurring definitions."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

from curio_finance.models.recurring import RecurringType


class RecurrenceRequest(BaseModel):
    """Recurrence attached to a new expense or income."""
    type: RecurringType
    frequency: int = Field(1, gt=0)
    end_date: Optional[date] = None


class RecurringPatternResponse(BaseModel):
    type: RecurringType
    frequency: int
    day_of_month: Optional[int] = None
    day_of_week: Optional[int] = None
    month_of_year: Optional[int] = None

    class Config:
        from_attributes = True


class RecurringDefinitionResponse(BaseModel):
    id: str
    kind: str  # "expense" or "income"
    template_id: str
    description: str
    amount: Decimal
    pattern: RecurringPatternResponse
    start_date: date
    end_date: Optional[date] = None
    last_processed: Optional[date] = None
    next_process_date: date
    created_at: datetime


class ProcessingReportResponse(BaseModel):
    processed: int
    skipped: int
    failed: int
    occurrences_created: int


class CronRunResponse(BaseModel):
    message: str
    expenses: ProcessingReportResponse
    incomes: ProcessingReportResponse
