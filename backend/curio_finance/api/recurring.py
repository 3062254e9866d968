"""API endpoints for recurring definitions."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from curio_finance.dependencies import get_current_user, get_db
from curio_finance.models.user import User
from curio_finance.schemas.recurring import RecurringDefinitionResponse
from curio_finance.services import recurring_service

router = APIRouter(prefix="/recurring", tags=["recurring"])


@router.get("", response_model=List[RecurringDefinitionResponse])
def list_recurring(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The user's recurring expenses and incomes with their schedules."""
    return recurring_service.list_recurring_definitions(db, user.id)
