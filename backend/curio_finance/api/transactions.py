"""
Expense and income API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from curio_finance.dependencies import get_current_user, get_db
from curio_finance.models.user import User
from curio_finance.schemas.transaction import TransactionCreate, TransactionResponse
from curio_finance.services import transaction_service

router = APIRouter(tags=["transactions"])


def _create(db: Session, user: User, kind: str, data: TransactionCreate) -> TransactionResponse:
    try:
        transaction, definition = transaction_service.create_transaction(db, user, kind, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    response = TransactionResponse.model_validate(transaction)
    if definition is not None:
        response.recurring_id = definition.id
        response.next_process_date = definition.next_process_date
    return response


@router.post("/expenses", response_model=TransactionResponse, status_code=201)
def create_expense(
    data: TransactionCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record an expense, optionally recurring."""
    return _create(db, user, "expense", data)


@router.post("/incomes", response_model=TransactionResponse, status_code=201)
def create_income(
    data: TransactionCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record an income, optionally recurring."""
    return _create(db, user, "income", data)
