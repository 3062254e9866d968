"""Service for recording expenses and incomes."""

from typing import Any, Optional, Tuple

from sqlalchemy.orm import Session

from curio_finance.models.category import Category, CategoryType
from curio_finance.models.payment_method import PaymentMethod
from curio_finance.models.user import User
from curio_finance.schemas.transaction import TransactionCreate
from curio_finance.services.recurring_service import KINDS, create_recurring_definition


def create_transaction(
    db: Session,
    user: User,
    kind_name: str,
    data: TransactionCreate,
) -> Tuple[Any, Optional[Any]]:
    """
    Record an expense or income, with its recurring definition when requested.

    Both rows are committed together. Returns ``(transaction, definition)``.
    """
    kind = KINDS[kind_name]
    expected_type = CategoryType.expense if kind_name == "expense" else CategoryType.income

    category = db.query(Category).filter(
        Category.id == data.category_id,
        Category.user_id == user.id,
    ).first()
    if not category:
        raise ValueError(f"Category {data.category_id} not found")
    if category.type != expected_type:
        raise ValueError(f"Category {category.name} is not an {kind_name} category")

    if data.payment_method_id:
        payment_method = db.query(PaymentMethod).filter(
            PaymentMethod.id == data.payment_method_id,
            PaymentMethod.user_id == user.id,
        ).first()
        if not payment_method:
            raise ValueError(f"Payment method {data.payment_method_id} not found")

    transaction = kind.transaction_model(
        user_id=user.id,
        description=data.description,
        amount=data.amount,
        category_id=category.id,
        payment_method_id=data.payment_method_id,
        date=data.date,
        notes=data.notes,
    )
    db.add(transaction)
    db.flush()

    definition = None
    if data.recurring is not None:
        definition = create_recurring_definition(db, kind, transaction, data.recurring)

    db.commit()
    db.refresh(transaction)
    if definition is not None:
        db.refresh(definition)
    return transaction, definition
