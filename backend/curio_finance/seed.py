"""
Seed script for a demo user with default categories and payment methods.
"""

import logging
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from curio_finance.config import settings
from curio_finance.database import Base, SessionLocal, engine
from curio_finance.models import Category, CategoryType, PaymentMethod, PaymentMethodType, User, UserPreference

logger = logging.getLogger(__name__)

DEFAULT_EXPENSE_CATEGORIES = [
    {"name": "Food", "icon": "shopping-cart"},
    {"name": "Housing", "icon": "home"},
    {"name": "Bills", "icon": "file-text"},
    {"name": "Transport", "icon": "car"},
    {"name": "Entertainment", "icon": "coffee"},
    {"name": "Shopping", "icon": "gift"},
    {"name": "Other", "icon": "smartphone"},
]

DEFAULT_INCOME_CATEGORIES = [
    {"name": "Salary", "icon": "briefcase"},
    {"name": "Investment", "icon": "trending-up"},
    {"name": "Freelance", "icon": "laptop"},
    {"name": "Rental", "icon": "home"},
    {"name": "Gift", "icon": "gift"},
    {"name": "Other Income", "icon": "file"},
]

DEFAULT_PAYMENT_METHODS = [
    {"name": "Cash", "type": PaymentMethodType.cash},
    {"name": "Card", "type": PaymentMethodType.card},
    {"name": "Bank Transfer", "type": PaymentMethodType.bank_transfer},
]


def ensure_user_defaults(db: Session, user: User) -> None:
    """Create any default category or payment method the user does not have yet."""
    existing = {c.name for c in db.query(Category).filter(Category.user_id == user.id).all()}

    for category_type, defaults in (
        (CategoryType.expense, DEFAULT_EXPENSE_CATEGORIES),
        (CategoryType.income, DEFAULT_INCOME_CATEGORIES),
    ):
        for cat_data in defaults:
            if cat_data["name"] in existing:
                continue
            db.add(Category(
                user_id=user.id,
                name=cat_data["name"],
                icon=cat_data["icon"],
                type=category_type,
                is_system=True,
                is_default=cat_data["name"] in ("Other", "Other Income"),
            ))

    methods = {m.name for m in db.query(PaymentMethod).filter(PaymentMethod.user_id == user.id).all()}
    for method_data in DEFAULT_PAYMENT_METHODS:
        if method_data["name"] not in methods:
            db.add(PaymentMethod(
                user_id=user.id,
                name=method_data["name"],
                type=method_data["type"],
                is_default=method_data["name"] == "Card",
            ))

    if user.preferences is None:
        db.add(UserPreference(user_id=user.id))

    db.flush()


def seed_demo_user(email: str = "demo@example.com") -> User:
    """Create the demo user (if missing) with default categories."""
    if settings.database_url.startswith("sqlite:///"):
        Path(settings.database_url[len("sqlite:///"):]).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            user = User(email=email, name="Demo User")
            db.add(user)
            db.flush()

        ensure_user_defaults(db, user)
        db.commit()
        logger.info("Seeded demo user %s (%s)", user.email, user.id)
        return user
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error seeding demo user")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed_demo_user()
