"""Shared test fixtures."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from datetime import date
from decimal import Decimal
import uuid

from curio_finance.ai.call_log import LLMCallLog
from curio_finance.database import Base, get_db
from curio_finance.main import app
from curio_finance.models import (
    Category,
    CategoryType,
    Expense,
    Income,
    PaymentMethod,
    PaymentMethodType,
    RecurringExpense,
    RecurringIncome,
    RecurringPattern,
    RecurringType,
    User,
    UserPreference,
)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test using in-memory SQLite."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def call_log():
    """A fresh LLM call log installed on the app."""
    previous = app.state.llm_call_log
    log = LLMCallLog(capacity=50)
    app.state.llm_call_log = log
    yield log
    app.state.llm_call_log = previous


@pytest.fixture(scope="function")
def client(db_session, call_log):
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_user(db_session):
    """Create a user with a monthly budget."""
    user = User(id=str(uuid.uuid4()), email="alex@example.com", name="Alex")
    db_session.add(user)
    db_session.flush()
    db_session.add(UserPreference(user_id=user.id, monthly_budget=Decimal("3000.00")))
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(sample_user):
    return {"X-User-Id": sample_user.id}


@pytest.fixture
def expense_category(db_session, sample_user):
    """Create a budgeted expense category."""
    category = Category(
        id=str(uuid.uuid4()),
        user_id=sample_user.id,
        name="Food",
        type=CategoryType.expense,
        icon="shopping-cart",
        budget=Decimal("500.00"),
        is_system=True,
    )
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def income_category(db_session, sample_user):
    """Create an income category."""
    category = Category(
        id=str(uuid.uuid4()),
        user_id=sample_user.id,
        name="Salary",
        type=CategoryType.income,
        icon="briefcase",
        is_system=True,
    )
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def payment_method(db_session, sample_user):
    method = PaymentMethod(
        id=str(uuid.uuid4()),
        user_id=sample_user.id,
        name="Card",
        type=PaymentMethodType.card,
        is_default=True,
    )
    db_session.add(method)
    db_session.commit()
    db_session.refresh(method)
    return method


@pytest.fixture
def sample_expense(db_session, sample_user, expense_category, payment_method):
    """Create a sample expense."""
    expense = Expense(
        id=str(uuid.uuid4()),
        user_id=sample_user.id,
        description="Groceries",
        amount=Decimal("50.00"),
        category_id=expense_category.id,
        payment_method_id=payment_method.id,
        date=date(2024, 1, 15),
    )
    db_session.add(expense)
    db_session.commit()
    db_session.refresh(expense)
    return expense


@pytest.fixture
def sample_income(db_session, sample_user, income_category):
    """Create a sample income."""
    income = Income(
        id=str(uuid.uuid4()),
        user_id=sample_user.id,
        description="Paycheck",
        amount=Decimal("2500.00"),
        category_id=income_category.id,
        date=date(2024, 1, 1),
    )
    db_session.add(income)
    db_session.commit()
    db_session.refresh(income)
    return income


def make_recurring(db_session, model, template_fk, template, recurring_type, next_process_date,
                   frequency=1, end_date=None, **anchors):
    """Attach a recurring definition with its own pattern to a template transaction."""
    pattern = RecurringPattern(
        id=str(uuid.uuid4()),
        type=recurring_type,
        frequency=frequency,
        **anchors
    )
    db_session.add(pattern)
    db_session.flush()

    definition = model(
        id=str(uuid.uuid4()),
        pattern_id=pattern.id,
        start_date=template.date,
        end_date=end_date,
        next_process_date=next_process_date,
    )
    setattr(definition, template_fk, template.id)
    db_session.add(definition)
    db_session.commit()
    db_session.refresh(definition)
    return definition


@pytest.fixture
def recurring_expense(db_session, sample_expense):
    """Monthly recurring expense on the 15th, next due 2024-02-15."""
    return make_recurring(
        db_session, RecurringExpense, "expense_id", sample_expense,
        RecurringType.MONTHLY, date(2024, 2, 15), day_of_month=15,
    )


@pytest.fixture
def recurring_income(db_session, sample_income):
    """Monthly recurring income on the 1st, next due 2024-02-01."""
    return make_recurring(
        db_session, RecurringIncome, "income_id", sample_income,
        RecurringType.MONTHLY, date(2024, 2, 1), day_of_month=1,
    )
