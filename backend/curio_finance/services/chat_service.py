"""Service for the finance assistant chat."""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from curio_finance.ai.prompts import CHAT_CONTEXT, CHAT_GREETING, CHAT_SYSTEM, requests_historical_data
from curio_finance.models.category import Category, CategoryType
from curio_finance.models.expense import Expense
from curio_finance.models.income import Income
from curio_finance.models.user import User
from curio_finance.schemas.chat import ChatMessage


def context_window(latest_message: str, today: Optional[date] = None) -> date:
    """Start date of the data given to the model: three months back for history questions."""
    today = today or date.today()
    if not requests_historical_data(latest_message):
        return date(today.year, today.month, 1)

    month_index = today.year * 12 + today.month - 1 - 3
    return date(month_index // 12, month_index % 12 + 1, 1)


def build_chat_context(
    db: Session,
    user: User,
    latest_message: str,
    system_prompt: Optional[str] = None,
    today: Optional[date] = None,
) -> str:
    """System prompt carrying the user's budget, totals and recent spending."""
    today = today or date.today()
    start = context_window(latest_message, today)
    historical = requests_historical_data(latest_message)

    expenses = db.query(Expense).filter(
        Expense.user_id == user.id,
        Expense.is_void == False,  # noqa: E712
        Expense.date >= start,
        Expense.date <= today,
    ).order_by(Expense.date.desc()).all()
    incomes = db.query(Income).filter(
        Income.user_id == user.id,
        Income.is_void == False,  # noqa: E712
        Income.date >= start,
        Income.date <= today,
    ).all()
    categories = db.query(Category).filter(Category.user_id == user.id).order_by(Category.name).all()

    preferences = user.preferences
    currency = preferences.currency_symbol if preferences else "$"
    monthly_budget = preferences.monthly_budget if preferences and preferences.monthly_budget else 0

    recent_expenses = "".join(
        f"\n- **{e.category.name}**: `{currency}{e.amount}` ({e.description})"
        for e in expenses[:5]
    )

    spent_by_category = {}
    for expense in expenses:
        spent_by_category[expense.category_id] = spent_by_category.get(expense.category_id, 0) + expense.amount

    category_lines = []
    for category in categories:
        if category.type != CategoryType.expense:
            continue
        spent = spent_by_category.get(category.id, 0)
        if not spent and not category.budget:
            continue
        budget = f"/{currency}{category.budget}" if category.budget else ""
        category_lines.append(f"\n- **{category.name}**: `{currency}{spent}{budget}`")

    return CHAT_CONTEXT.format(
        system_prompt=system_prompt or CHAT_SYSTEM,
        period="3-Month" if historical else "Current Month",
        currency=currency,
        monthly_budget=monthly_budget,
        total_expenses=sum(e.amount for e in expenses),
        total_income=sum(i.amount for i in incomes),
        recent_expenses=recent_expenses or "\n- none",
        category_summary="".join(category_lines) or "\n- none",
    )


def build_chat_messages(context: str, messages: List[ChatMessage]) -> List[ChatMessage]:
    """Context first; a new conversation also gets the assistant's greeting."""
    chat_messages = [ChatMessage(role="system", content=context)]
    if not messages:
        chat_messages.append(ChatMessage(role="assistant", content=CHAT_GREETING))
    chat_messages.extend(messages)
    return chat_messages
