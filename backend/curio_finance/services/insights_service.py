"""Service for monthly financial insights."""

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from curio_finance.ai.providers import LLMProvider
from curio_finance.exceptions import LLMError
from curio_finance.models.category import Category, CategoryType
from curio_finance.models.expense import Expense
from curio_finance.models.income import Income
from curio_finance.models.user import User
from curio_finance.schemas.insights import (
    BudgetAlert,
    CategoryAnalysis,
    CategoryTotal,
    Goal,
    InsightCommentary,
    InsightData,
    InsightStats,
    MonthChange,
    MonthOverMonth,
    PreviousMonth,
    TopExpense,
    TransactionData,
)

logger = logging.getLogger(__name__)

SEVERITY_RANK = {"high": 3, "medium": 2, "low": 1}

SAVINGS_TARGET_RATE = 20.0
OVERALL_BUDGET_CATEGORY = "Overall Budget"


def _percentage_change(current: float, previous: float) -> float:
    return (current - previous) / previous * 100 if previous > 0 else 0.0


def budget_severity(percentage: float) -> Optional[str]:
    """Severity for spending at ``percentage`` of a budget, or None below 80%."""
    if percentage >= 100:
        return "high" if percentage >= 120 else "medium"
    if percentage >= 80:
        return "low"
    return None


def _budget_alert(category: str, current: float, limit: float) -> Optional[BudgetAlert]:
    percentage = current / limit * 100
    severity = budget_severity(percentage)
    if severity is None:
        return None

    if percentage >= 100:
        message = f"{category} is over budget: ${current:.2f} spent of ${limit:.2f} ({percentage:.1f}%)"
    else:
        message = f"{category} is at {percentage:.1f}% of its ${limit:.2f} budget"

    return BudgetAlert(
        category=category,
        severity=severity,
        message=message,
        current=current,
        limit=limit,
        percentage=round(percentage, 1),
    )


def compute_budget_alerts(data: TransactionData) -> List[BudgetAlert]:
    """Category alerts plus the overall monthly budget alert, most severe first."""
    alerts = []
    for category in data.categories:
        if category.type != "expense" or not category.budget or category.budget <= 0:
            continue
        alert = _budget_alert(category.name, category.total_amount, category.budget)
        if alert:
            alerts.append(alert)

    if data.monthly_budget and data.monthly_budget > 0:
        overall = _budget_alert(OVERALL_BUDGET_CATEGORY, data.total_expenses, data.monthly_budget)
        if overall:
            # Ahead of category alerts of the same severity
            alerts.insert(0, overall)

    return sorted(alerts, key=lambda a: SEVERITY_RANK[a.severity], reverse=True)


def compute_month_over_month(data: TransactionData) -> MonthOverMonth:
    if data.previous_month is None:
        return MonthOverMonth()

    previous = {c.name: c.total_amount for c in data.previous_month.categories}
    changes = []
    for category in data.categories:
        previous_amount = previous.get(category.name, 0.0)
        change = _percentage_change(category.total_amount, previous_amount)
        if change == 0:
            continue
        changes.append(MonthChange(
            category=category.name,
            previous_amount=previous_amount,
            current_amount=category.total_amount,
            percentage_change=round(change, 1),
        ))

    changes.sort(key=lambda c: abs(c.percentage_change), reverse=True)

    insights = [
        f"{c.category} is {'up' if c.percentage_change > 0 else 'down'} "
        f"{abs(c.percentage_change):.1f}% from last month "
        f"(${c.previous_amount:.2f} to ${c.current_amount:.2f})"
        for c in changes
    ]
    return MonthOverMonth(insights=insights, changes=changes)


def compute_category_analysis(data: TransactionData) -> List[CategoryAnalysis]:
    previous = {}
    if data.previous_month is not None:
        previous = {c.name: c.total_amount for c in data.previous_month.categories}

    expenses = sorted(
        (c for c in data.categories if c.type == "expense" and c.total_amount > 0),
        key=lambda c: c.total_amount,
        reverse=True,
    )
    return [
        CategoryAnalysis(
            name=c.name,
            total_amount=c.total_amount,
            percentage=round(c.total_amount / data.total_expenses * 100, 1) if data.total_expenses > 0 else 0.0,
            trend=round(_percentage_change(c.total_amount, previous.get(c.name, 0.0)), 1),
        )
        for c in expenses
    ]


def compute_goals(data: TransactionData, savings_rate: float) -> List[Goal]:
    goals = []
    if savings_rate < SAVINGS_TARGET_RATE:
        goals.append(Goal(
            category="Monthly Savings",
            current=data.total_income - data.total_expenses,
            target=data.total_income * SAVINGS_TARGET_RATE / 100,
            progress=round(max(0.0, savings_rate / SAVINGS_TARGET_RATE * 100), 1),
            description="Save 20% of monthly income",
            type="savings",
        ))

    for category in data.categories:
        if category.type != "expense" or not category.budget or category.budget <= 0:
            continue
        if category.total_amount <= category.budget:
            continue
        over = category.total_amount - category.budget
        goals.append(Goal(
            category=category.name,
            current=category.total_amount,
            target=category.budget,
            progress=round(max(0.0, 100 - over / category.budget * 100), 1),
            description=f"Reduce {category.name} spending to ${category.budget:,.2f}",
            type="reduction",
        ))
    return goals


def format_summary(data: TransactionData, savings_rate: Optional[float] = None) -> str:
    balance = data.total_income - data.total_expenses
    summary = (
        f"Monthly Summary: Income ${data.total_income:.2f}, "
        f"Expenses ${data.total_expenses:.2f}, Balance ${balance:.2f}"
    )
    if savings_rate is not None:
        summary += f", Savings Rate {savings_rate:.1f}%"
    return summary


def compute_insights(data: TransactionData) -> InsightData:
    """Deterministic insights for a month. No I/O; commentary and tips stay empty."""
    balance = data.total_income - data.total_expenses
    savings_rate = balance / data.total_income * 100 if data.total_income > 0 else 0.0

    top_expenses = sorted(
        (c for c in data.categories if c.type == "expense"),
        key=lambda c: c.total_amount,
        reverse=True,
    )[:3]

    return InsightData(
        summary=format_summary(data),
        month_over_month=compute_month_over_month(data),
        budget_alerts=compute_budget_alerts(data),
        category_analysis=compute_category_analysis(data),
        goals=compute_goals(data, savings_rate),
        stats=InsightStats(
            savings_rate=round(savings_rate, 1),
            balance=balance,
            top_expenses=[TopExpense(name=c.name, total_amount=c.total_amount) for c in top_expenses],
        ),
    )


def merge_commentary(insights: InsightData, data: TransactionData, commentary: InsightCommentary) -> InsightData:
    return insights.model_copy(update={
        "commentary": commentary.commentary,
        "tips": commentary.tips,
        "summary": format_summary(data, insights.stats.savings_rate),
    })


async def generate_insights(
    data: TransactionData,
    provider: Optional[LLMProvider] = None,
    system_prompt: Optional[str] = None,
) -> InsightData:
    """
    Deterministic insights, enriched with model commentary when a provider is given.

    Any failure on the model path falls back to the deterministic result.
    """
    insights = compute_insights(data)
    if provider is None:
        return insights

    try:
        commentary = await provider.analyze(data, system_prompt)
    except LLMError as e:
        logger.warning("Insights from %s failed, returning deterministic insights: %s", provider.name, e)
        return insights

    return merge_commentary(insights, data, commentary)


def month_bounds(month: date) -> Tuple[date, date]:
    """First day of ``month`` and first day of the following month."""
    start = date(month.year, month.month, 1)
    if start.month == 12:
        return start, date(start.year + 1, 1, 1)
    return start, date(start.year, start.month + 1, 1)


def previous_month_start(month: date) -> date:
    if month.month == 1:
        return date(month.year - 1, 12, 1)
    return date(month.year, month.month - 1, 1)


def _totals_by_category(db: Session, model, user_id: str, start: date, end: date) -> Dict[str, float]:
    rows = db.query(model.category_id, func.sum(model.amount)).filter(
        model.user_id == user_id,
        model.is_void == False,  # noqa: E712
        model.date >= start,
        model.date < end,
    ).group_by(model.category_id).all()
    return {category_id: float(total or Decimal("0")) for category_id, total in rows}


def _category_totals(
    categories: List[Category],
    expense_totals: Dict[str, float],
    income_totals: Dict[str, float],
    with_budget: bool,
) -> List[CategoryTotal]:
    result = []
    for category in categories:
        is_expense = category.type == CategoryType.expense
        totals = expense_totals if is_expense else income_totals
        result.append(CategoryTotal(
            name=category.name,
            total_amount=totals.get(category.id, 0.0),
            type="expense" if is_expense else "income",
            budget=float(category.budget) if with_budget and category.budget is not None else None,
        ))
    return result


def build_transaction_data(db: Session, user: User, month: Optional[date] = None) -> TransactionData:
    """Aggregate a user's non-void transactions for ``month`` and the month before."""
    start, end = month_bounds(month or date.today())
    prev_start = previous_month_start(start)

    categories = db.query(Category).filter(Category.user_id == user.id).order_by(Category.name).all()

    expense_totals = _totals_by_category(db, Expense, user.id, start, end)
    income_totals = _totals_by_category(db, Income, user.id, start, end)
    prev_expense_totals = _totals_by_category(db, Expense, user.id, prev_start, start)
    prev_income_totals = _totals_by_category(db, Income, user.id, prev_start, start)

    monthly_budget = None
    if user.preferences is not None and user.preferences.monthly_budget is not None:
        monthly_budget = float(user.preferences.monthly_budget)

    return TransactionData(
        total_income=sum(income_totals.values()),
        total_expenses=sum(expense_totals.values()),
        categories=_category_totals(categories, expense_totals, income_totals, with_budget=True),
        previous_month=PreviousMonth(
            total_income=sum(prev_income_totals.values()),
            total_expenses=sum(prev_expense_totals.values()),
            categories=_category_totals(categories, prev_expense_totals, prev_income_totals, with_budget=False),
        ),
        monthly_budget=monthly_budget,
    )
