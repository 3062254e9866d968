"""
Database models package.
"""

from curio_finance.models.user import User, UserPreference
from curio_finance.models.category import Category, CategoryType
from curio_finance.models.payment_method import PaymentMethod, PaymentMethodType
from curio_finance.models.expense import Expense
from curio_finance.models.income import Income
from curio_finance.models.recurring import RecurringType, RecurringPattern, RecurringExpense, RecurringIncome

__all__ = [
    "User",
    "UserPreference",
    "Category",
    "CategoryType",
    "PaymentMethod",
    "PaymentMethodType",
    "Expense",
    "Income",
    "RecurringType",
    "RecurringPattern",
    "RecurringExpense",
    "RecurringIncome",
]
