"""
Pydantic schemas package.
"""

from curio_finance.schemas.chat import ChatMessage, ChatRequest, ChatResponse, ChatUsage
from curio_finance.schemas.insights import (
    BudgetAlert,
    CategoryAnalysis,
    CategoryTotal,
    Goal,
    InsightCommentary,
    InsightData,
    MonthOverMonth,
    PreviousMonth,
    TransactionData,
)
from curio_finance.schemas.recurring import (
    RecurrenceRequest,
    RecurringDefinitionResponse,
    ProcessingReportResponse,
    CronRunResponse,
)
from curio_finance.schemas.transaction import TransactionCreate, TransactionResponse

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "ChatUsage",
    "BudgetAlert",
    "CategoryAnalysis",
    "CategoryTotal",
    "Goal",
    "InsightCommentary",
    "InsightData",
    "MonthOverMonth",
    "PreviousMonth",
    "TransactionData",
    "RecurrenceRequest",
    "RecurringDefinitionResponse",
    "ProcessingReportResponse",
    "CronRunResponse",
    "TransactionCreate",
    "TransactionResponse",
]
