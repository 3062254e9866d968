"""
Insight schemas: the aggregate fed to insight computation and the result.
"""

from pydantic import BaseModel, Field
from typing import List, Literal, Optional


class CategoryTotal(BaseModel):
    name: str
    total_amount: float
    type: Literal["expense", "income"]
    budget: Optional[float] = None


class PreviousMonth(BaseModel):
    total_income: float
    total_expenses: float
    categories: List[CategoryTotal] = Field(default_factory=list)


class TransactionData(BaseModel):
    """Per-request aggregate of a month's transactions."""
    total_income: float
    total_expenses: float
    categories: List[CategoryTotal] = Field(default_factory=list)
    previous_month: Optional[PreviousMonth] = None
    monthly_budget: Optional[float] = None


class BudgetAlert(BaseModel):
    category: str
    severity: Literal["high", "medium", "low"]
    message: str
    current: float
    limit: float
    percentage: float


class MonthChange(BaseModel):
    category: str
    previous_amount: float
    current_amount: float
    percentage_change: float


class MonthOverMonth(BaseModel):
    insights: List[str] = Field(default_factory=list)
    changes: List[MonthChange] = Field(default_factory=list)


class CategoryAnalysis(BaseModel):
    name: str
    total_amount: float
    percentage: float
    trend: float


class Goal(BaseModel):
    category: str
    current: float
    target: float
    progress: float
    description: str
    type: Literal["reduction", "savings", "limit"]


class TopExpense(BaseModel):
    name: str
    total_amount: float


class InsightStats(BaseModel):
    savings_rate: float
    balance: float
    top_expenses: List[TopExpense] = Field(default_factory=list)


class InsightCommentary(BaseModel):
    """The part of an insight response that comes from a model."""
    commentary: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)


class InsightData(BaseModel):
    summary: str
    commentary: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)
    month_over_month: MonthOverMonth = Field(default_factory=MonthOverMonth)
    budget_alerts: List[BudgetAlert] = Field(default_factory=list)
    category_analysis: List[CategoryAnalysis] = Field(default_factory=list)
    goals: List[Goal] = Field(default_factory=list)
    stats: InsightStats
