"""AI prompt for monthly insight commentary."""

from typing import Optional

INSIGHTS_SYSTEM = """Analyze this financial data and provide a light-hearted commentary with some personalized financial tips. You must respond with ONLY a valid JSON object in this exact format:

{
  "commentary": [
    "first observation about spending",
    "second observation about spending",
    "third observation about spending"
  ],
  "tips": [
    "first actionable tip",
    "second actionable tip",
    "third actionable tip"
  ]
}"""

INSIGHTS_USER = """Monthly Summary:
- Total Income: ${total_income}
- Total Expenses: ${total_expenses}
- Top Categories: {top_categories}"""

# Prepended to the system prompt by providers without a native JSON mode
JSON_ONLY_SYSTEM = "You are a financial analysis assistant. Always respond with valid JSON. Handle missing data with defaults and avoid Infinity/NaN values."


def build_insights_prompt(data, system_prompt: Optional[str] = None) -> str:
    """Full insights prompt for a TransactionData."""
    top = sorted(
        (c for c in data.categories if c.type == "expense"),
        key=lambda c: c.total_amount,
        reverse=True,
    )[:3]
    user_prompt = INSIGHTS_USER.format(
        total_income=f"{data.total_income:.2f}",
        total_expenses=f"{data.total_expenses:.2f}",
        top_categories=", ".join(f"{c.name}: ${c.total_amount:.2f}" for c in top) or "none",
    )
    return f"{system_prompt or INSIGHTS_SYSTEM}\n\n{user_prompt}"
