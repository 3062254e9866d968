"""AI prompts."""

from curio_finance.ai.prompts.insights import INSIGHTS_SYSTEM, INSIGHTS_USER, JSON_ONLY_SYSTEM, build_insights_prompt
from curio_finance.ai.prompts.chat import (
    CHAT_SYSTEM,
    CHAT_GREETING,
    CHAT_CONTEXT,
    HISTORICAL_KEYWORDS,
    requests_historical_data,
)

__all__ = [
    "INSIGHTS_SYSTEM",
    "INSIGHTS_USER",
    "JSON_ONLY_SYSTEM",
    "build_insights_prompt",
    "CHAT_SYSTEM",
    "CHAT_GREETING",
    "CHAT_CONTEXT",
    "HISTORICAL_KEYWORDS",
    "requests_historical_data",
]
