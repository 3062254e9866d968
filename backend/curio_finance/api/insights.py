"""
Insights API endpoints.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from sqlalchemy.orm import Session

from curio_finance.ai.call_log import LLMCallLog
from curio_finance.ai.capabilities import PROVIDER_CAPABILITIES
from curio_finance.ai.factory import create_provider, parse_llm_config
from curio_finance.config import settings
from curio_finance.dependencies import get_current_user, get_db, get_llm_call_log
from curio_finance.exceptions import LLMError
from curio_finance.models.user import User
from curio_finance.schemas.insights import InsightData
from curio_finance.services import insights_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/insights", tags=["insights"])


def parse_month(month: Optional[str]) -> date:
    """YYYY-MM to the first day of that month; today's month when absent."""
    if not month:
        return date.today().replace(day=1)
    try:
        year, m = map(int, month.split("-"))
        return date(year, m, 1)
    except ValueError:
        raise HTTPException(status_code=400, detail="month must be in YYYY-MM format")


def wants_llm(provider_name: Optional[str], api_key: Optional[str]) -> bool:
    """A provider is configured when a key was sent, or a keyless provider was named."""
    if api_key:
        return True
    capabilities = PROVIDER_CAPABILITIES.get((provider_name or "").lower())
    return capabilities is not None and not capabilities.requires_api_key


@router.get("", response_model=InsightData)
async def get_insights(
    month: Optional[str] = Query(None, description="YYYY-MM format"),
    x_llm_provider: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None),
    x_llm_config: Optional[str] = Header(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    call_log: LLMCallLog = Depends(get_llm_call_log),
):
    """
    Budget alerts, trends, goals and, with a configured provider, AI commentary.

    Always answers with the deterministic insights; provider problems only
    leave commentary and tips empty.
    """
    data = insights_service.build_transaction_data(db, user, parse_month(month))

    if not wants_llm(x_llm_provider, x_api_key):
        return insights_service.compute_insights(data)

    provider_name = x_llm_provider or settings.default_llm_provider
    config = parse_llm_config(x_llm_config)
    if x_api_key:
        config.pop("apiKey", None)
        config["api_key"] = x_api_key
    try:
        provider = create_provider(provider_name, config, mode="insights", call_log=call_log)
    except LLMError as e:
        logger.warning("Cannot use %s for insights: %s", provider_name, e)
        return insights_service.compute_insights(data)

    return await insights_service.generate_insights(data, provider)
