"""
Chat API endpoints.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from curio_finance.ai.call_log import LLMCallLog
from curio_finance.ai.factory import create_provider, parse_llm_config
from curio_finance.config import settings
from curio_finance.dependencies import get_current_user, get_db, get_llm_call_log
from curio_finance.exceptions import (
    CapabilityMismatch,
    LLMError,
    MissingCredential,
    ProviderTransportError,
    UnsupportedProvider,
)
from curio_finance.models.user import User
from curio_finance.schemas.chat import ChatRequest, ChatResponse
from curio_finance.services import chat_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def _configure_llm(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "action": "configure_llm", "message": message},
    )


def error_response(provider_name: str, error: LLMError) -> JSONResponse:
    """Map a provider failure to a response telling the user what to fix."""
    if isinstance(error, (CapabilityMismatch, UnsupportedProvider)):
        return _configure_llm(
            400, "Provider not supported",
            "Selected provider does not support chat. Please choose a different provider in Settings.",
        )
    if isinstance(error, ProviderTransportError) and error.is_connection_error:
        if provider_name == "ollama":
            message = ("Unable to connect to Ollama. Please make sure Ollama is running "
                       "and accessible at the configured URL.")
        else:
            message = f"Unable to reach {provider_name}. Please try again later."
        return _configure_llm(503, "Provider connection error", message)
    if isinstance(error, MissingCredential) or (
        isinstance(error, ProviderTransportError) and error.is_authentication_error
    ):
        return _configure_llm(
            401, "API key not configured",
            "Please configure your LLM provider and API key in Settings.",
        )
    return JSONResponse(status_code=500, content={"error": "Failed to process chat request"})


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    x_llm_provider: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None),
    x_llm_config: Optional[str] = Header(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    call_log: LLMCallLog = Depends(get_llm_call_log),
):
    """Answer a question about the user's finances."""
    provider_name = (x_llm_provider or settings.default_llm_provider).lower()
    latest = request.messages[-1].content if request.messages else ""

    context = chat_service.build_chat_context(db, user, latest, request.system_prompt)
    messages = chat_service.build_chat_messages(context, request.messages)

    config = parse_llm_config(x_llm_config)
    if x_api_key:
        config.pop("apiKey", None)
        config["api_key"] = x_api_key
    try:
        provider = create_provider(provider_name, config, mode="chat", call_log=call_log)
        return await provider.chat(messages)
    except LLMError as e:
        logger.warning("Chat with %s failed: %s", provider_name, e)
        return error_response(provider_name, e)
