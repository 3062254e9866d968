"""
Settings API endpoints.
"""

from fastapi import APIRouter
from typing import List

from curio_finance.ai.capabilities import DEFAULT_CONFIGS, PROVIDER_CAPABILITIES
from curio_finance.config import settings
from curio_finance.schemas.settings import AvailableProvider, LLMSettingsResponse

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/providers", response_model=List[AvailableProvider])
def list_providers():
    """Supported LLM providers with their capabilities and defaults."""
    return [
        AvailableProvider(
            id=name,
            requires_key=capabilities.requires_api_key,
            supports_chat=capabilities.supports_chat,
            supports_insights=capabilities.supports_insights,
            supports_function_calling=capabilities.supports_function_calling,
            supports_streaming=capabilities.supports_streaming,
            max_tokens=capabilities.max_tokens,
            default_model=DEFAULT_CONFIGS.get(name, {}).get("model"),
            default_base_url=DEFAULT_CONFIGS.get(name, {}).get("base_url"),
        )
        for name, capabilities in PROVIDER_CAPABILITIES.items()
    ]


@router.get("/llm", response_model=LLMSettingsResponse)
def get_llm_settings():
    """Server-side LLM defaults."""
    return LLMSettingsResponse(
        default_provider=settings.default_llm_provider,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
    )
