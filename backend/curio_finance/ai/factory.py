"""Build a provider adapter from a name, a mode and caller config."""

import json
import logging
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from curio_finance.ai.call_log import LLMCallLog
from curio_finance.ai.capabilities import DEFAULT_CONFIGS, PROVIDER_CAPABILITIES
from curio_finance.ai.providers import PROVIDERS, LLMProvider, ProviderConfig
from curio_finance.exceptions import CapabilityMismatch, MissingCredential, UnsupportedProvider

logger = logging.getLogger(__name__)


def parse_llm_config(raw: Optional[str]) -> Dict[str, Any]:
    """Decode the JSON config blob sent with a request. Malformed input is ignored."""
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Ignoring malformed LLM config: %s", e)
        return {}
    if not isinstance(parsed, dict):
        logger.warning("Ignoring LLM config that is not an object: %r", parsed)
        return {}
    return parsed


def _overrides(config: Union[ProviderConfig, Dict[str, Any], None]) -> Dict[str, Any]:
    if config is None:
        return {}
    if isinstance(config, dict):
        try:
            config = ProviderConfig.model_validate(config)
        except ValidationError as e:
            logger.warning("Ignoring invalid LLM config fields: %s", e)
            config = ProviderConfig.model_validate(
                {k: v for k, v in config.items() if k in ("api_key", "apiKey")}
            )
    return config.model_dump(exclude_none=True)


def create_provider(
    name: str,
    config: Union[ProviderConfig, Dict[str, Any], None] = None,
    mode: str = "insights",
    call_log: Optional[LLMCallLog] = None,
) -> LLMProvider:
    """
    Instantiate the adapter for ``name``.

    The capability check runs before anything is constructed, so a mode the
    provider cannot serve never reaches the network. Caller config wins over
    the provider defaults field by field; unset fields keep the default.
    """
    name = (name or "").strip().lower()
    provider_cls = PROVIDERS.get(name)
    capabilities = PROVIDER_CAPABILITIES.get(name)
    if provider_cls is None or capabilities is None:
        raise UnsupportedProvider(f"Unsupported provider: {name}", name)

    if not capabilities.supports(mode):
        raise CapabilityMismatch(name, mode)

    merged = {**DEFAULT_CONFIGS.get(name, {}), **_overrides(config)}
    if name == "ollama" and merged.get("custom_model"):
        merged["model"] = merged["custom_model"]
    final_config = ProviderConfig(**merged)

    if capabilities.requires_api_key and not final_config.api_key:
        raise MissingCredential(f"API key required for {name}", name)

    return provider_cls(final_config, call_log)
