"""
LLM provider adapters.

Each vendor gets a small subclass of ``LLMProvider`` that maps a
``ProviderConfig`` onto a litellm model string and call arguments. The base
class owns the shared behaviour: prompt construction, timing and audit
logging, transport error wrapping and response normalization.
"""

import logging
import time
from typing import Any, Dict, List, Optional

import litellm
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from curio_finance.ai.call_log import LLMCallLog, LLMLogEntry
from curio_finance.ai.capabilities import PROVIDER_CAPABILITIES
from curio_finance.ai.normalize import normalize_to_insight_json
from curio_finance.ai.prompts import JSON_ONLY_SYSTEM, build_insights_prompt
from curio_finance.config import settings
from curio_finance.exceptions import (
    CapabilityMismatch,
    LLMError,
    MissingCredential,
    ProviderTransportError,
    ResponseParseError,
)
from curio_finance.schemas.chat import ChatMessage, ChatResponse, ChatUsage
from curio_finance.schemas.insights import InsightCommentary, TransactionData

logger = logging.getLogger(__name__)

litellm.drop_params = True


class ProviderConfig(BaseModel):
    """Per-request provider settings. Accepts snake_case or camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    api_key: Optional[str] = None
    model: Optional[str] = None
    custom_model: Optional[str] = None
    base_url: Optional[str] = None
    api_version: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    context_length: Optional[int] = None


_AUTH_MARKERS = ("api key", "authentication", "unauthorized", "invalid_api_key")
_CONNECTION_MARKERS = ("econnrefused", "connection refused", "failed to fetch", "connection")


def wrap_transport_error(provider: str, error: Exception) -> ProviderTransportError:
    """Classify a vendor failure as connection, authentication or other."""
    message = str(error) or error.__class__.__name__
    lowered = message.lower()
    is_auth = isinstance(error, litellm.AuthenticationError) or any(m in lowered for m in _AUTH_MARKERS)
    is_connection = (
        isinstance(error, (litellm.APIConnectionError, litellm.Timeout, litellm.ServiceUnavailableError))
        or any(m in lowered for m in _CONNECTION_MARKERS)
    )
    return ProviderTransportError(
        message,
        provider=provider,
        is_connection_error=is_connection and not is_auth,
        is_authentication_error=is_auth,
    )


def _message_content(response: Any, provider: str) -> str:
    try:
        content = response.choices[0].message.content
        return (content or "").strip()
    except (AttributeError, IndexError, KeyError, TypeError) as e:
        raise ResponseParseError(
            f"Malformed completion response: {e.__class__.__name__}: {e}", provider=provider
        ) from e


def _usage(response: Any) -> Optional[ChatUsage]:
    usage = getattr(response, "usage", None)
    if usage is None:
        return None
    return ChatUsage(
        prompt_tokens=getattr(usage, "prompt_tokens", None),
        completion_tokens=getattr(usage, "completion_tokens", None),
        total_tokens=getattr(usage, "total_tokens", None),
    )


class LLMProvider:
    """Base adapter. Subclasses set ``name`` and ``model_prefix``."""

    name = "base"
    model_prefix: Optional[str] = None

    def __init__(self, config: ProviderConfig, call_log: Optional[LLMCallLog] = None):
        self.config = config
        self.capabilities = PROVIDER_CAPABILITIES[self.name]
        self.call_log = call_log if call_log is not None else LLMCallLog()
        self.model = self._model_string()

    def _model_string(self) -> str:
        model = self.config.model
        if not model:
            raise MissingCredential(f"A model is required for {self.name}", self.name)
        if self.model_prefix and not model.startswith(f"{self.model_prefix}/"):
            return f"{self.model_prefix}/{model}"
        return model

    def _completion_kwargs(self) -> Dict[str, Any]:
        temperature = self.config.temperature
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "temperature": settings.llm_temperature if temperature is None else temperature,
            "max_tokens": self.config.max_tokens or settings.llm_max_tokens,
        }
        if self.config.api_key:
            kwargs["api_key"] = self.config.api_key
        if self.config.base_url:
            kwargs["api_base"] = self.config.base_url
        return kwargs

    def _insight_messages(self, prompt: str) -> List[Dict[str, str]]:
        return [{"role": "user", "content": prompt}]

    async def _complete(self, messages: List[Dict[str, str]], json_mode: bool = False) -> Any:
        kwargs = self._completion_kwargs()
        kwargs["messages"] = messages
        if json_mode and self.capabilities.supports_json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            return await litellm.acompletion(**kwargs)
        except Exception as e:
            raise wrap_transport_error(self.name, e) from e

    def _record(
        self,
        operation: str,
        prompt: str,
        started: float,
        response: Any = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.call_log.record(LLMLogEntry(
            provider=self.name,
            operation=operation,
            prompt=prompt,
            duration_ms=int((time.monotonic() - started) * 1000),
            success=error is None,
            response=response,
            error=None if error is None else f"{error.__class__.__name__}: {error}",
        ))

    async def analyze(self, data: TransactionData, system_prompt: Optional[str] = None) -> InsightCommentary:
        """Ask the model for commentary and tips on a month of transactions."""
        prompt = build_insights_prompt(data, system_prompt)
        started = time.monotonic()
        try:
            response = await self._complete(self._insight_messages(prompt), json_mode=True)
            parsed = normalize_to_insight_json(_message_content(response, self.name), self.name)
        except LLMError as e:
            self._record("analyze", prompt, started, error=e)
            raise

        self._record("analyze", prompt, started, response=parsed)
        return InsightCommentary(**parsed)

    async def chat(self, messages: List[ChatMessage]) -> ChatResponse:
        """Free-text reply to a conversation."""
        if not self.capabilities.supports_chat:
            raise CapabilityMismatch(self.name, "chat")

        prompt = messages[-1].content if messages else ""
        started = time.monotonic()
        try:
            response = await self._complete([m.model_dump() for m in messages])
            content = _message_content(response, self.name)
            try:
                result = ChatResponse(content=content, usage=_usage(response))
            except ValidationError as e:
                raise ResponseParseError(f"Malformed usage in completion response: {e}", provider=self.name) from e
        except LLMError as e:
            self._record("chat", prompt, started, error=e)
            raise

        self._record("chat", prompt, started, response=result.model_dump())
        return result


class OpenAIProvider(LLMProvider):
    name = "openai"
    model_prefix = "openai"


class AnthropicProvider(LLMProvider):
    name = "anthropic"
    model_prefix = "anthropic"


class GeminiProvider(LLMProvider):
    name = "gemini"
    model_prefix = "gemini"


class CohereProvider(LLMProvider):
    name = "cohere"
    model_prefix = "cohere"


class GroqProvider(LLMProvider):
    name = "groq"
    model_prefix = "groq"

    def _insight_messages(self, prompt: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": JSON_ONLY_SYSTEM},
            {"role": "user", "content": f"Analyze this financial data and respond with JSON:\n{prompt}"},
        ]


class MistralProvider(LLMProvider):
    name = "mistral"
    model_prefix = "mistral"


class AzureProvider(LLMProvider):
    """Azure OpenAI. ``model`` is the deployment name, ``base_url`` the endpoint."""

    name = "azure"
    model_prefix = "azure"

    def __init__(self, config: ProviderConfig, call_log: Optional[LLMCallLog] = None):
        if not config.base_url:
            raise MissingCredential("Azure endpoint URL is required", self.name)
        if not config.model:
            raise MissingCredential("Azure deployment ID is required", self.name)
        super().__init__(config, call_log)

    def _completion_kwargs(self) -> Dict[str, Any]:
        kwargs = super()._completion_kwargs()
        if self.config.api_version:
            kwargs["api_version"] = self.config.api_version
        return kwargs


class OllamaProvider(LLMProvider):
    """Self-hosted models. No API key; ``base_url`` points at the Ollama server."""

    name = "ollama"
    model_prefix = "ollama"

    def _completion_kwargs(self) -> Dict[str, Any]:
        kwargs = super()._completion_kwargs()
        kwargs.pop("api_key", None)
        if self.config.context_length:
            kwargs["num_ctx"] = self.config.context_length
        return kwargs


PROVIDERS = {
    provider.name: provider
    for provider in (
        OpenAIProvider,
        AnthropicProvider,
        GeminiProvider,
        CohereProvider,
        GroqProvider,
        MistralProvider,
        AzureProvider,
        OllamaProvider,
    )
}
