"""Static capability table and default configuration per LLM provider."""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class ProviderCapabilities:
    supports_chat: bool
    supports_insights: bool
    supports_function_calling: bool
    supports_streaming: bool
    max_tokens: int
    requires_api_key: bool = True
    supports_json_mode: bool = False

    def supports(self, mode: str) -> bool:
        if mode == "chat":
            return self.supports_chat
        if mode == "insights":
            return self.supports_insights
        return False


PROVIDER_CAPABILITIES: Dict[str, ProviderCapabilities] = {
    "openai": ProviderCapabilities(
        supports_chat=True,
        supports_insights=True,
        supports_function_calling=True,
        supports_streaming=True,
        max_tokens=8192,
        supports_json_mode=True,
    ),
    "anthropic": ProviderCapabilities(
        supports_chat=True,
        supports_insights=True,
        supports_function_calling=True,
        supports_streaming=True,
        max_tokens=100000,
    ),
    "gemini": ProviderCapabilities(
        supports_chat=True,
        supports_insights=True,
        supports_function_calling=True,
        supports_streaming=True,
        max_tokens=32768,
    ),
    "cohere": ProviderCapabilities(
        supports_chat=False,
        supports_insights=True,
        supports_function_calling=False,
        supports_streaming=True,
        max_tokens=4096,
    ),
    "groq": ProviderCapabilities(
        supports_chat=True,
        supports_insights=True,
        supports_function_calling=True,
        supports_streaming=True,
        max_tokens=32768,
        supports_json_mode=True,
    ),
    "mistral": ProviderCapabilities(
        supports_chat=True,
        supports_insights=True,
        supports_function_calling=True,
        supports_streaming=True,
        max_tokens=32768,
    ),
    "azure": ProviderCapabilities(
        supports_chat=True,
        supports_insights=True,
        supports_function_calling=True,
        supports_streaming=True,
        max_tokens=8192,
    ),
    "ollama": ProviderCapabilities(
        supports_chat=True,
        supports_insights=True,
        supports_function_calling=False,
        supports_streaming=True,
        max_tokens=4096,
        requires_api_key=False,
    ),
}


DEFAULT_CONFIGS: Dict[str, Dict[str, Any]] = {
    "openai": {"model": "gpt-4o-mini"},
    "anthropic": {"model": "claude-3-haiku-20240307"},
    "gemini": {"model": "gemini-1.5-flash"},
    "cohere": {"model": "command-r"},
    "groq": {"model": "llama-3.1-8b-instant"},
    "mistral": {"model": "mistral-medium-latest"},
    "azure": {"api_version": "2024-02-15-preview"},
    "ollama": {
        "base_url": "http://localhost:11434",
        "model": "llama3.1:8b",
        "context_length": 4096,
        "temperature": 0.7,
    },
}
