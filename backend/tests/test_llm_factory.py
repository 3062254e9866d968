"""Tests for provider construction and capability checks."""

import pytest

from curio_finance.ai import providers
from curio_finance.ai.capabilities import PROVIDER_CAPABILITIES
from curio_finance.ai.factory import create_provider, parse_llm_config
from curio_finance.ai.providers import AzureProvider, OllamaProvider, OpenAIProvider
from curio_finance.exceptions import CapabilityMismatch, MissingCredential, UnsupportedProvider


class TestCapabilityGate:
    """Test mode checks before construction."""

    def test_chat_on_insights_only_provider(self, monkeypatch):
        """Cohere cannot chat; nothing is constructed or called."""
        def fail(*args, **kwargs):
            raise AssertionError("network call attempted")

        monkeypatch.setattr(providers.litellm, "acompletion", fail)

        with pytest.raises(CapabilityMismatch) as exc_info:
            create_provider("cohere", {"api_key": "k"}, mode="chat")

        assert exc_info.value.provider == "cohere"
        assert exc_info.value.mode == "chat"

    def test_insights_on_cohere_allowed(self):
        provider = create_provider("cohere", {"api_key": "k"}, mode="insights")
        assert provider.model == "cohere/command-r"

    def test_unknown_mode(self):
        with pytest.raises(CapabilityMismatch):
            create_provider("openai", {"api_key": "k"}, mode="embeddings")

    def test_unsupported_provider(self):
        with pytest.raises(UnsupportedProvider):
            create_provider("acme", {"api_key": "k"})

    def test_every_listed_provider_has_a_class(self):
        assert set(PROVIDER_CAPABILITIES) == set(providers.PROVIDERS)


class TestCredentials:
    """Test API key and endpoint requirements."""

    def test_missing_api_key(self):
        with pytest.raises(MissingCredential) as exc_info:
            create_provider("openai")
        assert exc_info.value.provider == "openai"

    def test_ollama_needs_no_key(self):
        provider = create_provider("ollama")
        assert isinstance(provider, OllamaProvider)
        assert provider.config.api_key is None

    def test_azure_requires_endpoint(self):
        with pytest.raises(MissingCredential, match="endpoint"):
            create_provider("azure", {"api_key": "k", "model": "my-deployment"})

    def test_azure_requires_deployment(self):
        with pytest.raises(MissingCredential, match="deployment"):
            create_provider("azure", {"api_key": "k", "base_url": "https://example.openai.azure.com"})

    def test_azure_complete(self):
        provider = create_provider("azure", {
            "api_key": "k",
            "base_url": "https://example.openai.azure.com",
            "model": "my-deployment",
        })
        assert isinstance(provider, AzureProvider)
        kwargs = provider._completion_kwargs()
        assert kwargs["model"] == "azure/my-deployment"
        assert kwargs["api_base"] == "https://example.openai.azure.com"
        assert kwargs["api_version"] == "2024-02-15-preview"


class TestConfigMerge:
    """Test defaults merged with caller config."""

    def test_defaults_applied(self):
        provider = create_provider("OpenAI", {"api_key": "k"})
        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "openai/gpt-4o-mini"

    def test_override_wins(self):
        provider = create_provider("openai", {"api_key": "k", "model": "gpt-4o"})
        assert provider.model == "openai/gpt-4o"

    def test_none_does_not_erase_default(self):
        provider = create_provider("ollama", {"model": None, "baseUrl": None})
        assert provider.config.model == "llama3.1:8b"
        assert provider.config.base_url == "http://localhost:11434"

    def test_camel_case_keys(self):
        provider = create_provider("ollama", {"baseUrl": "http://gpu-box:11434", "contextLength": 8192})
        kwargs = provider._completion_kwargs()
        assert kwargs["api_base"] == "http://gpu-box:11434"
        assert kwargs["num_ctx"] == 8192

    def test_ollama_custom_model(self):
        provider = create_provider("ollama", {"customModel": "mistral:7b"})
        assert provider.model == "ollama/mistral:7b"

    def test_ollama_never_sends_api_key(self):
        provider = create_provider("ollama", {"api_key": "ignored"})
        assert "api_key" not in provider._completion_kwargs()

    def test_invalid_fields_keep_api_key(self):
        provider = create_provider("openai", {"apiKey": "k", "temperature": "hot"})
        assert provider.config.api_key == "k"
        assert provider.config.temperature is None


class TestParseLLMConfig:
    """Test decoding the config header."""

    def test_valid(self):
        assert parse_llm_config('{"model": "gpt-4o"}') == {"model": "gpt-4o"}

    @pytest.mark.parametrize("raw", [None, "", "{not json", "[1, 2]", '"text"'])
    def test_malformed_ignored(self, raw):
        assert parse_llm_config(raw) == {}
