"""Tests for LLM provider adapters and the call log."""

import asyncio
import pytest
from types import SimpleNamespace

from curio_finance.ai import providers
from curio_finance.ai.call_log import LLMCallLog, LLMLogEntry
from curio_finance.ai.factory import create_provider
from curio_finance.ai.prompts import JSON_ONLY_SYSTEM
from curio_finance.ai.providers import CohereProvider, ProviderConfig, wrap_transport_error
from curio_finance.exceptions import CapabilityMismatch, ProviderTransportError, ResponseParseError
from curio_finance.schemas.chat import ChatMessage
from curio_finance.schemas.insights import CategoryTotal, TransactionData


DATA = TransactionData(
    total_income=5000,
    total_expenses=4500,
    categories=[CategoryTotal(name="Food", total_amount=800, type="expense", budget=700)],
)


def completion(content, usage=None):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=usage,
    )


@pytest.fixture
def fake_completion(monkeypatch):
    """Replace litellm.acompletion; records the kwargs of each call."""
    calls = []
    state = {"result": completion('{"commentary": ["ok"], "tips": ["tip"]}')}

    async def acompletion(**kwargs):
        calls.append(kwargs)
        if isinstance(state["result"], Exception):
            raise state["result"]
        return state["result"]

    monkeypatch.setattr(providers.litellm, "acompletion", acompletion)
    state["calls"] = calls
    return state


class TestAnalyze:
    """Test insight commentary requests."""

    def test_success(self, fake_completion):
        log = LLMCallLog()
        provider = create_provider("openai", {"api_key": "sk-test"}, call_log=log)

        result = asyncio.run(provider.analyze(DATA))

        assert result.commentary == ["ok"]
        assert result.tips == ["tip"]

        kwargs = fake_completion["calls"][0]
        assert kwargs["model"] == "openai/gpt-4o-mini"
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0]["role"] == "user"
        assert "Food: $800.00" in kwargs["messages"][0]["content"]

        entries = log.entries()
        assert len(entries) == 1
        assert entries[0].success is True
        assert entries[0].operation == "analyze"
        assert entries[0].provider == "openai"
        assert entries[0].response == {"commentary": ["ok"], "tips": ["tip"]}

    def test_custom_system_prompt(self, fake_completion):
        provider = create_provider("anthropic", {"api_key": "k"})
        asyncio.run(provider.analyze(DATA, system_prompt="Be brief."))

        kwargs = fake_completion["calls"][0]
        assert kwargs["messages"][0]["content"].startswith("Be brief.")
        # No native JSON mode
        assert "response_format" not in kwargs

    def test_groq_adds_json_system_message(self, fake_completion):
        provider = create_provider("groq", {"api_key": "k"})
        asyncio.run(provider.analyze(DATA))

        messages = fake_completion["calls"][0]["messages"]
        assert messages[0] == {"role": "system", "content": JSON_ONLY_SYSTEM}
        assert messages[1]["content"].startswith("Analyze this financial data and respond with JSON:")

    def test_repairs_model_output(self, fake_completion):
        fake_completion["result"] = completion("Sure! {commentary: ['Spending is up'], tips: ['Save more']")
        provider = create_provider("openai", {"api_key": "k"})

        result = asyncio.run(provider.analyze(DATA))

        assert result.commentary == ["Spending is up"]
        assert result.tips == ["Save more"]

    def test_unparseable_output_logged_and_raised(self, fake_completion):
        fake_completion["result"] = completion("I'd rather not.")
        log = LLMCallLog()
        provider = create_provider("openai", {"api_key": "k"}, call_log=log)

        with pytest.raises(ResponseParseError):
            asyncio.run(provider.analyze(DATA))

        assert log.entries()[0].success is False
        assert "ResponseParseError" in log.entries()[0].error

    def test_empty_choices_logged_and_raised(self, fake_completion):
        fake_completion["result"] = SimpleNamespace(choices=[], usage=None)
        log = LLMCallLog()
        provider = create_provider("openai", {"api_key": "k"}, call_log=log)

        with pytest.raises(ResponseParseError) as exc_info:
            asyncio.run(provider.analyze(DATA))

        assert exc_info.value.provider == "openai"
        assert log.entries()[0].success is False

    def test_connection_failure(self, fake_completion):
        fake_completion["result"] = Exception("Connection refused")
        log = LLMCallLog()
        provider = create_provider("ollama", call_log=log)

        with pytest.raises(ProviderTransportError) as exc_info:
            asyncio.run(provider.analyze(DATA))

        assert exc_info.value.is_connection_error is True
        assert exc_info.value.provider == "ollama"
        assert len(log) == 1

    def test_ollama_call_arguments(self, fake_completion):
        provider = create_provider("ollama")
        asyncio.run(provider.analyze(DATA))

        kwargs = fake_completion["calls"][0]
        assert kwargs["model"] == "ollama/llama3.1:8b"
        assert kwargs["api_base"] == "http://localhost:11434"
        assert kwargs["num_ctx"] == 4096
        assert kwargs["temperature"] == 0.7


class TestChat:
    """Test chat requests."""

    def test_success_with_usage(self, fake_completion):
        usage = SimpleNamespace(prompt_tokens=12, completion_tokens=4, total_tokens=16)
        fake_completion["result"] = completion("  You spent `$50` on Food.  ", usage)
        log = LLMCallLog()
        provider = create_provider("openai", {"api_key": "k"}, mode="chat", call_log=log)
        messages = [
            ChatMessage(role="system", content="context"),
            ChatMessage(role="user", content="How much on food?"),
        ]

        result = asyncio.run(provider.chat(messages))

        assert result.content == "You spent `$50` on Food."
        assert result.usage.total_tokens == 16
        assert fake_completion["calls"][0]["messages"] == [
            {"role": "system", "content": "context"},
            {"role": "user", "content": "How much on food?"},
        ]
        assert "response_format" not in fake_completion["calls"][0]
        assert log.entries()[0].operation == "chat"
        assert log.entries()[0].prompt == "How much on food?"

    def test_adapter_refuses_chat_without_capability(self, fake_completion):
        provider = CohereProvider(ProviderConfig(api_key="k", model="command-r"))

        with pytest.raises(CapabilityMismatch):
            asyncio.run(provider.chat([ChatMessage(role="user", content="hi")]))

        assert fake_completion["calls"] == []

    @pytest.mark.parametrize("response", [
        SimpleNamespace(choices=[], usage=None),
        SimpleNamespace(usage=None),
        SimpleNamespace(choices=[SimpleNamespace(message=None)], usage=None),
    ])
    def test_malformed_response_logged_and_raised(self, fake_completion, response):
        fake_completion["result"] = response
        log = LLMCallLog()
        provider = create_provider("openai", {"api_key": "k"}, mode="chat", call_log=log)

        with pytest.raises(ResponseParseError):
            asyncio.run(provider.chat([ChatMessage(role="user", content="hi")]))

        assert len(log) == 1
        assert log.entries()[0].success is False

    def test_authentication_failure(self, fake_completion):
        fake_completion["result"] = Exception("Invalid API key provided")
        provider = create_provider("openai", {"api_key": "bad"}, mode="chat")

        with pytest.raises(ProviderTransportError) as exc_info:
            asyncio.run(provider.chat([ChatMessage(role="user", content="hi")]))

        assert exc_info.value.is_authentication_error is True
        assert exc_info.value.is_connection_error is False


class TestWrapTransportError:
    """Test vendor failure classification."""

    def test_other_failure(self):
        error = wrap_transport_error("openai", Exception("rate limit exceeded"))
        assert error.is_connection_error is False
        assert error.is_authentication_error is False
        assert str(error) == "rate limit exceeded"

    def test_fetch_failure_is_connection(self):
        error = wrap_transport_error("ollama", RuntimeError("Failed to fetch"))
        assert error.is_connection_error is True

    def test_empty_message_uses_class_name(self):
        assert str(wrap_transport_error("openai", TimeoutError())) == "TimeoutError"


class TestLLMCallLog:
    """Test the call log sink."""

    def entry(self, n):
        return LLMLogEntry(provider="openai", operation="chat", prompt=f"p{n}", duration_ms=n, success=True)

    def test_bounded(self):
        log = LLMCallLog(capacity=2)
        for n in range(3):
            log.record(self.entry(n))

        assert [e.prompt for e in log.entries()] == ["p1", "p2"]

    def test_drain_empties(self):
        log = LLMCallLog()
        log.record(self.entry(1))

        drained = log.drain()

        assert len(drained) == 1
        assert len(log) == 0
        assert log.entries() == []

    def test_to_dict(self):
        data = self.entry(5).to_dict()
        assert data["provider"] == "openai"
        assert data["duration_ms"] == 5
        assert data["error"] is None
        assert "timestamp" in data
