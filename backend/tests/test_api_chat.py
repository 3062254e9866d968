"""Tests for chat API endpoints."""

import pytest
from types import SimpleNamespace

from curio_finance.ai import providers
from curio_finance.ai.prompts import CHAT_GREETING


@pytest.fixture
def llm_chat(monkeypatch):
    state = {"reply": "You spent `$50` on **Food**.", "calls": []}

    async def acompletion(**kwargs):
        state["calls"].append(kwargs)
        if isinstance(state["reply"], Exception):
            raise state["reply"]
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=state["reply"]))],
            usage=SimpleNamespace(prompt_tokens=100, completion_tokens=10, total_tokens=110),
        )

    monkeypatch.setattr(providers.litellm, "acompletion", acompletion)
    return state


def ask(client, headers, text="How much did I spend on food?", **extra_headers):
    return client.post(
        "/api/v1/chat",
        json={"messages": [{"role": "user", "content": text}]},
        headers={**headers, **extra_headers},
    )


class TestChatAPI:
    """Test POST /chat."""

    def test_success(self, client, auth_headers, expense_category, llm_chat):
        response = ask(client, auth_headers, **{"X-LLM-Provider": "openai", "X-API-Key": "sk-test"})

        assert response.status_code == 200
        data = response.json()
        assert data["content"] == "You spent `$50` on **Food**."
        assert data["usage"]["total_tokens"] == 110

        messages = llm_chat["calls"][0]["messages"]
        assert messages[0]["role"] == "system"
        assert "Budget: `$3000.00`" in messages[0]["content"]
        assert "Current Month Summary" in messages[0]["content"]
        assert messages[-1] == {"role": "user", "content": "How much did I spend on food?"}

    def test_historical_question_widens_context(self, client, auth_headers, llm_chat):
        response = ask(
            client, auth_headers, "How does this compare to last month?",
            **{"X-LLM-Provider": "openai", "X-API-Key": "k"}
        )

        assert response.status_code == 200
        assert "3-Month Summary" in llm_chat["calls"][0]["messages"][0]["content"]

    def test_new_conversation_gets_greeting(self, client, auth_headers, llm_chat):
        response = client.post(
            "/api/v1/chat",
            json={"messages": []},
            headers={**auth_headers, "X-LLM-Provider": "openai", "X-API-Key": "k"},
        )

        assert response.status_code == 200
        messages = llm_chat["calls"][0]["messages"]
        assert messages[1] == {"role": "assistant", "content": CHAT_GREETING}

    def test_custom_system_prompt(self, client, auth_headers, llm_chat):
        response = client.post(
            "/api/v1/chat",
            json={"messages": [{"role": "user", "content": "hi"}], "system_prompt": "Talk like a pirate."},
            headers={**auth_headers, "X-LLM-Provider": "openai", "X-API-Key": "k"},
        )

        assert response.status_code == 200
        assert llm_chat["calls"][0]["messages"][0]["content"].startswith("Talk like a pirate.")

    def test_provider_without_chat(self, client, auth_headers, llm_chat):
        """Cohere is insights-only: 400 and no model call."""
        response = ask(client, auth_headers, **{"X-LLM-Provider": "cohere", "X-API-Key": "k"})

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Provider not supported"
        assert data["action"] == "configure_llm"
        assert llm_chat["calls"] == []

    def test_unknown_provider(self, client, auth_headers, llm_chat):
        response = ask(client, auth_headers, **{"X-LLM-Provider": "acme", "X-API-Key": "k"})
        assert response.status_code == 400

    def test_missing_api_key(self, client, auth_headers, llm_chat):
        response = ask(client, auth_headers, **{"X-LLM-Provider": "openai"})

        assert response.status_code == 401
        assert response.json()["error"] == "API key not configured"

    def test_rejected_api_key(self, client, auth_headers, llm_chat):
        llm_chat["reply"] = Exception("Incorrect API key provided")
        response = ask(client, auth_headers, **{"X-LLM-Provider": "openai", "X-API-Key": "bad"})

        assert response.status_code == 401

    def test_ollama_unreachable(self, client, auth_headers, llm_chat):
        llm_chat["reply"] = Exception("connect ECONNREFUSED 127.0.0.1:11434")
        response = ask(client, auth_headers, **{"X-LLM-Provider": "ollama"})

        assert response.status_code == 503
        assert "Unable to connect to Ollama" in response.json()["message"]

    def test_other_failure(self, client, auth_headers, llm_chat):
        llm_chat["reply"] = Exception("rate limit exceeded")
        response = ask(client, auth_headers, **{"X-LLM-Provider": "openai", "X-API-Key": "k"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to process chat request"}

    def test_failures_recorded(self, client, auth_headers, llm_chat, call_log):
        llm_chat["reply"] = Exception("rate limit exceeded")
        ask(client, auth_headers, **{"X-LLM-Provider": "openai", "X-API-Key": "k"})

        assert call_log.entries()[0].success is False
        assert call_log.entries()[0].operation == "chat"
