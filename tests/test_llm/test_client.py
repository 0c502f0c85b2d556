"""Tests for LLM client."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import anthropic
import httpx
import pytest

from mail_responder.exceptions import GenerationError
from mail_responder.llm.client import DEFAULT_MODEL, LLMClient


def _response(*blocks, stop_reason="end_turn"):
    return SimpleNamespace(
        content=list(blocks),
        stop_reason=stop_reason,
        usage=SimpleNamespace(input_tokens=11, output_tokens=7),
    )


def _text(text):
    return SimpleNamespace(type="text", text=text)


@pytest.fixture
def client():
    llm = LLMClient(api_key="test-key")
    llm._client = MagicMock()
    return llm


def test_init_requires_api_key(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    with pytest.raises(GenerationError, match="API key is required"):
        LLMClient(api_key="")


def test_init_accepts_none_api_key_with_env(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key-123")
    client = LLMClient(api_key=None)
    assert client.model == DEFAULT_MODEL


def test_client_property():
    client = LLMClient(api_key="test-key")
    assert client.client is client._client


def test_generate(client):
    client._client.messages.create.return_value = _response(_text("Hello there"))
    result = client.generate("system", "user prompt", max_tokens=200, temperature=0.7)
    assert result == {
        "text": "Hello there",
        "input_tokens": 11,
        "output_tokens": 7,
        "model": DEFAULT_MODEL,
    }
    client._client.messages.create.assert_called_once_with(
        model=DEFAULT_MODEL,
        max_tokens=200,
        temperature=0.7,
        system="system",
        messages=[{"role": "user", "content": "user prompt"}],
    )


def test_generate_model_override(client):
    client._client.messages.create.return_value = _response(_text("ok"))
    result = client.generate("s", "u", model="claude-other")
    assert result["model"] == "claude-other"


def test_generate_api_error(client):
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    client._client.messages.create.side_effect = anthropic.APIConnectionError(request=request)
    with pytest.raises(GenerationError, match="Claude API error"):
        client.generate("s", "u")


def test_generate_without_text_blocks(client):
    client._client.messages.create.return_value = _response(stop_reason="max_tokens")
    with pytest.raises(GenerationError, match="no text content"):
        client.generate("s", "u")
