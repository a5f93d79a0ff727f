"""Tests for the Anthropic backend with a mocked SDK client."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from feedtrans.core.exceptions import BackendError
from feedtrans.translation.backends import AnthropicBackend
from feedtrans.translation.base import TranslationRequest


def make_client(reply=None, error=None):
    client = MagicMock()
    client.close = AsyncMock()
    if error is not None:
        client.messages.create = AsyncMock(side_effect=error)
    else:
        client.messages.create = AsyncMock(return_value=reply)
    return client


def text_reply(text):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=text)],
        usage=SimpleNamespace(input_tokens=120, output_tokens=30),
        stop_reason="end_turn",
    )


REQUEST = TranslationRequest(system_prompt="You are a translator.", user_prompt="[1] (category) Пръстени")


class TestAnthropicBackend:

    @pytest.mark.asyncio
    async def test_request_shape(self):
        client = make_client(text_reply('["Rings"]'))
        backend = AnthropicBackend(api_key="sk-ant-test", client=client)

        response = await backend.translate(REQUEST)

        client.messages.create.assert_awaited_once_with(
            model="claude-sonnet-4-20250514",
            max_tokens=8192,
            system="You are a translator.",
            messages=[{"role": "user", "content": "[1] (category) Пръстени"}],
        )
        assert response.text == '["Rings"]'
        assert response.tokens_used == 150
        assert response.finish_reason == "end_turn"
        assert response.backend == "anthropic"

    @pytest.mark.asyncio
    async def test_temperature_passed_when_set(self):
        client = make_client(text_reply("[]"))
        backend = AnthropicBackend(api_key="sk-ant-test", model="claude-test", client=client)

        await backend.translate(TranslationRequest("s", "u", max_tokens=100, temperature=0.2))

        kwargs = client.messages.create.await_args.kwargs
        assert kwargs["temperature"] == 0.2
        assert kwargs["model"] == "claude-test"
        assert kwargs["max_tokens"] == 100

    @pytest.mark.asyncio
    async def test_sdk_error_wrapped(self):
        original = RuntimeError("overloaded")
        backend = AnthropicBackend(api_key="sk-ant-test", client=make_client(error=original))

        with pytest.raises(BackendError) as exc_info:
            await backend.translate(REQUEST)

        assert str(exc_info.value) == "Backend 'anthropic' failed: overloaded"
        assert exc_info.value.original_error is original
        assert exc_info.value.__cause__ is original

    @pytest.mark.asyncio
    async def test_non_text_block_rejected(self):
        reply = SimpleNamespace(content=[SimpleNamespace(type="tool_use")], usage=None)
        backend = AnthropicBackend(api_key="sk-ant-test", client=make_client(reply))

        with pytest.raises(BackendError, match="Unexpected response type"):
            await backend.translate(REQUEST)

    @pytest.mark.asyncio
    async def test_without_api_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        backend = AnthropicBackend()

        assert not backend.is_available()
        with pytest.raises(BackendError, match="API key not configured"):
            await backend.translate(REQUEST)
        await backend.close()

    def test_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-env")
        monkeypatch.delenv("ANTHROPIC_API_BASE_URL", raising=False)

        backend = AnthropicBackend()

        assert backend.api_key == "sk-ant-env"
        assert backend.get_info() == {
            "name": "AnthropicBackend",
            "model": "claude-sonnet-4-20250514",
            "available": True,
        }

    @pytest.mark.asyncio
    async def test_close_releases_client(self):
        client = make_client(text_reply("[]"))
        backend = AnthropicBackend(api_key="sk-ant-test", client=client)

        await backend.close()

        client.close.assert_awaited_once()
