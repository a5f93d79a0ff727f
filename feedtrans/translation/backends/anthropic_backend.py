"""Anthropic Claude translation backend."""

import os
import time
import logging
from typing import Optional

from anthropic import AsyncAnthropic

from feedtrans.core.exceptions import BackendError
from ..base import TranslationBackend, TranslationRequest, TranslationResponse

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class AnthropicBackend(TranslationBackend):
    """Anthropic Claude-based translation backend."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        base_url: Optional[str] = None,
        client: Optional[AsyncAnthropic] = None
    ):
        api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        # Support custom base URL for proxies and gateways
        base_url = base_url or os.getenv("ANTHROPIC_API_BASE_URL")
        super().__init__(api_key, model)

        if client is not None:
            self.async_client = client
        elif self.api_key:
            client_kwargs = {"api_key": self.api_key}
            if base_url:
                # The SDK appends /v1 itself
                if base_url.endswith("/v1"):
                    base_url = base_url[:-3]
                elif base_url.endswith("/v1/"):
                    base_url = base_url[:-4]
                client_kwargs["base_url"] = base_url
                logger.info(f"Using custom Anthropic API endpoint: {base_url}")
            self.async_client = AsyncAnthropic(**client_kwargs)
        else:
            self.async_client = None

    def is_available(self) -> bool:
        """Check if backend is available and configured."""
        return self.async_client is not None

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        """Send one batch prompt to Claude and return the raw text reply."""
        if not self.async_client:
            raise BackendError("anthropic", "API key not configured")

        start_time = time.time()
        kwargs = {
            "model": self.model,
            "max_tokens": request.max_tokens,
            "system": request.system_prompt,
            "messages": [{"role": "user", "content": request.user_prompt}],
        }
        if request.temperature is not None:
            kwargs["temperature"] = request.temperature

        try:
            response = await self.async_client.messages.create(**kwargs)
        except Exception as e:
            raise BackendError("anthropic", str(e), original_error=e) from e

        if not response.content or response.content[0].type != "text":
            raise BackendError("anthropic", "Unexpected response type")

        usage = getattr(response, "usage", None)
        tokens_used = (usage.input_tokens + usage.output_tokens) if usage else 0

        return TranslationResponse(
            text=response.content[0].text,
            backend="anthropic",
            model=self.model,
            tokens_used=tokens_used,
            latency=time.time() - start_time,
            finish_reason=getattr(response, "stop_reason", None),
        )

    async def close(self) -> None:
        if self.async_client is not None:
            await self.async_client.close()
