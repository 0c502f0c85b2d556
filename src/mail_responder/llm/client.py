"""Claude API client wrapper."""

from __future__ import annotations

import logging
import os

from mail_responder.exceptions import GenerationError

logger = logging.getLogger(__name__)


DEFAULT_MODEL = "claude-haiku-4-5-20251001"


class LLMClient:
    """Synchronous wrapper around the Anthropic SDK.

    Requests are sent once; failures surface as ``GenerationError``.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        timeout: float | None = None,
    ):
        if not api_key and not os.environ.get("ANTHROPIC_API_KEY"):
            raise GenerationError(
                "Anthropic API key is required. "
                "Pass it directly or set ANTHROPIC_API_KEY in your environment."
            )
        from anthropic import Anthropic

        kwargs = {"api_key": api_key or None, "max_retries": 0}
        if timeout is not None:
            kwargs["timeout"] = timeout
        self._client = Anthropic(**kwargs)
        self.model = model

    @property
    def client(self):
        """Access the underlying Anthropic SDK client for advanced usage."""
        return self._client

    def generate(
        self,
        system_prompt: str,
        user_content: str | list[dict],
        max_tokens: int = 1024,
        temperature: float = 0.3,
        model: str | None = None,
    ) -> dict:
        """Send a message to Claude and return the response with usage info.

        Args:
            user_content: A single string (wrapped as user message) or a list
                of message dicts (``[{"role": ..., "content": ...}, ...]``).

        Returns:
            dict with keys: text, input_tokens, output_tokens, model
        """
        from anthropic import APIError

        use_model = model or self.model
        if isinstance(user_content, str):
            msgs = [{"role": "user", "content": user_content}]
        else:
            msgs = user_content
        try:
            response = self._client.messages.create(
                model=use_model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=msgs,
            )
        except APIError as e:
            raise GenerationError(f"Claude API error: {e}") from e

        text_parts = [
            block.text for block in (response.content or [])
            if getattr(block, "type", None) == "text"
        ]
        if not text_parts:
            raise GenerationError(
                f"Claude returned no text content (stop_reason={response.stop_reason})"
            )
        return {
            "text": "\n".join(text_parts),
            "input_tokens": response.usage.input_tokens,
            "output_tokens": response.usage.output_tokens,
            "model": use_model,
        }
