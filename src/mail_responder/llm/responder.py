"""Draft email replies with Claude, falling back to a canned acknowledgement."""

from __future__ import annotations

import logging

from mail_responder.exceptions import GenerationError
from mail_responder.llm.client import LLMClient

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Thank you for your email. I'll get back to you shortly."

SYSTEM_PROMPT = "You are a helpful email assistant."

REPLY_PROMPT = """\
You are an AI assistant responding to an email.
Email details:
- From: {sender}
- Subject: {subject}
- Body: {body}

Generate a polite and professional response. If the email asks a question, \
answer it concisely. If it's informational, acknowledge receipt and offer \
assistance if needed. Keep the tone friendly and professional."""


def build_prompt(sender: str, subject: str, body: str) -> str:
    return REPLY_PROMPT.format(sender=sender, subject=subject, body=body)


class ResponseGenerator:
    """Turns an incoming message into reply text.

    ``generate`` never raises for provider failures: the fallback reply is
    returned instead so every sender still gets an answer.

    Args:
        llm: Client used for the completion request.
        model: Model override; ``None`` uses the client's default.
        max_tokens: Maximum reply length.
        temperature: Sampling temperature.
        fallback: Text returned when the completion fails.
    """

    def __init__(
        self,
        llm: LLMClient,
        model: str | None = None,
        max_tokens: int = 200,
        temperature: float = 0.7,
        fallback: str = FALLBACK_REPLY,
    ):
        self._llm = llm
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.fallback = fallback

    def generate(self, sender: str, subject: str, body: str) -> str:
        try:
            result = self._llm.generate(
                system_prompt=SYSTEM_PROMPT,
                user_content=build_prompt(sender, subject, body),
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                model=self.model,
            )
            text = result["text"].strip()
            if not text:
                raise GenerationError("Claude returned an empty reply")
        except Exception as e:
            logger.error(f"Error generating reply to {sender!r}: {e}")
            return self.fallback

        logger.debug(
            f"Generated reply ({result.get('output_tokens', '?')} tokens) "
            f"with {result.get('model')}"
        )
        return text
