"""LLM client wrapper (Anthropic Claude) and reply drafting."""

from mail_responder.llm.client import DEFAULT_MODEL, LLMClient
from mail_responder.llm.responder import FALLBACK_REPLY, ResponseGenerator

__all__ = ["DEFAULT_MODEL", "LLMClient", "FALLBACK_REPLY", "ResponseGenerator"]
