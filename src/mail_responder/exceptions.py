"""Exception hierarchy for mail-responder."""

from __future__ import annotations


class ResponderError(Exception):
    """Base exception for all mail-responder errors."""


class ConfigError(ResponderError):
    """Missing or malformed configuration (client secret, settings)."""


# Gmail
class ConsentError(ResponderError):
    """The authorization code could not be exchanged for a token."""


class GatewayError(ResponderError):
    """A Gmail API call failed.

    Args:
        operation: Name of the gateway operation that failed.
        cause: The underlying exception.
        message_id: Gmail message id the call was about, if any.
    """

    def __init__(
        self,
        operation: str,
        cause: BaseException,
        message_id: str | None = None,
    ):
        self.operation = operation
        self.cause = cause
        self.message_id = message_id
        target = f" for message {message_id}" if message_id else ""
        super().__init__(f"Gmail {operation} failed{target}: {cause}")


# LLM
class GenerationError(ResponderError):
    """Completion request failed or returned an unusable response."""
