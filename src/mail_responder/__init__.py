"""Reply to unread Gmail messages with LLM-drafted answers."""

__version__ = "0.1.0"
