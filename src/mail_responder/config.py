"""Runtime configuration and client-secret loading."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from mail_responder.exceptions import ConfigError
from mail_responder.llm.client import DEFAULT_MODEL
from mail_responder.llm.responder import FALLBACK_REPLY

GMAIL_MODIFY_SCOPE = "https://www.googleapis.com/auth/gmail.modify"

DEFAULT_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


@dataclass
class ClientSecret:
    """OAuth client registration downloaded from Google Cloud Console."""

    client_id: str
    client_secret: str
    redirect_uris: list[str]
    auth_uri: str = DEFAULT_AUTH_URI
    token_uri: str = DEFAULT_TOKEN_URI

    @property
    def redirect_uri(self) -> str:
        return self.redirect_uris[0]

    def to_client_config(self) -> dict:
        """Return the dict shape expected by ``google_auth_oauthlib``."""
        return {
            "installed": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uris": list(self.redirect_uris),
                "auth_uri": self.auth_uri,
                "token_uri": self.token_uri,
            }
        }


def load_client_secret(path: Path) -> ClientSecret:
    """Read a client-secret JSON file (``installed`` or ``web`` section).

    Raises:
        ConfigError: the file is missing, unreadable or lacks required fields.
    """
    if not path.exists():
        raise ConfigError(
            f"Client secret not found at {path}. "
            "Download it from Google Cloud Console and place it there."
        )
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigError(f"Client secret at {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Client secret at {path} must be a JSON object")
    section = data.get("installed") or data.get("web")
    if not isinstance(section, dict):
        raise ConfigError(
            f"Client secret at {path} has no 'installed' or 'web' section"
        )

    missing = [
        key for key in ("client_id", "client_secret", "redirect_uris")
        if not section.get(key)
    ]
    if missing:
        raise ConfigError(
            f"Client secret at {path} is missing: {', '.join(missing)}"
        )
    redirect_uris = section["redirect_uris"]
    if isinstance(redirect_uris, str):
        redirect_uris = [redirect_uris]

    return ClientSecret(
        client_id=section["client_id"],
        client_secret=section["client_secret"],
        redirect_uris=list(redirect_uris),
        auth_uri=section.get("auth_uri") or DEFAULT_AUTH_URI,
        token_uri=section.get("token_uri") or DEFAULT_TOKEN_URI,
    )


def _env_number(name: str, default, cast):
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a {cast.__name__}, got {raw!r}")


@dataclass
class ResponderConfig:
    """Settings threaded into each component at construction.

    Args:
        client_secret_file: Path to the OAuth client-secret JSON.
        token_file: Path where the credential record is persisted.
        scopes: OAuth2 scopes to request.
        max_results: Upper bound on unread messages handled per run.
        model: Completion model identifier.
        max_tokens: Maximum reply length in tokens.
        temperature: Sampling temperature for the reply.
        fallback_reply: Reply sent when the completion fails.
        anthropic_api_key: API key; falls back to ``ANTHROPIC_API_KEY``.
    """

    client_secret_file: Path = Path("credentials.json")
    token_file: Path = Path("token.json")
    scopes: list[str] = field(default_factory=lambda: [GMAIL_MODIFY_SCOPE])
    max_results: int = 5
    model: str = DEFAULT_MODEL
    max_tokens: int = 200
    temperature: float = 0.7
    fallback_reply: str = FALLBACK_REPLY
    anthropic_api_key: str | None = field(default=None, repr=False)

    def __post_init__(self):
        if self.max_results < 1:
            raise ConfigError(f"max_results must be at least 1, got {self.max_results}")
        if self.max_tokens < 1:
            raise ConfigError(f"max_tokens must be at least 1, got {self.max_tokens}")

    @classmethod
    def from_env(cls) -> "ResponderConfig":
        """Build a config from ``MAIL_RESPONDER_*`` environment variables."""
        return cls(
            client_secret_file=Path(
                os.environ.get("MAIL_RESPONDER_CLIENT_SECRET", "credentials.json")
            ),
            token_file=Path(os.environ.get("MAIL_RESPONDER_TOKEN_FILE", "token.json")),
            max_results=_env_number("MAIL_RESPONDER_MAX_RESULTS", 5, int),
            model=os.environ.get("MAIL_RESPONDER_MODEL") or DEFAULT_MODEL,
            max_tokens=_env_number("MAIL_RESPONDER_MAX_TOKENS", 200, int),
            temperature=_env_number("MAIL_RESPONDER_TEMPERATURE", 0.7, float),
            anthropic_api_key=os.environ.get("ANTHROPIC_API_KEY") or None,
        )
