"""Data models for the Gmail module."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone


@dataclass
class CredentialRecord:
    """Persisted OAuth2 token, stored as JSON in the token file.

    ``expiry`` is a naive UTC datetime, matching google-auth's convention.
    """

    access_token: str
    refresh_token: str | None = None
    expiry: datetime | None = None
    scope: str = ""
    token_type: str = "Bearer"

    @property
    def scopes(self) -> list[str]:
        return self.scope.split()

    def to_dict(self) -> dict:
        data = asdict(self)
        data["expiry"] = self.expiry.isoformat() if self.expiry else None
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CredentialRecord":
        """Build a record from parsed JSON. Raises ValueError/TypeError if invalid."""
        access_token = data.get("access_token")
        if not access_token or not isinstance(access_token, str):
            raise ValueError("credential record has no access_token")

        expiry = data.get("expiry")
        if expiry:
            expiry = datetime.fromisoformat(expiry)
            if expiry.tzinfo is not None:
                expiry = expiry.astimezone(timezone.utc).replace(tzinfo=None)
        else:
            expiry = None

        scope = data.get("scope") or ""
        if isinstance(scope, list) and all(isinstance(s, str) for s in scope):
            scope = " ".join(scope)
        elif not isinstance(scope, str):
            raise ValueError("scope must be a string or a list of strings")

        refresh_token = data.get("refresh_token") or None
        if refresh_token is not None and not isinstance(refresh_token, str):
            raise ValueError("refresh_token must be a string")

        token_type = data.get("token_type") or "Bearer"
        if not isinstance(token_type, str):
            raise ValueError("token_type must be a string")

        return cls(
            access_token=access_token,
            refresh_token=refresh_token,
            expiry=expiry,
            scope=scope,
            token_type=token_type,
        )

    @classmethod
    def from_credentials(cls, creds) -> "CredentialRecord":
        """Snapshot a google.oauth2.credentials.Credentials object."""
        scopes = getattr(creds, "granted_scopes", None) or creds.scopes or []
        return cls(
            access_token=creds.token,
            refresh_token=creds.refresh_token,
            expiry=creds.expiry,
            scope=" ".join(scopes),
        )

    def to_credentials(
        self,
        client_id: str,
        client_secret: str,
        token_uri: str,
        scopes: list[str] | None = None,
    ):
        """Return google-auth Credentials able to refresh themselves."""
        from google.oauth2.credentials import Credentials

        return Credentials(
            token=self.access_token,
            refresh_token=self.refresh_token,
            token_uri=token_uri,
            client_id=client_id,
            client_secret=client_secret,
            scopes=self.scopes or scopes,
            expiry=self.expiry,
        )


@dataclass
class MessageRef:
    """A listed mailbox item; carries no content."""

    id: str
    thread_id: str


@dataclass
class MessageDetail:
    """Structured representation of a Gmail message for replying."""

    id: str
    thread_id: str
    sender: str
    recipient: str
    subject: str
    body: str
    date: str = ""
