"""OAuth2 token storage and the console consent flow for Gmail API access."""

from __future__ import annotations

import enum
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Callable

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

from mail_responder.config import ClientSecret
from mail_responder.exceptions import ConsentError
from mail_responder.gmail.models import CredentialRecord

logger = logging.getLogger(__name__)


def _console_input(prompt: str) -> str:
    return input(f"{prompt}: ")


class CredentialStore:
    """Reads and atomically writes the credential record at ``token_path``."""

    def __init__(self, token_path: Path):
        self.token_path = Path(token_path)

    def exists(self) -> bool:
        return self.token_path.exists()

    def load(self) -> CredentialRecord | None:
        """Return the stored record, or None when absent or unparsable."""
        if not self.token_path.exists():
            return None
        try:
            data = json.loads(self.token_path.read_text())
            if not isinstance(data, dict):
                raise ValueError("token file is not a JSON object")
            return CredentialRecord.from_dict(data)
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Ignoring unreadable token file {self.token_path}: {e}")
            return None

    def save(self, record: CredentialRecord) -> None:
        """Overwrite the token file via a temp file and ``os.replace``."""
        parent = self.token_path.parent
        parent.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(
            prefix=f".{self.token_path.name}.", suffix=".tmp", dir=parent,
        )
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(record.to_dict(), f)
            os.replace(temp_path, self.token_path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise
        logger.info(f"Token stored to {self.token_path}")


class AuthState(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AWAITING_USER_CONSENT = "awaiting_user_consent"
    AUTHORIZED = "authorized"
    CONSENT_FAILED = "consent_failed"


class Authorizer:
    """Obtains Gmail credentials, asking the operator for consent only once.

    A stored record is used as-is (refreshed first if it has expired and can
    be refreshed). Without one, the operator is shown an authorization URL
    and the pasted code is exchanged for a token, which is then persisted.

    Args:
        client_secret: OAuth client registration.
        store: Where the credential record lives.
        scopes: OAuth2 scopes to request.
        notify: Shows the authorization URL to the operator.
        read_code: Blocks until the operator enters the authorization code.
    """

    def __init__(
        self,
        client_secret: ClientSecret,
        store: CredentialStore,
        scopes: list[str],
        notify: Callable[[str], None] = print,
        read_code: Callable[[str], str] = _console_input,
    ):
        self.client_secret = client_secret
        self.store = store
        self.scopes = scopes
        self._notify = notify
        self._read_code = read_code
        self.state = AuthState.UNAUTHENTICATED
        self._credentials: Credentials | None = None

    @property
    def credentials(self) -> Credentials | None:
        return self._credentials

    def authorize(self) -> Credentials:
        """Return usable credentials, running the consent flow if needed.

        Raises:
            ConsentError: the authorization code exchange failed.
        """
        if self.state is AuthState.AUTHORIZED and self._credentials is not None:
            return self._credentials
        if self.state is AuthState.CONSENT_FAILED:
            raise ConsentError("Consent already failed for this run")

        record = self.store.load()
        if record is not None:
            logger.info(f"Loaded stored token from {self.store.token_path}")
            return self._authorized(self._refresh_if_expired(self._to_credentials(record)))

        logger.info("No stored token found, starting consent flow")
        self.state = AuthState.AWAITING_USER_CONSENT
        try:
            creds = self._run_consent_flow()
        except ConsentError:
            self.state = AuthState.CONSENT_FAILED
            raise
        except Exception as e:
            self.state = AuthState.CONSENT_FAILED
            raise ConsentError(f"Error retrieving access token: {e}") from e

        try:
            self.store.save(CredentialRecord.from_credentials(creds))
        except OSError as e:
            self.state = AuthState.CONSENT_FAILED
            raise ConsentError(f"Could not store access token: {e}") from e
        return self._authorized(creds)

    def authorization_url(self, flow: Flow) -> str:
        url, _state = flow.authorization_url(
            access_type="offline",
            prompt="consent",
        )
        return url

    def _authorized(self, creds: Credentials) -> Credentials:
        self._credentials = creds
        self.state = AuthState.AUTHORIZED
        return creds

    def _to_credentials(self, record: CredentialRecord) -> Credentials:
        return record.to_credentials(
            client_id=self.client_secret.client_id,
            client_secret=self.client_secret.client_secret,
            token_uri=self.client_secret.token_uri,
            scopes=self.scopes,
        )

    def _refresh_if_expired(self, creds: Credentials) -> Credentials:
        if not (creds.expired and creds.refresh_token):
            return creds
        try:
            creds.refresh(Request())
        except GoogleAuthError as e:
            logger.warning(f"Stored token could not be refreshed, using it as-is: {e}")
            return creds
        self.store.save(CredentialRecord.from_credentials(creds))
        return creds

    def _run_consent_flow(self) -> Credentials:
        flow = Flow.from_client_config(
            self.client_secret.to_client_config(),
            scopes=self.scopes,
            redirect_uri=self.client_secret.redirect_uri,
        )
        self._notify(
            "Authorize this app by visiting this URL:\n"
            f"{self.authorization_url(flow)}"
        )

        code = (self._read_code("Enter the code from that page here") or "").strip()
        if not code:
            raise ConsentError("No authorization code entered")

        flow.fetch_token(code=code)
        return flow.credentials
