"""Gmail API gateway: the four mailbox calls the reply pipeline needs."""

from __future__ import annotations

import base64
import logging
from email.mime.text import MIMEText

from mail_responder.exceptions import GatewayError
from mail_responder.gmail.models import MessageDetail, MessageRef
from mail_responder.gmail.parser import parse_message
from mail_responder.gmail.query import UNREAD_NOT_FROM_ME

logger = logging.getLogger(__name__)

UNREAD = "UNREAD"


def _header_value(value: str) -> str:
    """Collapse line breaks so a value cannot start a new header."""
    return " ".join(value.splitlines()).strip()


def build_reply(detail: MessageDetail, body: str) -> MIMEText:
    """Compose a plain-text reply threaded onto ``detail``."""
    msg = MIMEText(body, "plain", "utf-8")
    msg["To"] = _header_value(detail.sender)
    msg["From"] = _header_value(detail.recipient)
    msg["Subject"] = f"Re: {_header_value(detail.subject)}"
    msg["In-Reply-To"] = f"<{_header_value(detail.id)}>"
    msg["References"] = f"<{_header_value(detail.id)}>"
    return msg


def encode_message(msg: MIMEText) -> str:
    """URL-safe base64 without padding, as the ``raw`` send field expects."""
    return base64.urlsafe_b64encode(msg.as_bytes()).decode("ascii").rstrip("=")


class MailGateway:
    """Gmail API client bound to one authorized account.

    Every call raises ``GatewayError`` naming the operation on failure.

    Args:
        credentials: A google.oauth2.credentials.Credentials object.
        user_id: Mailbox to act on; ``"me"`` is the authorized account.
        service: Pre-built Gmail service. When supplied, ``credentials``
            is not used to build one.
    """

    def __init__(self, credentials=None, user_id: str = "me", service=None):
        self.user_id = user_id
        if service is None:
            from googleapiclient.discovery import build

            service = build(
                "gmail", "v1", credentials=credentials, cache_discovery=False,
            )
        self._service = service

    @property
    def service(self) -> "googleapiclient.discovery.Resource":
        return self._service

    def list_unread(
        self, max_results: int, query: str = UNREAD_NOT_FROM_ME,
    ) -> list[MessageRef]:
        """List up to ``max_results`` unread messages not sent by the account."""
        try:
            response = self.service.users().messages().list(
                userId=self.user_id, q=query, maxResults=max_results,
            ).execute()
        except Exception as e:
            raise GatewayError("list_unread", e) from e

        return [
            MessageRef(id=m["id"], thread_id=m.get("threadId", ""))
            for m in response.get("messages", [])[:max_results]
        ]

    def get_message(self, msg_id: str) -> MessageDetail:
        try:
            message = self.service.users().messages().get(
                userId=self.user_id, id=msg_id, format="full",
            ).execute()
            return parse_message(message)
        except Exception as e:
            raise GatewayError("get_message", e, msg_id) from e

    def send_reply(self, detail: MessageDetail, body: str) -> dict:
        """Send ``body`` as a reply in the thread of ``detail``."""
        try:
            raw = encode_message(build_reply(detail, body))
            return self.service.users().messages().send(
                userId=self.user_id,
                body={"raw": raw, "threadId": detail.thread_id},
            ).execute()
        except Exception as e:
            raise GatewayError("send_reply", e, detail.id) from e

    def mark_read(self, msg_id: str) -> None:
        try:
            self.service.users().messages().modify(
                userId=self.user_id, id=msg_id,
                body={"removeLabelIds": [UNREAD]},
            ).execute()
        except Exception as e:
            raise GatewayError("mark_read", e, msg_id) from e
