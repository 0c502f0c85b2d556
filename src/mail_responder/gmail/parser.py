"""Parse Gmail API message payloads into reply-ready data."""

from __future__ import annotations

import base64
import binascii
import logging
import re

import dateutil.parser
from bs4 import BeautifulSoup

from mail_responder.gmail.models import MessageDetail

logger = logging.getLogger(__name__)


def parse_message(raw_message: dict) -> MessageDetail:
    """Extract sender, recipient, subject and body from a Gmail API message.

    This is a pure parsing function; it makes no network calls. Works with raw
    message dicts from the Gmail API (format=full).
    """
    payload = raw_message.get("payload", {})
    headers = _extract_headers(payload)

    return MessageDetail(
        id=raw_message["id"],
        thread_id=raw_message.get("threadId", ""),
        sender=headers.get("from", ""),
        recipient=headers.get("to", ""),
        subject=headers.get("subject", ""),
        body=extract_body(payload),
        date=_normalize_date(headers.get("date", "")),
    )


def extract_body(payload: dict) -> str:
    """Return the message text.

    Multi-part payloads yield their ``text/plain`` part, searched depth-first;
    HTML is only used, stripped to text, when no plain part exists. A
    single-part payload is decoded as-is.
    """
    if payload.get("parts"):
        text = _find_part(payload, "text/plain")
        if text:
            return text
        html = _find_part(payload, "text/html")
        return _strip_html(html) if html else ""

    return decode_body_data(payload.get("body", {}).get("data", ""))


def decode_body_data(data: str) -> str:
    """Decode Gmail's URL-safe base64, tolerating stripped padding."""
    if not data:
        return ""
    try:
        raw = base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Could not decode message body: {e}")
        return ""
    return raw.decode("utf-8", errors="replace")


def _find_part(payload: dict, mime_type: str) -> str:
    for part in payload.get("parts", []):
        if part.get("mimeType") == mime_type:
            text = decode_body_data(part.get("body", {}).get("data", ""))
            if text:
                return text
    for part in payload.get("parts", []):
        if part.get("parts"):
            text = _find_part(part, mime_type)
            if text:
                return text
    return ""


def _extract_headers(payload: dict) -> dict[str, str]:
    return {
        h["name"].lower(): h["value"]
        for h in payload.get("headers", [])
    }


def _normalize_date(value: str) -> str:
    if not value:
        return ""
    try:
        return dateutil.parser.parse(value).isoformat()
    except (ValueError, OverflowError):
        return value


def _strip_html(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "head"]):
        tag.decompose()
    text = soup.get_text(separator=" ")
    text = re.sub(r"\s+", " ", text).strip()
    return text
