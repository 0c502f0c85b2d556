"""Gmail search query for the messages awaiting a reply."""

from __future__ import annotations

from typing import Iterable


def construct_query(unread: bool = False, exclude_senders: Iterable[str] = ()) -> str:
    """Build a Gmail search query; all terms are and'd together.

    Args:
        unread: Restrict to unread messages.
        exclude_senders: Senders whose messages are left out. ``"me"`` is the
            authorized account.
    """
    terms = []
    if unread:
        terms.append("is:unread")
    terms.extend(f"-from:{sender}" for sender in exclude_senders)
    return " ".join(terms)


UNREAD_NOT_FROM_ME = construct_query(unread=True, exclude_senders=["me"])
