"""Gmail access: token storage, consent flow, and the mailbox gateway.

Heavy imports are deferred. Use explicit imports:
    from mail_responder.gmail.client import MailGateway
    from mail_responder.gmail.auth import Authorizer, CredentialStore
    from mail_responder.gmail.parser import parse_message
    etc.
"""

# Light imports only (no external deps)
from mail_responder.gmail import query
from mail_responder.gmail.models import CredentialRecord, MessageDetail, MessageRef


def __getattr__(name):
    """Lazy imports for classes that require the Google client libraries."""
    if name == "MailGateway":
        from mail_responder.gmail.client import MailGateway
        return MailGateway
    if name in ("Authorizer", "AuthState", "CredentialStore"):
        from mail_responder.gmail import auth
        return getattr(auth, name)
    if name == "parse_message":
        from mail_responder.gmail.parser import parse_message
        return parse_message
    raise AttributeError(f"module 'mail_responder.gmail' has no attribute {name!r}")


__all__ = [
    "MailGateway",
    "Authorizer",
    "AuthState",
    "CredentialStore",
    "CredentialRecord",
    "MessageDetail",
    "MessageRef",
    "parse_message",
    "query",
]
