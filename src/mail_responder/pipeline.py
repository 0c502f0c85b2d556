"""Single-pass reply pipeline: authorize, list unread, reply to each in turn."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from mail_responder.exceptions import GatewayError
from mail_responder.gmail.auth import Authorizer
from mail_responder.gmail.client import MailGateway
from mail_responder.gmail.models import MessageRef
from mail_responder.llm.responder import ResponseGenerator

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Outcome of one pass."""

    listed: int = 0
    replied: int = 0
    failed: int = 0


class ReplyPipeline:
    """Drives one pass over the unread messages.

    Messages are handled strictly one after another in listed order. A
    gateway failure on one message is logged and leaves that message unread;
    the pass moves on. A failure while listing aborts the pass.

    Args:
        authorizer: Supplies Gmail credentials.
        generator: Drafts the reply text.
        max_results: Upper bound on messages handled per pass.
        gateway_factory: Builds the gateway from the authorized credentials.
    """

    def __init__(
        self,
        authorizer: Authorizer,
        generator: ResponseGenerator,
        max_results: int = 5,
        gateway_factory: Callable[..., MailGateway] = MailGateway,
    ):
        self.authorizer = authorizer
        self.generator = generator
        self.max_results = max_results
        self._gateway_factory = gateway_factory

    def run(self) -> RunSummary:
        """Raises ConsentError or GatewayError (listing only) on fatal failure."""
        credentials = self.authorizer.authorize()
        gateway = self._gateway_factory(credentials)

        try:
            refs = gateway.list_unread(self.max_results)
        except GatewayError as e:
            logger.error(
                f"Listing unread emails failed, aborting pass: {e.operation}: {e.cause}"
            )
            raise

        summary = RunSummary(listed=len(refs))
        if not refs:
            logger.info("No unread emails found.")
            return summary

        logger.info(f"Found {len(refs)} unread emails.")
        for ref in refs:
            if self._process(gateway, ref):
                summary.replied += 1
            else:
                summary.failed += 1

        logger.info(
            f"Pass complete: {summary.replied} replied, {summary.failed} failed"
        )
        return summary

    def _process(self, gateway: MailGateway, ref: MessageRef) -> bool:
        try:
            detail = gateway.get_message(ref.id)
            logger.info(
                f"Processing email from {detail.sender} with subject: {detail.subject}"
            )

            reply = self.generator.generate(detail.sender, detail.subject, detail.body)
            logger.debug(f"Drafted reply for {ref.id}")

            gateway.send_reply(detail, reply)
            logger.info(f"Sent reply to {detail.sender} for message {ref.id}")

            gateway.mark_read(ref.id)
        except GatewayError as e:
            logger.error(
                f"Skipping message {ref.id}: {e.operation} failed: {e.cause}"
            )
            return False

        logger.info(f"Replied to email from {detail.sender} and marked as read.")
        return True
