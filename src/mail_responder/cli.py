"""Command-line entry point for mail-responder."""

from __future__ import annotations

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

import click
from dotenv import load_dotenv

from mail_responder import __version__
from mail_responder.config import ResponderConfig, load_client_secret
from mail_responder.exceptions import ResponderError

if TYPE_CHECKING:
    from mail_responder.pipeline import RunSummary

logger = logging.getLogger("mail_responder")


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        force=True,
    )
    # Suppress noisy loggers
    for name in ("googleapiclient.discovery_cache", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Reply to unread Gmail messages with Claude-drafted answers."""
    load_dotenv()


@cli.command()
@click.option("--client-secret", type=click.Path(path_type=Path),
              help="OAuth client-secret JSON (default: credentials.json).")
@click.option("--token", "token_file", type=click.Path(path_type=Path),
              help="Where the OAuth token is stored (default: token.json).")
@click.option("--max-results", type=click.IntRange(min=1),
              help="Maximum unread messages to answer this run (default: 5).")
@click.option("--model", help="Claude model used to draft replies.")
@click.option("--log-level", default="INFO", show_default=True,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"],
                                case_sensitive=False))
def run(client_secret, token_file, max_results, model, log_level) -> None:
    """Answer unread mail once, then exit."""
    setup_logging(log_level)

    try:
        config = ResponderConfig.from_env()
        overrides = {
            "client_secret_file": client_secret,
            "token_file": token_file,
            "max_results": max_results,
            "model": model,
        }
        config = replace(
            config, **{k: v for k, v in overrides.items() if v is not None}
        )
        summary = run_once(config)
    except ResponderError as e:
        logger.error(str(e))
        sys.exit(1)

    click.echo(
        f"{summary.listed} unread, {summary.replied} replied, {summary.failed} failed"
    )


def run_once(config: ResponderConfig) -> RunSummary:
    """Build the components from ``config`` and run a single pass."""
    from mail_responder.gmail.auth import Authorizer, CredentialStore
    from mail_responder.llm.client import LLMClient
    from mail_responder.llm.responder import ResponseGenerator
    from mail_responder.pipeline import ReplyPipeline

    secret = load_client_secret(config.client_secret_file)
    authorizer = Authorizer(
        secret,
        CredentialStore(config.token_file),
        config.scopes,
        notify=click.echo,
        read_code=click.prompt,
    )
    generator = ResponseGenerator(
        LLMClient(api_key=config.anthropic_api_key, model=config.model),
        max_tokens=config.max_tokens,
        temperature=config.temperature,
        fallback=config.fallback_reply,
    )
    pipeline = ReplyPipeline(authorizer, generator, max_results=config.max_results)
    return pipeline.run()


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
