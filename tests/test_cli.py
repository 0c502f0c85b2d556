"""Tests for the command-line entry point."""

import json
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from mail_responder.cli import cli, run_once
from mail_responder.config import ResponderConfig
from mail_responder.exceptions import ConsentError
from mail_responder.pipeline import RunSummary


def _write_secret(path):
    path.write_text(json.dumps({"installed": {
        "client_id": "cid",
        "client_secret": "shh",
        "redirect_uris": ["http://localhost"],
    }}))
    return path


def test_missing_client_secret_exits_with_error(tmp_path, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")
    runner = CliRunner()
    with patch("mail_responder.pipeline.ReplyPipeline.run") as run:
        result = runner.invoke(
            cli, ["run", "--client-secret", str(tmp_path / "missing.json")],
        )
    assert result.exit_code == 1
    run.assert_not_called()


def test_run_reports_summary(tmp_path, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")
    secret = _write_secret(tmp_path / "credentials.json")
    runner = CliRunner()
    with patch("mail_responder.pipeline.ReplyPipeline.run",
               return_value=RunSummary(listed=2, replied=1, failed=1)):
        result = runner.invoke(cli, [
            "run",
            "--client-secret", str(secret),
            "--token", str(tmp_path / "token.json"),
            "--max-results", "2",
        ])
    assert result.exit_code == 0, result.output
    assert "2 unread, 1 replied, 1 failed" in result.output


def test_consent_failure_exits_with_error(tmp_path, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")
    secret = _write_secret(tmp_path / "credentials.json")
    runner = CliRunner()
    with patch("mail_responder.pipeline.ReplyPipeline.run",
               side_effect=ConsentError("invalid_grant")):
        result = runner.invoke(cli, ["run", "--client-secret", str(secret)])
    assert result.exit_code == 1


def test_max_results_must_be_positive():
    result = CliRunner().invoke(cli, ["run", "--max-results", "0"])
    assert result.exit_code == 2


def test_run_once_wires_config(tmp_path, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")
    config = ResponderConfig(
        client_secret_file=_write_secret(tmp_path / "credentials.json"),
        token_file=tmp_path / "token.json",
        max_results=7,
        model="claude-test",
    )
    with patch("mail_responder.pipeline.ReplyPipeline") as pipeline_cls:
        pipeline_cls.return_value.run.return_value = RunSummary()
        run_once(config)

    authorizer, generator = pipeline_cls.call_args.args
    assert pipeline_cls.call_args.kwargs == {"max_results": 7}
    assert authorizer.client_secret.client_id == "cid"
    assert authorizer.store.token_path == tmp_path / "token.json"
    assert generator._llm.model == "claude-test"
    assert generator.max_tokens == 200
