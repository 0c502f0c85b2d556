"""Tests for Gmail data models."""

from datetime import datetime

import pytest
from google.oauth2.credentials import Credentials

from mail_responder.gmail.models import CredentialRecord


def test_record_dict_round_trip():
    record = CredentialRecord(
        access_token="a",
        refresh_token="r",
        expiry=datetime(2026, 10, 19, 12, 30),
        scope="s1 s2",
    )
    data = record.to_dict()
    assert data["expiry"] == "2026-10-19T12:30:00"
    assert CredentialRecord.from_dict(data) == record


def test_from_dict_normalizes_aware_expiry():
    record = CredentialRecord.from_dict(
        {"access_token": "a", "expiry": "2026-10-19T14:30:00+02:00"}
    )
    assert record.expiry == datetime(2026, 10, 19, 12, 30)
    assert record.token_type == "Bearer"
    assert record.refresh_token is None


def test_from_dict_accepts_scope_list():
    record = CredentialRecord.from_dict({"access_token": "a", "scope": ["s1", "s2"]})
    assert record.scopes == ["s1", "s2"]


def test_from_dict_requires_access_token():
    with pytest.raises(ValueError):
        CredentialRecord.from_dict({"refresh_token": "r"})


def test_to_credentials():
    record = CredentialRecord(access_token="a", refresh_token="r", scope="s1")
    creds = record.to_credentials("cid", "csecret", "https://oauth2.googleapis.com/token")
    assert creds.token == "a"
    assert creds.refresh_token == "r"
    assert creds.client_id == "cid"
    assert creds.token_uri == "https://oauth2.googleapis.com/token"
    assert creds.scopes == ["s1"]


def test_to_credentials_falls_back_to_requested_scopes():
    record = CredentialRecord(access_token="a")
    creds = record.to_credentials("cid", "csecret", "uri", scopes=["fallback"])
    assert creds.scopes == ["fallback"]


def test_from_credentials():
    creds = Credentials(
        token="t", refresh_token="r", scopes=["s1", "s2"],
        expiry=datetime(2026, 1, 1),
    )
    record = CredentialRecord.from_credentials(creds)
    assert record.access_token == "t"
    assert record.refresh_token == "r"
    assert record.scope == "s1 s2"
    assert record.expiry == datetime(2026, 1, 1)


@pytest.mark.parametrize("data", [
    {"access_token": "a", "scope": {"x": 1}},
    {"access_token": "a", "scope": ["s1", 2]},
    {"access_token": "a", "refresh_token": 3},
    {"access_token": "a", "token_type": ["Bearer"]},
])
def test_from_dict_rejects_mistyped_fields(data):
    with pytest.raises(ValueError):
        CredentialRecord.from_dict(data)
