"""Tests for environment-driven settings and the error hierarchy."""

from __future__ import annotations

import pytest

from slackrelay.core.config import Settings
from slackrelay.core.exceptions import (
    AuthError,
    MissingSignatureError,
    SignatureMismatchError,
    SlackRelayError,
    StaleRequestError,
    UnauthorisedError,
    UpstreamError,
    ValidationError,
)


def test_defaults() -> None:
    s = Settings(_env_file=None)
    assert s.slack_signature_tolerance_seconds == 300
    assert s.auth_cookie_name == "slack-user-token"
    assert s.auth_cookie_max_age_seconds == 30 * 24 * 60 * 60


def test_env_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SLACKRELAY_SLACK_SIGNING_SECRET", "from-env")
    monkeypatch.setenv("SLACKRELAY_APP_URL", "https://chat.example.com/")

    s = Settings(_env_file=None)

    assert s.slack_signing_secret == "from-env"
    assert s.oauth_redirect_uri == "https://chat.example.com/api/slack/callback"


@pytest.mark.parametrize(
    ("exc_type", "status"),
    [
        (MissingSignatureError, 400),
        (StaleRequestError, 403),
        (SignatureMismatchError, 403),
        (UnauthorisedError, 401),
        (ValidationError, 400),
        (UpstreamError, 500),
    ],
)
def test_status_codes(exc_type: type[SlackRelayError], status: int) -> None:
    assert exc_type.status_code == status
    assert issubclass(exc_type, SlackRelayError)


def test_auth_errors_share_a_base() -> None:
    for exc_type in (MissingSignatureError, StaleRequestError, SignatureMismatchError, UnauthorisedError):
        assert issubclass(exc_type, AuthError)


def test_message_override_and_detail() -> None:
    exc = UpstreamError("not_in_channel", detail={"slack_error": "not_in_channel"})
    assert str(exc) == "not_in_channel"
    assert exc.detail == {"slack_error": "not_in_channel"}
    assert UpstreamError().message == "Slack API request failed."
