"""Tests for Slack request signature verification."""

from __future__ import annotations

import hashlib
import hmac

import pytest

from slackrelay.core.exceptions import (
    MissingSignatureError,
    SignatureMismatchError,
    StaleRequestError,
)
from slackrelay.slack.signature import compute_signature, verify_slack_request

SECRET = "S"
NOW = 1_700_000_000
BODY = b'{"type":"url_verification","challenge":"abc"}'


def test_compute_signature_matches_slack_scheme() -> None:
    expected = hmac.new(
        b"S", b"v0:1700000000:" + BODY, hashlib.sha256
    ).hexdigest()
    assert compute_signature(BODY, NOW, SECRET) == f"v0={expected}"


def test_valid_signature_passes() -> None:
    signature = compute_signature(BODY, NOW, SECRET)
    verify_slack_request(BODY, signature, str(NOW), SECRET, now=NOW)


@pytest.mark.parametrize("offset", [-300, 0, 300])
def test_timestamp_inside_window_passes(offset: int) -> None:
    signature = compute_signature(BODY, NOW, SECRET)
    verify_slack_request(BODY, signature, str(NOW), SECRET, now=NOW + offset)


@pytest.mark.parametrize(
    ("signature", "timestamp"),
    [(None, str(NOW)), ("v0=abc", None), ("", str(NOW)), ("v0=abc", "")],
)
def test_missing_headers_rejected(signature: str | None, timestamp: str | None) -> None:
    with pytest.raises(MissingSignatureError) as exc_info:
        verify_slack_request(BODY, signature, timestamp, SECRET, now=NOW)
    assert exc_info.value.status_code == 400


def test_non_numeric_timestamp_rejected() -> None:
    with pytest.raises(MissingSignatureError):
        verify_slack_request(BODY, "v0=abc", "yesterday", SECRET, now=NOW)


def test_stale_timestamp_rejected() -> None:
    signature = compute_signature(BODY, NOW, SECRET)
    with pytest.raises(StaleRequestError) as exc_info:
        verify_slack_request(BODY, signature, str(NOW), SECRET, now=NOW + 301)
    assert exc_info.value.status_code == 403


def test_future_timestamp_rejected() -> None:
    signature = compute_signature(BODY, NOW, SECRET)
    with pytest.raises(StaleRequestError):
        verify_slack_request(BODY, signature, str(NOW), SECRET, now=NOW - 301)


def test_wrong_secret_rejected() -> None:
    signature = compute_signature(BODY, NOW, "other-secret")
    with pytest.raises(SignatureMismatchError) as exc_info:
        verify_slack_request(BODY, signature, str(NOW), SECRET, now=NOW)
    assert exc_info.value.status_code == 403


def test_tampered_body_rejected() -> None:
    signature = compute_signature(BODY, NOW, SECRET)
    with pytest.raises(SignatureMismatchError):
        verify_slack_request(BODY + b" ", signature, str(NOW), SECRET, now=NOW)


def test_signature_bound_to_timestamp() -> None:
    """A signature replayed with a fresh timestamp no longer matches."""
    signature = compute_signature(BODY, NOW, SECRET)
    with pytest.raises(SignatureMismatchError):
        verify_slack_request(BODY, signature, str(NOW + 10), SECRET, now=NOW)


def test_custom_tolerance() -> None:
    signature = compute_signature(BODY, NOW, SECRET)
    with pytest.raises(StaleRequestError):
        verify_slack_request(BODY, signature, str(NOW), SECRET, tolerance_seconds=10, now=NOW + 11)
