"""Slack request signing verification.

Slack signs every Events API request with HMAC-SHA256 over
``v0:<timestamp>:<raw body>`` using the app's signing secret and sends the
result in ``X-Slack-Signature`` as ``v0=<hexdigest>``.

See https://api.slack.com/authentication/verifying-requests-from-slack
"""

from __future__ import annotations

import hashlib
import hmac
import time

import structlog

from slackrelay.core.exceptions import (
    MissingSignatureError,
    SignatureMismatchError,
    StaleRequestError,
)

logger = structlog.get_logger()

SIGNATURE_VERSION = "v0"
SIGNATURE_HEADER = "X-Slack-Signature"
TIMESTAMP_HEADER = "X-Slack-Request-Timestamp"
DEFAULT_TOLERANCE_SECONDS = 300


def compute_signature(body: bytes, timestamp: int | str, signing_secret: str) -> str:
    """Return the ``v0=<hex>`` signature Slack would send for this body."""
    basestring = f"{SIGNATURE_VERSION}:{timestamp}:".encode() + body
    digest = hmac.new(signing_secret.encode(), basestring, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def verify_slack_request(
    body: bytes,
    signature: str | None,
    timestamp: str | None,
    signing_secret: str,
    *,
    tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
    now: float | None = None,
) -> None:
    """Verify a signed Slack request. Fails closed.

    Raises:
        MissingSignatureError: signature or timestamp absent, or the timestamp
            is not an integer (400).
        StaleRequestError: timestamp further than ``tolerance_seconds`` from
            ``now`` in either direction (403).
        SignatureMismatchError: computed signature differs from the claimed one
            (403).
    """
    if not signature or not timestamp:
        logger.warning("slack_signature_missing")
        raise MissingSignatureError()

    try:
        request_ts = int(timestamp)
    except ValueError as exc:
        logger.warning("slack_signature_bad_timestamp", timestamp=timestamp)
        raise MissingSignatureError("Invalid Slack request timestamp.") from exc

    current = time.time() if now is None else now
    if abs(current - request_ts) > tolerance_seconds:
        logger.warning("slack_request_stale", timestamp=request_ts, now=int(current))
        raise StaleRequestError("Request timed out.")

    # Sign the header value as received, not the parsed integer.
    expected = compute_signature(body, timestamp, signing_secret)
    if not hmac.compare_digest(expected.encode(), signature.encode()):
        logger.warning("slack_signature_mismatch", timestamp=request_ts)
        raise SignatureMismatchError()
