"""Custom HTTP exceptions for the SlackRelay API.

Each exception maps to a specific HTTP status code and error code.
The global exception handler in api/main.py converts these to ErrorResponse.
"""


class SlackRelayError(Exception):
    """Base exception for all SlackRelay errors."""

    status_code: int = 500
    code: str = "internal_error"
    message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None, detail: dict[str, object] | None = None):
        self.message = message or self.__class__.message
        self.detail = detail
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


class AuthError(SlackRelayError):
    """Base for request authentication failures. Never retried."""

    status_code = 403
    code = "auth_error"
    message = "Request could not be authenticated."


class MissingSignatureError(AuthError):
    status_code = 400
    code = "missing_signature"
    message = "Missing Slack signature headers."


class StaleRequestError(AuthError):
    code = "stale_request"
    message = "Request timestamp is outside the allowed window."


class SignatureMismatchError(AuthError):
    code = "signature_mismatch"
    message = "Signature verification failed."


class UnauthorisedError(AuthError):
    status_code = 401
    code = "unauthorised"
    message = "Unauthorized: No token found."


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------


class ValidationError(SlackRelayError):
    status_code = 400
    code = "bad_request"
    message = "Request could not be processed."


# ---------------------------------------------------------------------------
# Slack Web API
# ---------------------------------------------------------------------------


class UpstreamError(SlackRelayError):
    """Slack returned a non-ok response."""

    status_code = 500
    code = "upstream_error"
    message = "Slack API request failed."


class UpstreamConnectionError(UpstreamError):
    code = "upstream_connection_error"
    message = "Could not connect to the Slack API."


class UpstreamTimeoutError(UpstreamError):
    code = "upstream_timeout_error"
    message = "Slack API request timed out."


class SlackUserNotFoundError(UpstreamError):
    status_code = 404
    code = "user_not_found"
    message = "User not found."
