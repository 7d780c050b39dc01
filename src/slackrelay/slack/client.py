"""Async client for the Slack Web API."""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from slackrelay.core.exceptions import (
    SlackUserNotFoundError,
    UpstreamConnectionError,
    UpstreamError,
    UpstreamTimeoutError,
)

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class ChannelSummary(BaseModel):
    """A conversation the user can see."""

    id: str
    name: str


class SlackMessage(BaseModel):
    ts: str
    user: str
    text: str


class SlackUser(BaseModel):
    """Display profile of a Slack user."""

    id: str
    name: str
    avatar: str


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

_DEFAULT_TIMEOUT = 30.0


class SlackWebClient:
    """Async client for the handful of Slack Web API methods the app proxies.

    Every method except :meth:`exchange_code` takes the user's OAuth token
    and sends it as a bearer token. Slack reports failures in the body
    (``{"ok": false, "error": "..."}``) and those are raised as
    :class:`UpstreamError` with Slack's error string as the message.
    """

    def __init__(
        self,
        base_url: str,
        *,
        client_id: str = "",
        client_secret: str = "",
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client_id = client_id
        self._client_secret = client_secret
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout),
            headers={"Accept": "application/json"},
        )
        self._log = logger.bind(slack_base_url=self._base_url)

    # ------------------------------------------------------------------
    # OAuth
    # ------------------------------------------------------------------

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        """Exchange an OAuth ``code`` for the authorising user's access token."""
        data = await self._request(
            "POST",
            "/oauth.v2.access",
            data={
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "code": code,
                "redirect_uri": redirect_uri,
            },
        )
        token = (data.get("authed_user") or {}).get("access_token")
        if not token:
            raise UpstreamError("Error: User access token not found in Slack response.")
        return str(token)

    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------

    async def list_conversations(
        self,
        token: str,
        *,
        types: str = "public_channel,private_channel",
        limit: int = 200,
    ) -> list[ChannelSummary]:
        """List public and private channels visible to the user."""
        data = await self._request(
            "GET",
            "/conversations.list",
            token=token,
            params={"types": types, "limit": limit},
        )
        channels = data.get("channels")
        if channels is None:
            raise UpstreamError("Failed to fetch channels from Slack.")
        try:
            return [ChannelSummary(id=c["id"], name=c["name"]) for c in channels]
        except (KeyError, TypeError, PydanticValidationError) as exc:
            raise UpstreamError("Slack returned a malformed channel list.") from exc

    async def conversation_history(
        self,
        token: str,
        channel: str,
        *,
        limit: int = 50,
    ) -> list[SlackMessage]:
        """Return recent user messages in ``channel``, oldest first.

        Messages without a user or text (joins, bot posts, attachments) are
        skipped.
        """
        data = await self._request(
            "GET",
            "/conversations.history",
            token=token,
            params={"channel": channel, "limit": limit},
        )
        messages = data.get("messages")
        if messages is None:
            raise UpstreamError("Failed to fetch history.")
        # Slack returns newest first.
        try:
            return [
                SlackMessage(ts=m["ts"], user=m["user"], text=m["text"])
                for m in reversed(messages)
                if m.get("user") and m.get("text")
            ]
        except (KeyError, AttributeError, PydanticValidationError) as exc:
            raise UpstreamError("Slack returned a malformed message history.") from exc

    async def post_message(self, token: str, channel: str, text: str) -> SlackMessage:
        """Post ``text`` to ``channel`` as the user and return the stored message."""
        data = await self._request(
            "POST",
            "/chat.postMessage",
            token=token,
            json={"channel": channel, "text": text},
        )
        message = data.get("message")
        if not message:
            raise UpstreamError("Failed to post message.")
        try:
            return SlackMessage.model_validate(message)
        except PydanticValidationError as exc:
            self._log.warning("slack_message_echo_invalid", channel=channel, errors=exc.error_count())
            raise UpstreamError("Failed to post message.") from exc

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def user_info(self, token: str, user_id: str) -> SlackUser:
        """Look up a user's display name and avatar."""
        try:
            data = await self._request("GET", "/users.info", token=token, params={"user": user_id})
        except UpstreamError as exc:
            if isinstance(exc, (UpstreamConnectionError, UpstreamTimeoutError)):
                raise
            raise SlackUserNotFoundError(exc.message, detail=exc.detail) from exc

        user = data.get("user")
        if not user:
            raise SlackUserNotFoundError(f"User {user_id} not found")
        return SlackUser(
            id=user["id"],
            name=user.get("real_name", ""),
            avatar=(user.get("profile") or {}).get("image_72", ""),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Call a Web API method and return the decoded body of an ``ok`` response."""
        self._log.debug("slack_api_request", method=method, path=path)
        headers = {"Authorization": f"Bearer {token}"} if token else None
        try:
            resp = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.ConnectError as exc:
            raise UpstreamConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise UpstreamTimeoutError(str(exc)) from exc
        return self._handle_response(resp)

    def _handle_response(self, resp: httpx.Response) -> dict[str, Any]:
        """Raise UpstreamError for HTTP failures and ``ok: false`` bodies."""
        if not resp.is_success:
            raise UpstreamError(
                f"Slack API error {resp.status_code}: {resp.text}",
                detail={"status_code": resp.status_code, "body": resp.text},
            )
        try:
            data: dict[str, Any] = resp.json()
        except ValueError as exc:
            raise UpstreamError("Slack API returned a non-JSON response.") from exc
        if not data.get("ok"):
            error = str(data.get("error") or "unknown_error")
            self._log.warning("slack_api_error", path=resp.request.url.path, error=error)
            raise UpstreamError(error, detail={"slack_error": error})
        return data
