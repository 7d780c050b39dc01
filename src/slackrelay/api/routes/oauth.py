"""Slack OAuth routes — workspace connection and token exchange.

Endpoints:
    GET /api/slack/connect    — Redirect to Slack's authorize page
    GET /api/slack/callback   — Exchange the code and set the session cookie
"""

from __future__ import annotations

from typing import Annotated
from urllib.parse import urlencode

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from slackrelay.core.config import settings
from slackrelay.core.exceptions import ValidationError
from slackrelay.core.middleware import get_slack_client
from slackrelay.slack.client import SlackWebClient

logger = structlog.get_logger()

router = APIRouter(prefix="/api/slack", tags=["slack-oauth"])

SlackClientDep = Annotated[SlackWebClient, Depends(get_slack_client)]


def build_authorize_url() -> str:
    """Slack authorize URL requesting the same scopes for the bot and the user."""
    query = urlencode(
        {
            "client_id": settings.slack_client_id,
            "scope": settings.slack_oauth_scopes,
            "user_scope": settings.slack_oauth_scopes,
            "redirect_uri": settings.oauth_redirect_uri,
        }
    )
    return f"{settings.slack_authorize_url}?{query}"


@router.get("/connect")
async def connect() -> RedirectResponse:
    """Start the OAuth flow."""
    return RedirectResponse(build_authorize_url())


@router.get("/callback")
async def oauth_callback(
    request: Request,
    slack: SlackClientDep,
    code: str | None = None,
) -> RedirectResponse:
    """Exchange the authorisation code and store the user token in a cookie."""
    if not code:
        raise ValidationError("Error: No code provided.")

    token = await slack.exchange_code(code, settings.oauth_redirect_uri)
    logger.info("slack_oauth_completed")

    response = RedirectResponse(
        str(request.url.replace(path=settings.post_auth_redirect_path, query="")),
        status_code=307,
    )
    response.set_cookie(
        settings.auth_cookie_name,
        token,
        max_age=settings.auth_cookie_max_age_seconds,
        path="/",
        httponly=True,
        secure=not settings.debug,
    )
    return response
