"""FastAPI dependency functions for the Slack session and shared services.

These dependencies are injected into route handlers via ``Depends()``.
"""

from __future__ import annotations

from fastapi import Request

from slackrelay.core.config import settings
from slackrelay.core.exceptions import UnauthorisedError
from slackrelay.slack.client import SlackWebClient
from slackrelay.slack.users import UserDirectory


async def get_user_token(request: Request) -> str:
    """Read the user's Slack token from the session cookie. Raises 401 if absent."""
    token = request.cookies.get(settings.auth_cookie_name)
    if not token:
        raise UnauthorisedError()
    return token


def get_slack_client(request: Request) -> SlackWebClient:
    client: SlackWebClient = request.app.state.slack_client
    return client


def get_user_directory(request: Request) -> UserDirectory:
    directory: UserDirectory = request.app.state.user_directory
    return directory
