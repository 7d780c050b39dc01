"""Slack Web API proxy routes used by the chat UI.

All routes require the ``slack-user-token`` session cookie.
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query

from slackrelay.core.config import settings
from slackrelay.core.exceptions import ValidationError
from slackrelay.core.middleware import get_slack_client, get_user_directory, get_user_token
from slackrelay.core.schemas import ErrorResponse, PostMessageRequest
from slackrelay.slack.client import ChannelSummary, SlackMessage, SlackUser, SlackWebClient
from slackrelay.slack.users import UserDirectory

logger = structlog.get_logger()

router = APIRouter(
    prefix="/api/slack",
    tags=["slack"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)

TokenDep = Annotated[str, Depends(get_user_token)]
SlackClientDep = Annotated[SlackWebClient, Depends(get_slack_client)]
UserDirectoryDep = Annotated[UserDirectory, Depends(get_user_directory)]


@router.get("/channels", response_model=list[ChannelSummary])
async def list_channels(token: TokenDep, slack: SlackClientDep) -> list[ChannelSummary]:
    """Public and private channels the user belongs to."""
    return await slack.list_conversations(token, limit=settings.channel_list_limit)


@router.get("/history", response_model=list[SlackMessage])
async def channel_history(
    token: TokenDep,
    slack: SlackClientDep,
    channel: str | None = None,
) -> list[SlackMessage]:
    """Recent messages in a channel, oldest first."""
    if not channel:
        raise ValidationError("Bad Request: Channel ID is required.")
    return await slack.conversation_history(token, channel, limit=settings.history_limit)


@router.post("/message", response_model=SlackMessage)
async def post_message(
    token: TokenDep,
    slack: SlackClientDep,
    body: PostMessageRequest | None = None,
) -> SlackMessage:
    """Post a message as the user and return it for optimistic rendering."""
    if body is None or not body.channel or not body.text:
        raise ValidationError("Bad Request: Channel and text are required.")

    message = await slack.post_message(token, body.channel, body.text)
    logger.info("slack_message_posted", channel=body.channel, ts=message.ts)
    return message


@router.get("/user", response_model=SlackUser)
async def user_profile(
    token: TokenDep,
    users: UserDirectoryDep,
    user_id: Annotated[str | None, Query(alias="userId")] = None,
) -> SlackUser:
    """Display name and avatar for a Slack user id."""
    if not user_id:
        raise ValidationError("User ID is required")
    return await users.get(token, user_id)
