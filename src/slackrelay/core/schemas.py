"""Pydantic v2 request/response schemas shared by the API routes."""

from __future__ import annotations

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response body."""

    code: str
    message: str
    detail: dict[str, object] | None = None


class HealthResponse(BaseModel):
    status: str
    version: str
    topics: int
    subscribers: int


class PostMessageRequest(BaseModel):
    """Body of ``POST /api/slack/message``.

    Both fields, and the body itself, are optional at the schema level so
    that a missing value is reported as a 400 by the route.
    """

    channel: str | None = None
    text: str | None = None
