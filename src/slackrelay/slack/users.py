"""Process-lifetime cache of Slack user profiles."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from slackrelay.slack.client import SlackUser, SlackWebClient

logger = structlog.get_logger()


class UserDirectory:
    """Resolves Slack user ids to profiles, caching every successful lookup.

    The cache is unbounded and only cleared with the process (or ``clear()``).
    Failed lookups are not cached. Profiles are cached regardless of which
    user's token fetched them.
    """

    def __init__(self, client: SlackWebClient) -> None:
        self._client = client
        self._cache: dict[str, SlackUser] = {}

    async def get(self, token: str, user_id: str) -> SlackUser:
        cached = self._cache.get(user_id)
        if cached is not None:
            return cached

        user = await self._client.user_info(token, user_id)
        self._cache[user_id] = user
        logger.debug("slack_user_cached", user_id=user_id, cached_count=len(self._cache))
        return user

    @property
    def cached_count(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        self._cache.clear()
