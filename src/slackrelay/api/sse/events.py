"""Event models relayed to SSE clients.

A ``RelayEvent`` is taken verbatim from a Slack ``message`` event and is
never stored. It is serialised to the JSON ``data:`` line of an SSE frame.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class RelayEvent(BaseModel):
    """A chat message forwarded from Slack to browser clients."""

    model_config = ConfigDict(frozen=True)

    ts: str | None = None
    user: str | None = None
    text: str | None = None

    @classmethod
    def from_slack_event(cls, event: dict[str, Any]) -> RelayEvent:
        return cls(ts=event.get("ts"), user=event.get("user"), text=event.get("text"))

    def to_json(self) -> str:
        """Wire JSON. Keys Slack did not send are omitted."""
        return self.model_dump_json(exclude_none=True)
