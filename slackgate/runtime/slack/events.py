"""Platform value types shared by the transport and the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Direct message channel IDs always start with "D".
DM_CHANNEL_PREFIX = "D"

BOT_MESSAGE_SUBTYPE = "bot_message"


@dataclass(frozen=True)
class Identity:
    """The bot's own authenticated user."""

    user_id: str
    user_name: str

    @property
    def mention(self) -> str:
        return f"<@{self.user_id}>"


@dataclass(frozen=True)
class SlackUser:
    id: str
    name: str
    title: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> SlackUser:
        profile = payload.get("profile") or {}
        return cls(
            id=payload.get("id", ""),
            name=payload.get("name", ""),
            title=profile.get("title", "") or "",
        )


@dataclass(frozen=True)
class SlackChannel:
    id: str
    name: str


@dataclass(frozen=True)
class InboundEvent:
    """A normalized ``message`` event.

    ``internal`` marks events injected by the bot itself (e.g. by the
    ``delay`` command); they are handled in the context of the original
    message, so replies land in the same channel and thread.
    """

    user: str
    channel: str
    text: str
    ts: str = ""
    thread_ts: str = ""
    bot_id: str = ""
    subtype: str = ""
    internal: bool = False

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> InboundEvent:
        return cls(
            user=payload.get("user") or "",
            channel=payload.get("channel") or "",
            text=payload.get("text") or "",
            ts=payload.get("ts") or "",
            thread_ts=payload.get("thread_ts") or "",
            bot_id=payload.get("bot_id") or "",
            subtype=payload.get("subtype") or "",
        )

    @property
    def is_direct_message(self) -> bool:
        return self.channel.startswith(DM_CHANNEL_PREFIX)
