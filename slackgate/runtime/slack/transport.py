"""Slack session backed by ``slack_sdk`` (Web API + Socket Mode over aiohttp).

The transport is the only module that talks to Slack.  Everything above it
sees :class:`Transport`, so tests can substitute an in-memory fake.  Every
Slack or HTTP failure leaves this module as a :class:`TransportError`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol, runtime_checkable

import aiohttp
from slack_sdk.errors import SlackApiError, SlackClientError
from slack_sdk.socket_mode.aiohttp import SocketModeClient
from slack_sdk.socket_mode.request import SocketModeRequest
from slack_sdk.socket_mode.response import SocketModeResponse
from slack_sdk.web.async_client import AsyncWebClient

from ..config.settings import SlackConfig
from ..errors import TransportError
from .events import Identity, InboundEvent, SlackChannel, SlackUser

logger = logging.getLogger(__name__)

PAGE_LIMIT = 200

# slack_sdk re-raises the raw aiohttp or timeout error once its retries are spent.
_CLIENT_ERRORS = (SlackClientError, aiohttp.ClientError, TimeoutError)


@runtime_checkable
class Transport(Protocol):
    """Everything the runtime needs from the chat backend."""

    events: asyncio.Queue[InboundEvent]

    async def authenticate(self) -> Identity: ...
    async def connect(self) -> None: ...
    async def disconnect(self) -> None: ...
    async def fetch_public_channels(self) -> list[SlackChannel]: ...
    async def fetch_users(self) -> list[SlackUser]: ...
    async def fetch_group_members(self, name: str) -> list[str]: ...
    async def join_channel(self, channel_id: str) -> None: ...
    async def send_typing(self, channel: str, ts: str = "") -> None: ...
    async def reply(self, event: InboundEvent, text: str) -> None: ...


class SlackTransport:
    """:class:`Transport` implementation for a Slack app in Socket Mode."""

    def __init__(
        self,
        config: SlackConfig,
        *,
        web_client: AsyncWebClient | None = None,
    ) -> None:
        self._config = config
        if web_client is None:
            kwargs: dict[str, Any] = {"token": config.token}
            if config.test_endpoint_url:
                kwargs["base_url"] = config.test_endpoint_url.rstrip("/") + "/"
            web_client = AsyncWebClient(**kwargs)
        self._web = web_client
        self._socket: SocketModeClient | None = None
        self.events: asyncio.Queue[InboundEvent] = asyncio.Queue()

    # -- Session -----------------------------------------------------------

    async def authenticate(self) -> Identity:
        resp = await self._api("auth_test")
        return Identity(user_id=resp.get("user_id", ""), user_name=resp.get("user", ""))

    async def connect(self) -> None:
        if not self._config.app_token:
            raise TransportError("no Slack app token configured for Socket Mode")
        self._socket = SocketModeClient(app_token=self._config.app_token, web_client=self._web)
        self._socket.socket_mode_request_listeners.append(self._on_request)
        logger.info("[slack] starting Socket Mode connection ...")
        try:
            await self._socket.connect()
        except _CLIENT_ERRORS as exc:
            raise TransportError(f"socket mode connect failed: {_describe(exc)}") from exc

    async def disconnect(self) -> None:
        socket, self._socket = self._socket, None
        if socket is None:
            return
        await socket.close()
        logger.info("[slack] Socket Mode connection closed")

    async def _on_request(self, client: SocketModeClient, req: SocketModeRequest) -> None:
        await client.send_socket_mode_response(SocketModeResponse(envelope_id=req.envelope_id))
        if req.type != "events_api":
            return
        event = (req.payload or {}).get("event") or {}
        if event.get("type") != "message":
            return
        self.events.put_nowait(InboundEvent.from_payload(event))

    # -- Directory ---------------------------------------------------------

    async def fetch_public_channels(self) -> list[SlackChannel]:
        pages = self._paginate(
            "conversations_list", "channels",
            types="public_channel", exclude_archived=True,
        )
        return [SlackChannel(id=c["id"], name=c.get("name", "")) async for c in pages]

    async def fetch_users(self) -> list[SlackUser]:
        return [SlackUser.from_payload(u) async for u in self._paginate("users_list", "members")]

    async def fetch_group_members(self, name: str) -> list[str]:
        resp = await self._api("usergroups_list")
        for group in resp.get("usergroups", []):
            if name in (group.get("handle"), group.get("name")):
                members = await self._api("usergroups_users_list", usergroup=group["id"])
                return list(members.get("users", []))
        raise TransportError(f"user group {name!r} not found")

    async def join_channel(self, channel_id: str) -> None:
        await self._api("conversations_join", channel=channel_id)

    # -- Messages ----------------------------------------------------------

    async def send_typing(self, channel: str, ts: str = "") -> None:
        # Socket Mode has no typing event; react to the message instead.
        if not ts or not self._config.typing_reaction:
            return
        await self._api(
            "reactions_add", channel=channel, timestamp=ts, name=self._config.typing_reaction,
        )

    async def reply(self, event: InboundEvent, text: str) -> None:
        kwargs: dict[str, Any] = {"channel": event.channel, "text": text}
        if event.thread_ts:
            kwargs["thread_ts"] = event.thread_ts
        await self._api("chat_postMessage", **kwargs)

    # -- Helpers -----------------------------------------------------------

    async def _api(self, method: str, **kwargs: Any) -> Any:
        try:
            return await getattr(self._web, method)(**kwargs)
        except SlackApiError as exc:
            error = exc.response.get("error", "") if exc.response is not None else ""
            raise TransportError(f"{method} failed: {error or exc}") from exc
        except _CLIENT_ERRORS as exc:
            raise TransportError(f"{method} failed: {_describe(exc)}") from exc

    async def _paginate(self, method: str, key: str, **kwargs: Any):
        cursor = ""
        while True:
            resp = await self._api(method, limit=PAGE_LIMIT, cursor=cursor or None, **kwargs)
            for item in resp.get(key, []):
                yield item
            cursor = (resp.get("response_metadata") or {}).get("next_cursor", "")
            if not cursor:
                return


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__
