"""Message handling pipeline -- one run per accepted event."""

from __future__ import annotations

import dataclasses
import logging
import time
from typing import Any

from ..access.directory import DirectorySnapshot
from ..access.policy import check_authorized
from ..errors import TransportError, UnauthorizedError
from ..services.otel import bot_span, set_span_attribute
from ..slack.events import Identity, InboundEvent
from ..slack.transport import Transport
from ..util.durations import format_duration
from .commands import Commands
from .gate import trim_message

logger = logging.getLogger(__name__)

NOT_WHITELISTED_REPLY = (
    "Sorry, you are not whitelisted yet. Please ask the slack-bot admin to get access."
)


class _EventLogger(logging.LoggerAdapter):
    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        extra = self.extra or {}
        return f"[bot] user={extra.get('user')} channel={extra.get('channel')} {msg}", kwargs


def event_logger(event: InboundEvent) -> logging.LoggerAdapter:
    return _EventLogger(logger, {"user": event.user, "channel": event.channel})


def fallback_message(text: str) -> str:
    return f"Oops! Command `{text}` not found...try `help`."


class MessageProcessor:
    """Normalizes, authorizes, and executes a single message.

    The processor is shared by all in-flight pipeline tasks; it only reads
    the identity and snapshot it was built with.
    """

    def __init__(
        self,
        transport: Transport,
        commands: Commands,
        identity: Identity,
        snapshot: DirectorySnapshot,
        *,
        bypass_whitelist: bool = False,
    ) -> None:
        self._transport = transport
        self._commands = commands
        self._identity = identity
        self._snapshot = snapshot
        self._bypass_whitelist = bypass_whitelist

    async def process(self, event: InboundEvent) -> None:
        text = trim_message(event.text, self._identity)
        if not text:
            return
        event = dataclasses.replace(event, text=text)

        start = time.monotonic()
        log = event_logger(event)

        with bot_span(
            "bot.message",
            attributes={"bot.channel": event.channel, "bot.internal": event.internal},
        ) as span:
            try:
                await self._handle(event, log)
            except Exception as exc:
                set_span_attribute(span, "error.type", type(exc).__name__)
                log.error("failed to handle message %r: %s", text, exc, exc_info=True)

            elapsed = time.monotonic() - start
            set_span_attribute(span, "bot.elapsed_ms", int(elapsed * 1000))
        log.info("handled message: %s in %s", text, format_duration(elapsed))

    async def _handle(self, event: InboundEvent, log: logging.LoggerAdapter) -> None:
        try:
            await self._transport.send_typing(event.channel, event.ts)
        except TransportError as exc:
            log.debug("typing indicator failed: %s", exc)

        try:
            check_authorized(event, self._snapshot, bypass=self._bypass_whitelist)
        except UnauthorizedError:
            log.error("user %s is not allowed to execute message: %s", event.user, event.text)
            await self._transport.reply(event, NOT_WHITELISTED_REPLY)
            return

        if not await self._commands.run(event):
            log.info("unknown command: %s", event.text)
            await self._transport.reply(event, fallback_message(event.text))
