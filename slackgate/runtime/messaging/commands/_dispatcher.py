"""Command registry.

Maps the normalized message text to a handler: exact commands first, then
prefix commands.  :meth:`CommandDispatcher.run` reports whether anything
matched so the pipeline can send its fallback reply.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from ...slack.events import InboundEvent
from ...slack.transport import Transport

from . import basic as _basic_cmds
from . import delay as _delay_cmds

logger = logging.getLogger(__name__)

ReplyFn = Callable[[str], Awaitable[None]]
InjectFn = Callable[[InboundEvent], Awaitable[None]]


class Commands(Protocol):
    """The command capability consumed by the runtime."""

    async def run(self, event: InboundEvent) -> bool: ...

    def count(self) -> int: ...


@dataclass
class CommandContext:
    event: InboundEvent
    args: str
    reply: ReplyFn


class CommandDispatcher:
    _EXACT_COMMANDS: dict[str, str] = {
        "help": "_cmd_help",
        "ping": "_cmd_ping",
    }

    _PREFIX_COMMANDS: tuple[tuple[str, str], ...] = (
        ("reply ", "_cmd_reply"),
        ("delay ", "_cmd_delay"),
    )

    HELP: dict[str, str] = {
        "help": "list the available commands",
        "ping": "check that the bot is alive",
        "reply <text>": "send <text> back",
        "delay <duration> <command>": "run <command> later, e.g. `delay 1m30s ping`",
    }

    def __init__(self, transport: Transport, inject: InjectFn) -> None:
        self._transport = transport
        self._inject = inject
        self._pending: set[asyncio.Task[None]] = set()

    def count(self) -> int:
        return len(self._EXACT_COMMANDS) + len(self._PREFIX_COMMANDS)

    async def run(self, event: InboundEvent) -> bool:
        text = event.text
        lower = text.lower()

        async def reply(message: str) -> None:
            await self._transport.reply(event, message)

        handler_name = self._EXACT_COMMANDS.get(lower)
        if handler_name:
            await getattr(self, handler_name)(CommandContext(event=event, args="", reply=reply))
            return True

        for prefix, handler_name in self._PREFIX_COMMANDS:
            if lower.startswith(prefix):
                args = text[len(prefix):].strip()
                await getattr(self, handler_name)(CommandContext(event=event, args=args, reply=reply))
                return True

        return False

    def schedule(self, delay: float, event: InboundEvent) -> None:
        """Queue *event* as an internal event after *delay* seconds."""
        task = asyncio.create_task(self._inject_later(delay, event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _inject_later(self, delay: float, event: InboundEvent) -> None:
        await asyncio.sleep(delay)
        logger.debug("[commands] injecting delayed command: %s", event.text)
        await self._inject(event)

    # -- Basic commands ------------------------------------------------------

    async def _cmd_help(self, ctx: CommandContext) -> None:
        await _basic_cmds.cmd_help(self, ctx)

    async def _cmd_ping(self, ctx: CommandContext) -> None:
        await _basic_cmds.cmd_ping(self, ctx)

    async def _cmd_reply(self, ctx: CommandContext) -> None:
        await _basic_cmds.cmd_reply(self, ctx)

    # -- Deferred commands ---------------------------------------------------

    async def _cmd_delay(self, ctx: CommandContext) -> None:
        await _delay_cmds.cmd_delay(self, ctx)
