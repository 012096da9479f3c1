"""``delay <duration> <command>`` -- run a command later as an internal event.

The delayed command is executed in the context of the original message, so
its replies land in the same channel and thread.  It is not authorized
again when it fires.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

from ...util.durations import format_duration, parse_duration

if TYPE_CHECKING:
    from ._dispatcher import CommandContext, CommandDispatcher

MAX_DELAY = 24 * 3600.0

USAGE = "Usage: `delay <duration> <command>`, e.g. `delay 1m30s ping`"


async def cmd_delay(dispatcher: CommandDispatcher, ctx: CommandContext) -> None:
    raw, _, command = ctx.args.partition(" ")
    command = command.strip()
    if not raw or not command:
        await ctx.reply(USAGE)
        return

    try:
        seconds = parse_duration(raw)
    except ValueError:
        await ctx.reply(f"Invalid duration `{raw}`. {USAGE}")
        return

    if seconds > MAX_DELAY:
        await ctx.reply(f"The maximum delay is {format_duration(MAX_DELAY)}.")
        return

    dispatcher.schedule(seconds, dataclasses.replace(ctx.event, text=command))
    await ctx.reply(f"I queued the command `{command}` for {format_duration(seconds)}")
