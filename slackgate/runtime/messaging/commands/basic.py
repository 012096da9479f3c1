"""Basic commands: help, ping, reply."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._dispatcher import CommandContext, CommandDispatcher


async def cmd_help(dispatcher: CommandDispatcher, ctx: CommandContext) -> None:
    lines = ["*Available commands:*"]
    lines.extend(f"- `{usage}`: {desc}" for usage, desc in dispatcher.HELP.items())
    await ctx.reply("\n".join(lines))


async def cmd_ping(dispatcher: CommandDispatcher, ctx: CommandContext) -> None:
    await ctx.reply("pong")


async def cmd_reply(dispatcher: CommandDispatcher, ctx: CommandContext) -> None:
    if not ctx.args:
        await ctx.reply("Usage: `reply <text>`")
        return
    await ctx.reply(ctx.args)
