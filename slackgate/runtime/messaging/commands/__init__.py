"""Command registry and the built-in commands.

Sub-modules group commands by concern:

- ``basic`` -- help, ping, reply
- ``delay`` -- deferred execution through internal events
"""

from ._dispatcher import (
    CommandContext,
    CommandDispatcher,
    Commands,
    InjectFn,
    ReplyFn,
)

__all__ = [
    "CommandContext",
    "CommandDispatcher",
    "Commands",
    "InjectFn",
    "ReplyFn",
]
