"""Event dispatcher -- the long-running select loop.

Scheduling policy:

* External events (received from Slack) pass the message gate and are
  each handled in their own task.  They have no ordering guarantee
  relative to each other.
* Internal events (follow-ups injected by commands, e.g. ``delay``) are
  handled inline, in arrival order, before any external event that became
  ready in the same iteration.  They skip the allow-list check.
* Setting the stop event disconnects the transport and ends the loop.
  In-flight external tasks are not awaited.
"""

from __future__ import annotations

import asyncio
import dataclasses
import enum
import logging
from typing import TYPE_CHECKING

from ..slack.events import InboundEvent
from .gate import should_handle

if TYPE_CHECKING:
    from ..lifecycle import ConnectionManager
    from .processor import MessageProcessor

logger = logging.getLogger(__name__)


class DispatcherState(enum.Enum):
    idle = "idle"
    running = "running"
    stopped = "stopped"


class EventDispatcher:

    def __init__(
        self,
        manager: ConnectionManager,
        processor: MessageProcessor,
        internal: asyncio.Queue[InboundEvent],
    ) -> None:
        self._manager = manager
        self._processor = processor
        self._internal = internal
        self._tasks: set[asyncio.Task[None]] = set()
        self.state = DispatcherState.idle

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def run(self, stop: asyncio.Event) -> None:
        """Dispatch events until *stop* is set.  Not restartable."""
        if self.state is not DispatcherState.idle:
            raise RuntimeError(f"dispatcher cannot run from state {self.state.value}")
        if not self._manager.initialized:
            raise RuntimeError("connection must be initialized before dispatching")

        identity = self._manager.identity
        external_queue = self._manager.transport.events
        self.state = DispatcherState.running
        logger.info("[dispatcher] running")

        external = asyncio.ensure_future(external_queue.get())
        internal = asyncio.ensure_future(self._internal.get())
        stopped = asyncio.ensure_future(stop.wait())
        try:
            while True:
                done, _ = await asyncio.wait(
                    {external, internal, stopped},
                    return_when=asyncio.FIRST_COMPLETED,
                )
                if stopped in done:
                    break

                if internal in done:
                    event = dataclasses.replace(internal.result(), internal=True)
                    internal = asyncio.ensure_future(self._internal.get())
                    await self._processor.process(event)

                if external in done:
                    event = external.result()
                    external = asyncio.ensure_future(external_queue.get())
                    if should_handle(event, identity):
                        self._spawn(event)
        finally:
            for waiter in (external, internal, stopped):
                if not waiter.done():
                    waiter.cancel()

        await self._manager.shutdown()
        self.state = DispatcherState.stopped
        logger.warning("[dispatcher] Shutdown!")

    def _spawn(self, event: InboundEvent) -> None:
        task = asyncio.create_task(self._processor.process(event))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("[dispatcher] message task failed: %s", task.exception())
