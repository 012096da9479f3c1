"""Connection lifecycle -- authenticate, connect, sync the directory, auto-join."""

from __future__ import annotations

import asyncio
import logging

from .access.directory import DirectorySnapshot, sync_directory
from .config.settings import SlackConfig
from .errors import AuthenticationError, ChannelJoinError, ConfigurationError, TransportError
from .messaging.commands import Commands
from .slack.events import Identity
from .slack.transport import Transport

logger = logging.getLogger(__name__)

SHUTDOWN_TIMEOUT = 10.0


class ConnectionManager:
    """Owns the Slack session and the startup-time state derived from it.

    :attr:`identity` and :attr:`snapshot` are published once by
    :meth:`initialize` and only read afterwards.
    """

    def __init__(self, config: SlackConfig, transport: Transport, commands: Commands) -> None:
        self._config = config
        self.transport = transport
        self._commands = commands
        self._identity: Identity | None = None
        self._snapshot: DirectorySnapshot | None = None
        self._closed = False

    @property
    def identity(self) -> Identity:
        if self._identity is None:
            raise RuntimeError("connection not initialized")
        return self._identity

    @property
    def snapshot(self) -> DirectorySnapshot:
        if self._snapshot is None:
            raise RuntimeError("connection not initialized")
        return self._snapshot

    @property
    def initialized(self) -> bool:
        return self._identity is not None and self._snapshot is not None

    async def initialize(self) -> None:
        if self._identity is not None:
            raise RuntimeError("connection already initialized")
        if not self._config.token:
            raise ConfigurationError("No slack token provided in config!")

        logger.info("[lifecycle] connecting to slack ...")
        try:
            identity = await self.transport.authenticate()
        except TransportError as exc:
            raise AuthenticationError(f"auth error: {exc}") from exc

        # Socket Mode only reconnects on its own once a session exists, so a
        # failed first connect is a startup error.
        await self.transport.connect()

        snapshot = await sync_directory(self.transport, self._config)

        if self._config.auto_join_channels:
            for channel in self._config.auto_join_channels:
                channel_id = snapshot.channel_id(channel)
                try:
                    await self.transport.join_channel(channel_id)
                except TransportError as exc:
                    raise ChannelJoinError(channel, str(exc)) from exc
            logger.info(
                "[lifecycle] auto joined channels: %s",
                ", ".join(self._config.auto_join_channels),
            )

        self._identity = identity
        self._snapshot = snapshot

        logger.info(
            "[lifecycle] loaded %d allowed users and %d channels",
            len(snapshot.users), len(snapshot.channels),
        )
        logger.info("[lifecycle] bot user: %s with ID: %s", identity.user_name, identity.user_id)
        logger.info("[lifecycle] initialized %d commands", self._commands.count())

    async def shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await asyncio.wait_for(self.transport.disconnect(), timeout=SHUTDOWN_TIMEOUT)
        except TimeoutError:
            logger.warning("[lifecycle] transport did not close within %.0fs", SHUTDOWN_TIMEOUT)
        except Exception:
            logger.warning("[lifecycle] error while closing transport", exc_info=True)

