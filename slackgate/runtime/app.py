"""Wiring -- builds the runtime object graph and runs it until stopped."""

from __future__ import annotations

import asyncio
import logging

from .config.settings import SlackConfig
from .errors import ConfigurationError
from .lifecycle import ConnectionManager
from .messaging.commands import CommandDispatcher
from .messaging.dispatcher import EventDispatcher
from .messaging.processor import MessageProcessor
from .slack.events import InboundEvent
from .slack.transport import SlackTransport, Transport

logger = logging.getLogger(__name__)


def create_transport(config: SlackConfig) -> SlackTransport:
    if not config.app_token:
        raise ConfigurationError("No slack app token provided (required for Socket Mode)!")
    return SlackTransport(config)


async def run_bot(
    config: SlackConfig,
    stop: asyncio.Event,
    *,
    transport: Transport | None = None,
) -> None:
    """Initialize the Slack session and dispatch events until *stop* is set.

    Startup errors propagate to the caller after the transport has been
    closed.
    """
    if transport is None:
        transport = create_transport(config)

    internal: asyncio.Queue[InboundEvent] = asyncio.Queue()
    commands = CommandDispatcher(transport, inject=internal.put)
    manager = ConnectionManager(config, transport, commands)

    try:
        await manager.initialize()
    except BaseException:
        await manager.shutdown()
        raise

    if config.bypass_whitelist:
        logger.warning(
            "[app] test endpoint %s configured -- whitelist check disabled",
            config.test_endpoint_url,
        )

    processor = MessageProcessor(
        transport,
        commands,
        manager.identity,
        manager.snapshot,
        bypass_whitelist=config.bypass_whitelist,
    )
    dispatcher = EventDispatcher(manager, processor, internal)
    await dispatcher.run(stop)
