"""Tests for the message handling pipeline."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from slackgate.runtime.errors import TransportError
from slackgate.runtime.messaging.processor import (
    NOT_WHITELISTED_REPLY,
    MessageProcessor,
    fallback_message,
)
from slackgate.runtime.slack.events import InboundEvent
from slackgate.runtime.slack.transport import SlackTransport


@pytest.fixture()
def commands() -> MagicMock:
    commands = MagicMock()
    commands.run = AsyncMock(return_value=True)
    commands.count.return_value = 1
    return commands


@pytest.fixture()
def processor(transport, commands, identity, snapshot) -> MessageProcessor:
    return MessageProcessor(transport, commands, identity, snapshot)


class TestNormalization:
    async def test_command_sees_normalized_text(self, processor, commands) -> None:
        await processor.process(InboundEvent(user="U1", channel="C1", text="<@UBOT> hello ’world’"))
        event = commands.run.await_args.args[0]
        assert event.text == "hello 'world'"

    async def test_empty_message_dropped_silently(self, processor, transport, commands) -> None:
        await processor.process(InboundEvent(user="U1", channel="C1", text="  <@UBOT> "))
        transport.send_typing.assert_not_awaited()
        transport.reply.assert_not_awaited()
        commands.run.assert_not_awaited()


class TestAuthorization:
    async def test_direct_message_from_approved_user(self, processor, transport, commands) -> None:
        await processor.process(InboundEvent(user="U1", channel="D12345", text="ping", ts="1.0"))
        transport.send_typing.assert_awaited_once_with("D12345", "1.0")
        assert commands.run.await_args.args[0].text == "ping"
        transport.reply.assert_not_awaited()

    async def test_unapproved_user_gets_one_reply(self, processor, transport, commands) -> None:
        await processor.process(InboundEvent(user="U9", channel="D1", text="ping"))
        assert transport.replies() == [NOT_WHITELISTED_REPLY]
        commands.run.assert_not_awaited()

    async def test_unapproved_user_logged_as_error(self, processor, caplog) -> None:
        await processor.process(InboundEvent(user="U9", channel="D1", text="ping"))
        errors = [r for r in caplog.records if r.levelname == "ERROR"]
        assert len(errors) == 1
        assert "U9 is not allowed" in errors[0].getMessage()

    async def test_internal_event_skips_whitelist(self, processor, transport, commands) -> None:
        await processor.process(InboundEvent(user="U9", channel="D1", text="ping", internal=True))
        commands.run.assert_awaited_once()
        assert NOT_WHITELISTED_REPLY not in transport.replies()

    async def test_bypass_whitelist(self, transport, commands, identity, snapshot) -> None:
        processor = MessageProcessor(
            transport, commands, identity, snapshot, bypass_whitelist=True,
        )
        await processor.process(InboundEvent(user="U9", channel="D1", text="ping"))
        commands.run.assert_awaited_once()


class TestCommandExecution:
    async def test_unknown_command_gets_fallback(self, processor, transport, commands) -> None:
        commands.run.return_value = False
        await processor.process(InboundEvent(user="U1", channel="D1", text="frobnicate"))
        assert transport.replies() == [fallback_message("frobnicate")]

    async def test_unknown_command_not_logged_as_error(self, processor, commands, caplog) -> None:
        commands.run.return_value = False
        with caplog.at_level("INFO"):
            await processor.process(InboundEvent(user="U1", channel="D1", text="frobnicate"))
        assert not [r for r in caplog.records if r.levelname == "ERROR"]
        assert "unknown command: frobnicate" in caplog.text

    async def test_typing_failure_is_not_fatal(self, processor, transport, commands) -> None:
        transport.send_typing.side_effect = TransportError("already_reacted")
        await processor.process(InboundEvent(user="U1", channel="D1", text="ping"))
        commands.run.assert_awaited_once()

    async def test_command_exception_is_contained(self, processor, commands, caplog) -> None:
        commands.run.side_effect = RuntimeError("kaboom")
        await processor.process(InboundEvent(user="U1", channel="D1", text="ping"))
        assert "kaboom" in caplog.text

    async def test_outcome_logged_with_elapsed_time(self, processor, caplog) -> None:
        with caplog.at_level("INFO"):
            await processor.process(InboundEvent(user="U1", channel="D1", text="ping"))
        assert "handled message: ping in" in caplog.text
        assert "user=U1 channel=D1" in caplog.text

    async def test_outcome_logged_for_rejected_user(self, processor, caplog) -> None:
        with caplog.at_level("INFO"):
            await processor.process(InboundEvent(user="U9", channel="D1", text="ping"))
        assert "handled message: ping in" in caplog.text


class TestFallbackMessage:
    def test_mentions_command_and_help(self) -> None:
        msg = fallback_message("foo")
        assert "`foo`" in msg
        assert "help" in msg


class TestWithSlackTransport:
    async def test_typing_timeout_does_not_stop_command(
        self, slack_config, commands, identity, snapshot,
    ) -> None:
        web = MagicMock()
        web.reactions_add = AsyncMock(side_effect=TimeoutError())
        web.chat_postMessage = AsyncMock(return_value={"ok": True})
        processor = MessageProcessor(
            SlackTransport(slack_config, web_client=web), commands, identity, snapshot,
        )

        await processor.process(InboundEvent(user="U1", channel="D1", text="ping", ts="1.0"))

        web.reactions_add.assert_awaited_once()
        commands.run.assert_awaited_once()
