"""Shared pytest fixtures for slackgate.runtime tests."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from slackgate.runtime.access.directory import DirectorySnapshot
from slackgate.runtime.config.settings import SlackConfig
from slackgate.runtime.slack.events import Identity, InboundEvent, SlackChannel, SlackUser

BOT_ID = "UBOT"


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    env_path = tmp_path / ".env"
    monkeypatch.setenv("DOTENV_PATH", str(env_path))
    for key in (
        "SLACK_TOKEN",
        "SLACK_APP_TOKEN",
        "SLACK_ALLOWED_USERS",
        "SLACK_ALLOWED_GROUPS",
        "SLACK_TEAM",
        "SLACK_AUTO_JOIN_CHANNELS",
        "SLACK_TEST_ENDPOINT_URL",
        "SLACK_TYPING_REACTION",
        "LOG_LEVEL",
        "OTEL_ENABLED",
    ):
        monkeypatch.delenv(key, raising=False)
    return env_path


@pytest.fixture(autouse=True)
def _reset_singletons(_isolate_env: Path):
    from slackgate.runtime.util.singletons import reset_all_singletons

    reset_all_singletons()
    yield
    reset_all_singletons()


class FakeTransport:
    """In-memory :class:`Transport` with AsyncMock methods."""

    def __init__(
        self,
        *,
        channels: list[SlackChannel] | None = None,
        users: list[SlackUser] | None = None,
        groups: dict[str, list[str]] | None = None,
    ) -> None:
        self.events: asyncio.Queue[InboundEvent] = asyncio.Queue()
        self.authenticate = AsyncMock(return_value=Identity(user_id=BOT_ID, user_name="bot"))
        self.connect = AsyncMock()
        self.disconnect = AsyncMock()
        self.fetch_public_channels = AsyncMock(return_value=list(channels or []))
        self.fetch_users = AsyncMock(return_value=list(users or []))
        groups = groups or {}
        self.fetch_group_members = AsyncMock(side_effect=lambda name: list(groups[name]))
        self.join_channel = AsyncMock()
        self.send_typing = AsyncMock()
        self.reply = AsyncMock()

    def replies(self) -> list[str]:
        return [c.args[1] for c in self.reply.call_args_list]


@pytest.fixture()
def identity() -> Identity:
    return Identity(user_id=BOT_ID, user_name="bot")


@pytest.fixture()
def slack_config() -> SlackConfig:
    return SlackConfig(token="xoxb-test", app_token="xapp-test")


@pytest.fixture()
def snapshot() -> DirectorySnapshot:
    return DirectorySnapshot(
        channels={"C1": "general", "C2": "random"},
        users={"U1": "alice", "U2": "bob"},
    )


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport(
        channels=[SlackChannel("C1", "general"), SlackChannel("C2", "random")],
        users=[
            SlackUser("U1", "alice"),
            SlackUser("U2", "bob"),
            SlackUser("U3", "mallory"),
        ],
    )


@pytest.fixture()
def make_transport():
    return FakeTransport
