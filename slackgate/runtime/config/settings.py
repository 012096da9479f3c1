"""Application settings -- reads from environment and ``.env`` file."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from ..util.env_file import EnvFile
from ..util.singletons import register_singleton

DEFAULT_TYPING_REACTION = "eyes"


@dataclass
class SlackConfig:
    token: str = ""
    app_token: str = ""
    allowed_users: list[str] = field(default_factory=list)
    allowed_groups: list[str] = field(default_factory=list)
    # deprecated: whitelist users whose profile title contains this marker
    team: str = ""
    auto_join_channels: list[str] = field(default_factory=list)
    test_endpoint_url: str = ""
    typing_reaction: str = DEFAULT_TYPING_REACTION

    @property
    def bypass_whitelist(self) -> bool:
        """A configured test endpoint disables the allow-list entirely."""
        return bool(self.test_endpoint_url)


def _split_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings:

    def __init__(self) -> None:
        self.reload()

    def reload(self) -> None:
        self.env = EnvFile(os.getenv("DOTENV_PATH") or ".env")
        e = self._read

        self.slack = SlackConfig(
            token=e("SLACK_TOKEN"),
            app_token=e("SLACK_APP_TOKEN"),
            allowed_users=_split_list(e("SLACK_ALLOWED_USERS")),
            allowed_groups=_split_list(e("SLACK_ALLOWED_GROUPS")),
            team=e("SLACK_TEAM"),
            auto_join_channels=_split_list(e("SLACK_AUTO_JOIN_CHANNELS")),
            test_endpoint_url=e("SLACK_TEST_ENDPOINT_URL"),
            typing_reaction=e("SLACK_TYPING_REACTION") or DEFAULT_TYPING_REACTION,
        )

        self.log_level: str = (e("LOG_LEVEL") or "INFO").upper()
        self.otel_enabled: bool = e("OTEL_ENABLED").lower() in ("1", "true", "yes")

    def _read(self, key: str) -> str:
        # process environment wins over the .env file
        return os.getenv(key) or self.env.read(key)


cfg = Settings()


def _reset_cfg() -> None:
    global cfg
    cfg = Settings()


register_singleton(_reset_cfg)
