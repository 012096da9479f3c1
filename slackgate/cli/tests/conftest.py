"""Shared pytest fixtures for slackgate.cli tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    env_path = tmp_path / ".env"
    monkeypatch.setenv("DOTENV_PATH", str(env_path))
    for key in ("SLACK_TOKEN", "SLACK_APP_TOKEN", "LOG_LEVEL", "OTEL_ENABLED"):
        monkeypatch.delenv(key, raising=False)
    return env_path


@pytest.fixture(autouse=True)
def _reset_singletons(_isolate_env: Path):
    from slackgate.runtime.util.singletons import reset_all_singletons

    reset_all_singletons()
    yield
    reset_all_singletons()
