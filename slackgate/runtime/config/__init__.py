"""Runtime configuration."""

from .settings import Settings, SlackConfig

__all__ = ["Settings", "SlackConfig"]
