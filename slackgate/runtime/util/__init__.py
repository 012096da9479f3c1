"""Shared utilities."""

from .durations import format_duration, parse_duration
from .env_file import EnvFile
from .singletons import register_singleton, reset_all_singletons

__all__ = [
    "EnvFile",
    "format_duration",
    "parse_duration",
    "register_singleton",
    "reset_all_singletons",
]
