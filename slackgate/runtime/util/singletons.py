"""Registry of module-level singletons that tests need to rebuild."""

from __future__ import annotations

from collections.abc import Callable

_resetters: list[Callable[[], None]] = []


def register_singleton(reset: Callable[[], None]) -> None:
    """Register a callable that recreates a module-level singleton."""
    if reset not in _resetters:
        _resetters.append(reset)


def reset_all_singletons() -> None:
    for reset in _resetters:
        reset()
