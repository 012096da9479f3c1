"""Access policy -- who may run commands.

Two independent admission rules are combined with OR:

* :func:`matches_allow_list` -- the user's name or ID is configured
  explicitly or belongs to one of the configured user groups.
* :func:`matches_team_title` -- deprecated: the user's profile title
  contains the configured team marker.
"""

from __future__ import annotations

from collections.abc import Collection
from typing import TYPE_CHECKING

from ..errors import UnauthorizedError
from ..slack.events import InboundEvent, SlackUser

if TYPE_CHECKING:
    from .directory import DirectorySnapshot


def matches_team_title(user: SlackUser, team: str) -> bool:
    return bool(team) and team in user.title


def matches_allow_list(user: SlackUser, allowed: Collection[str]) -> bool:
    return user.name in allowed or user.id in allowed


def is_approved(user: SlackUser, team: str, allowed: Collection[str]) -> bool:
    return matches_team_title(user, team) or matches_allow_list(user, allowed)


def check_authorized(
    event: InboundEvent,
    snapshot: DirectorySnapshot,
    *,
    bypass: bool = False,
) -> None:
    """Raise :class:`UnauthorizedError` unless *event* may run commands.

    Internal events always pass. *bypass* (test endpoint mode) disables
    the check altogether.
    """
    if event.internal or bypass:
        return
    if event.user not in snapshot.users:
        raise UnauthorizedError(event.user)
