"""Directory sync -- channel names and approved users, fetched once at startup."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ..config.settings import SlackConfig
from ..errors import DirectoryFetchError, TransportError
from ..slack.transport import Transport
from .policy import is_approved

logger = logging.getLogger(__name__)


def _frozen(data: Mapping[str, str] | None = None) -> Mapping[str, str]:
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True)
class DirectorySnapshot:
    """Read-only view of the workspace directory.

    ``channels`` maps channel ID to name, ``users`` maps approved user ID
    to name.  Both mappings are read-only.
    """

    channels: Mapping[str, str] = field(default_factory=_frozen)
    users: Mapping[str, str] = field(default_factory=_frozen)

    def __post_init__(self) -> None:
        object.__setattr__(self, "channels", _frozen(self.channels))
        object.__setattr__(self, "users", _frozen(self.users))

    def channel_id(self, name_or_id: str) -> str:
        """Resolve ``#general``, ``general`` or ``C123`` to a channel ID.

        Unknown names are returned unchanged so the backend reports the
        error.
        """
        if name_or_id in self.channels:
            return name_or_id
        name = name_or_id.lstrip("#")
        for channel_id, channel_name in self.channels.items():
            if channel_name == name:
                return channel_id
        return name_or_id


async def sync_directory(transport: Transport, config: SlackConfig) -> DirectorySnapshot:
    """Fetch channels, groups, and users and build the snapshot.

    Any failed fetch aborts the whole sync; no partial snapshot is built.
    """
    try:
        channels = await transport.fetch_public_channels()
    except TransportError as exc:
        raise DirectoryFetchError(f"error while fetching public channels: {exc}") from exc

    allowed = list(config.allowed_users)
    for group_name in config.allowed_groups:
        try:
            members = await transport.fetch_group_members(group_name)
        except TransportError as exc:
            raise DirectoryFetchError(f"error fetching users of group {group_name!r}: {exc}") from exc
        logger.debug("[directory] group %s resolved to %d members", group_name, len(members))
        allowed.extend(members)

    try:
        all_users = await transport.fetch_users()
    except TransportError as exc:
        raise DirectoryFetchError(f"error fetching users: {exc}") from exc

    allowed_set = frozenset(allowed)
    approved = {
        user.id: user.name
        for user in all_users
        if is_approved(user, config.team, allowed_set)
    }

    return DirectorySnapshot(
        channels={channel.id: channel.name for channel in channels},
        users=approved,
    )
