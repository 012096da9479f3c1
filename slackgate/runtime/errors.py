"""Exception hierarchy for the bot runtime.

Startup errors (configuration, authentication, directory sync, channel
joins) are fatal and propagate to the process boundary.  Per-message
errors (:class:`UnauthorizedError`) are handled inside the message
pipeline and never reach the dispatch loop.
"""

from __future__ import annotations


class SlackGateError(Exception):
    """Base class for all runtime errors."""


class ConfigurationError(SlackGateError):
    """A required setting is missing or invalid."""


class TransportError(SlackGateError):
    """A call to the Slack backend failed."""


class AuthenticationError(SlackGateError):
    """The backend rejected the session credential."""


class DirectorySyncError(SlackGateError):
    """Building the directory snapshot failed."""


class DirectoryFetchError(DirectorySyncError):
    """Fetching channels, users, or group members failed."""


class ChannelJoinError(SlackGateError):
    """Auto-joining a configured channel failed."""

    def __init__(self, channel: str, reason: str = "") -> None:
        self.channel = channel
        msg = f"failed to join channel {channel!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class UnauthorizedError(SlackGateError):
    """The sender of a message is not on the allow-list."""

    def __init__(self, user: str) -> None:
        self.user = user
        super().__init__(f"user {user!r} is not allowed to execute commands")
