"""Slack transport -- session, directory fetches, and the inbound event stream."""

from .events import DM_CHANNEL_PREFIX, Identity, InboundEvent, SlackChannel, SlackUser
from .transport import SlackTransport, Transport

__all__ = [
    "DM_CHANNEL_PREFIX",
    "Identity",
    "InboundEvent",
    "SlackChannel",
    "SlackTransport",
    "SlackUser",
    "Transport",
]
