"""Message gate -- which events are addressed to the bot at all.

Both functions are pure: the decision depends only on the event and the
bot identity.  Authorization happens later, in the processor.
"""

from __future__ import annotations

from ..slack.events import BOT_MESSAGE_SUBTYPE, Identity, InboundEvent

_QUOTE_MAP = str.maketrans({"‘": "'", "’": "'"})


def is_bot_traffic(event: InboundEvent, identity: Identity) -> bool:
    return bool(
        event.bot_id
        or not event.user
        or event.user == identity.user_id
        or event.subtype == BOT_MESSAGE_SUBTYPE
    )


def should_handle(event: InboundEvent, identity: Identity) -> bool:
    if is_bot_traffic(event, identity):
        return False

    # <@BOT> was mentioned in a public channel
    if identity.mention in event.text:
        return True

    return event.is_direct_message


def trim_message(text: str, identity: Identity) -> str:
    """Remove the ``<@BOT>`` prefix, straighten quotes, and strip whitespace."""
    text = text.replace(identity.mention, "", 1)
    return text.translate(_QUOTE_MAP).strip()
