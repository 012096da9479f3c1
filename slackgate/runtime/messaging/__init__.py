"""Message pipeline -- gate, processor, dispatcher, and commands."""

from .dispatcher import DispatcherState, EventDispatcher
from .gate import should_handle, trim_message
from .processor import MessageProcessor

__all__ = [
    "DispatcherState",
    "EventDispatcher",
    "MessageProcessor",
    "should_handle",
    "trim_message",
]
