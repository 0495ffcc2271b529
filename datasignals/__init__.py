"""Datasignals: in-process publish/subscribe signaling between chips.

A data signal is a short name plus a single value, sent from one chip to
another chip, to a named group of chips, or to any nesting of those.
Groups are private to their owner by default (``"team"``) or shared
(``"team:public"``).  Listeners registered under ``$default`` receive
every signal sent to their chip.  A failing listener never blocks
delivery to the others; ``send`` returns how many failed.
"""

__version__ = "0.1.0"

from datasignals.binding import ActorHandle, ChipBinding, HandleMarshaler
from datasignals.core.dispatcher import Dispatcher
from datasignals.core.errors import (
    DataSignalError,
    InvalidActor,
    InvalidDataType,
    InvalidGroupName,
    InvalidScope,
    InvalidSender,
    InvalidSignal,
    InvalidTarget,
)
from datasignals.core.group_registry import GroupRegistry
from datasignals.core.hub import SignalHub
from datasignals.core.listener_registry import ListenerRegistry

__all__ = [
    "SignalHub",
    "GroupRegistry",
    "ListenerRegistry",
    "Dispatcher",
    "ChipBinding",
    "ActorHandle",
    "HandleMarshaler",
    "DataSignalError",
    "InvalidGroupName",
    "InvalidScope",
    "InvalidActor",
    "InvalidSignal",
    "InvalidDataType",
    "InvalidSender",
    "InvalidTarget",
    "__version__",
]
