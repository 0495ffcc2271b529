"""Validation errors raised by the routing core.

Every error here is raised synchronously to the caller of ``join``,
``leave``, ``listen``, ``ignore`` or ``send`` before any registry is
mutated and before any listener runs.  Listener failures during delivery
are *not* errors in this sense; they are counted by the dispatcher.
"""

from __future__ import annotations


class DataSignalError(ValueError):
    """Base class for every rejected data signal request."""


class InvalidGroupName(DataSignalError):
    """The group name string does not match ``<name>[:<scope>]``."""


class InvalidScope(DataSignalError):
    """The group name carries a scope suffix other than public/private."""


class InvalidActor(DataSignalError):
    """The chip passed to join/leave/listen is absent or not valid."""


class InvalidSignal(DataSignalError):
    """The signal name does not match the signal grammar."""


class InvalidDataType(DataSignalError):
    """The payload is not one of the nine transportable value kinds."""


class InvalidSender(DataSignalError):
    """The sender passed to send is absent or not valid."""


class InvalidTarget(DataSignalError):
    """The send target is not an actor, a group name or a collection."""
