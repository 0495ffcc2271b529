"""Sandbox-facing binding of the hub to a single chip.

Scripts running inside a chip never see host entities directly; they hold
handles produced by a ``Marshaler``.  ``ChipBinding`` is the surface such
a script calls: every operation acts on behalf of the bound chip, handles
are unwrapped on the way in, and actor-like payloads and the sender are
wrapped again before a script callback sees them.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from datasignals.core.errors import InvalidGroupName, InvalidSignal, InvalidTarget
from datasignals.models.signals import Actor, is_actor, is_actor_value, value_kind

if TYPE_CHECKING:
    from datasignals.core.hub import SignalHub
    from datasignals.core.listener_registry import Callback


# ---------------------------------------------------------------------------
# Marshaling
# ---------------------------------------------------------------------------


@runtime_checkable
class Marshaler(Protocol):
    """Converts between host actors and sandbox handles."""

    def is_handle(self, obj: Any) -> bool: ...

    def wrap(self, actor: Actor) -> Any: ...

    def unwrap(self, handle: Any) -> Actor: ...


class ActorHandle(BaseModel):
    """Opaque sandbox-side reference to a host actor.

    Two handles for the same actor compare equal.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    actor: Any

    @property
    def valid(self) -> bool:
        return bool(self.actor.is_valid())


class HandleMarshaler:
    """Default marshaler producing ``ActorHandle`` instances."""

    def is_handle(self, obj: Any) -> bool:
        return isinstance(obj, ActorHandle)

    def wrap(self, actor: Actor) -> ActorHandle:
        return ActorHandle(actor=actor)

    def unwrap(self, handle: ActorHandle) -> Actor:
        return handle.actor


# ---------------------------------------------------------------------------
# Binding
# ---------------------------------------------------------------------------


class ChipBinding:
    """The data signal library as one chip's script sees it.

    Parameters
    ----------
    hub:
        The session's ``SignalHub``.
    actor:
        The chip this binding acts for; it is the sender of every ``send``.
    marshaler:
        Handle conversion; defaults to ``HandleMarshaler``.
    """

    def __init__(
        self,
        hub: SignalHub,
        actor: Actor,
        marshaler: Marshaler | None = None,
    ) -> None:
        self._hub = hub
        self._actor = actor
        self._marshaler = marshaler or HandleMarshaler()
        # script callback -> registered wrapper, so ignore() finds the same one
        self._wrappers: dict[Callback, Callback] = {}

    @property
    def actor(self) -> Actor:
        return self._actor

    # -- Groups -------------------------------------------------------------

    def join(self, group_name: str) -> None:
        """Join *group_name* (``name``, ``name:private`` or ``name:public``)."""
        self._hub.join(self._require_group(group_name), self._actor)

    def leave(self, group_name: str) -> None:
        """Leave *group_name*; the scope suffix must match the one joined."""
        self._hub.leave(self._require_group(group_name), self._actor)

    # -- Listeners ----------------------------------------------------------

    def listen(self, signal: str, callback: Callback) -> None:
        """Call *callback(signal, data, sender_handle)* when *signal* arrives."""
        self._require_signal(signal)
        if not callable(callback):
            raise TypeError("Data signal callback must be a function")

        try:
            wrapper = self._wrappers.get(callback)
        except TypeError as exc:
            raise TypeError("Data signal callback must be hashable") from exc
        if wrapper is None:
            wrapper = self._wrappers[callback] = self._wrap_callback(callback)
        self._hub.listen(signal, self._actor, wrapper)

    def ignore(self, signal: str, callback: Callback) -> None:
        self._require_signal(signal)
        if not callable(callback):
            raise TypeError("Data signal callback must be a function")

        try:
            wrapper = self._wrappers.get(callback)
        except TypeError:
            return
        if wrapper is None:
            return
        self._hub.ignore(signal, self._actor, wrapper)

    # -- Send ---------------------------------------------------------------

    def send(self, target: Any, signal: str, data: Any = None) -> int:
        """Send from the bound chip; returns the failed-listener count.

        *target* is a handle, a group name, or a list/tuple nesting
        either.  A handle *data* is unwrapped to its actor.
        """
        if self._marshaler.is_handle(target):
            target = self._marshaler.unwrap(target)
        elif isinstance(target, (list, tuple)):
            target = self._unwrap_all(target, {})
        elif not isinstance(target, str):
            raise InvalidTarget(f"Invalid data signal target: {type(target).__name__}")

        self._require_signal(signal)

        if self._marshaler.is_handle(data):
            data = self._marshaler.unwrap(data)

        return self._hub.send(target, signal, data, self._actor)

    # -- Internals ----------------------------------------------------------

    def _wrap_callback(self, callback: Callback) -> Callback:
        marshaler = self._marshaler

        @functools.wraps(callback)
        def deliver(signal: str, data: Any, sender: Actor) -> Any:
            if not isinstance(signal, str):
                raise TypeError("Received data signal name was not a string")
            if not is_actor(sender):
                raise TypeError("Received sender was not an entity")
            if is_actor_value(value_kind(data)):
                data = marshaler.wrap(data)
            return callback(signal, data, marshaler.wrap(sender))

        return deliver

    def _unwrap_all(self, items: list | tuple, memo: dict[int, list]) -> list:
        converted = memo.get(id(items))
        if converted is not None:
            return converted
        converted = memo[id(items)] = []
        for item in items:
            if self._marshaler.is_handle(item):
                item = self._marshaler.unwrap(item)
            elif isinstance(item, (list, tuple)):
                item = self._unwrap_all(item, memo)
            converted.append(item)
        return converted

    @staticmethod
    def _require_group(group_name: Any) -> str:
        if not isinstance(group_name, str):
            raise InvalidGroupName("Data signal group name must be a string")
        return group_name

    @staticmethod
    def _require_signal(signal: Any) -> None:
        if not isinstance(signal, str):
            raise InvalidSignal("Data signal name must be a string")
