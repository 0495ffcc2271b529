"""ListenerRegistry — per-actor callbacks keyed by signal name.

A callback registered under ``$default`` receives every signal sent to
its actor.  Registrations are sets: listening twice with the same
callback for the same (actor, signal) pair delivers once.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from datasignals.core.errors import InvalidActor, InvalidSignal
from datasignals.models.signals import (
    DEFAULT_SIGNAL,
    Actor,
    is_listenable_signal,
    is_valid_actor,
)

logger = logging.getLogger(__name__)

Callback = Callable[[str, Any, Actor], Any]


def _check_signal(signal: Any) -> None:
    if not is_listenable_signal(signal):
        raise InvalidSignal(f"Invalid data signal name '{signal}'")


def _is_hashable(obj: Any) -> bool:
    try:
        hash(obj)
    except TypeError:
        return False
    return True


class ListenerRegistry:
    """Owns every (actor, signal) -> callbacks table.

    Callback sets are insertion-ordered dicts so delivery order follows
    registration order.  Actor tables are never dropped wholesale; an
    actor that becomes invalid keeps its listeners until they are ignored.
    """

    def __init__(self) -> None:
        self._listeners: dict[Actor, dict[str, dict[Callback, None]]] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def listen(self, signal: str, actor: Actor, callback: Callback) -> None:
        """Register *callback* for *signal* (or ``$default``) on *actor*.

        Raises
        ------
        InvalidSignal
            If *signal* is neither a valid signal name nor ``$default``.
        InvalidActor
            If *actor* is absent or no longer valid.
        TypeError
            If *callback* is not callable or not hashable.
        """
        _check_signal(signal)
        if not is_valid_actor(actor):
            raise InvalidActor("Chip registered with data signal must be a valid entity")
        if not callable(callback):
            raise TypeError("Data signal callback must be a function")
        if not _is_hashable(callback):
            raise TypeError("Data signal callback must be hashable")

        with self._lock:
            chip_table = self._listeners.setdefault(actor, {})
            chip_table.setdefault(signal, {})[callback] = None
        logger.debug("Listener %r registered for %s on %r", callback, signal, actor)

    def ignore(self, signal: str, actor: Actor, callback: Callback) -> None:
        """Unregister *callback*.  Unknown actors, signals or callbacks are ignored.

        Raises
        ------
        InvalidSignal
            If *signal* is malformed, matching ``listen``.
        """
        _check_signal(signal)
        # unhashable callbacks or actors can never have been registered
        if not (_is_hashable(callback) and _is_hashable(actor)):
            return

        with self._lock:
            chip_table = self._listeners.get(actor)
            if not chip_table:
                return
            callbacks = chip_table.get(signal)
            if not callbacks or callback not in callbacks:
                return
            del callbacks[callback]
            if not callbacks:
                del chip_table[signal]
        logger.debug("Listener %r removed for %s on %r", callback, signal, actor)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def callbacks_for(self, actor: Actor, signal: str) -> list[Callback]:
        """Snapshot of the callbacks one delivery of *signal* to *actor* runs.

        Wildcard callbacks come first, then signal-specific ones.  A
        callback registered under both names appears once.
        """
        with self._lock:
            chip_table = self._listeners.get(actor)
            if not chip_table:
                return []
            selected = dict(chip_table.get(DEFAULT_SIGNAL, {}))
            selected.update(chip_table.get(signal, {}))
        return list(selected)

    def has_listeners(self, actor: Actor) -> bool:
        with self._lock:
            return any(self._listeners.get(actor, {}).values())

    def signals_of(self, actor: Actor) -> list[str]:
        """Return the signal names *actor* currently listens to."""
        with self._lock:
            return sorted(s for s, cbs in self._listeners.get(actor, {}).items() if cbs)

    def get_stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "actors": len(self._listeners),
                "subscriptions": sum(len(t) for t in self._listeners.values()),
                "callbacks": sum(
                    len(cbs) for t in self._listeners.values() for cbs in t.values()
                ),
            }
