"""SignalHub — one session's routing tables behind the five public operations.

The hub owns a ``GroupRegistry``, a ``ListenerRegistry`` and a
``Dispatcher`` wired to both.  Registries live for the session and are
never torn down; create a new hub for a fresh namespace.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from datasignals.config import SignalsConfig
from datasignals.core.dispatcher import Dispatcher
from datasignals.core.group_registry import GroupRegistry
from datasignals.core.listener_registry import Callback, ListenerRegistry
from datasignals.models.delivery import DeliveryReport
from datasignals.models.signals import Actor

if TYPE_CHECKING:
    from datasignals.binding import ChipBinding, Marshaler


class SignalHub:
    """Entry point for hosts: join, leave, listen, ignore, send.

    Usage
    -----
    >>> hub = SignalHub()
    >>> hub.join("team:public", chip)
    >>> hub.listen("PING", chip, on_ping)
    >>> hub.send("team:public", "PING", 1, sender)
    0
    """

    def __init__(self, config: SignalsConfig | None = None) -> None:
        self.config = config or SignalsConfig()
        self.groups = GroupRegistry()
        self.listeners = ListenerRegistry()
        self.dispatcher = Dispatcher(self.groups, self.listeners, self.config)

    def join(self, group_name: str, actor: Actor) -> None:
        self.groups.join(group_name, actor)

    def leave(self, group_name: str, actor: Actor) -> None:
        self.groups.leave(group_name, actor)

    def listen(self, signal: str, actor: Actor, callback: Callback) -> None:
        self.listeners.listen(signal, actor, callback)

    def ignore(self, signal: str, actor: Actor, callback: Callback) -> None:
        self.listeners.ignore(signal, actor, callback)

    def send(self, target: Any, signal: str, data: Any, sender: Actor) -> int:
        """Send and return the number of failed listener invocations."""
        return self.dispatcher.send(target, signal, data, sender)

    def send_report(
        self, target: Any, signal: str, data: Any, sender: Actor
    ) -> DeliveryReport:
        return self.dispatcher.send_report(target, signal, data, sender)

    def bind(self, actor: Actor, marshaler: Marshaler | None = None) -> ChipBinding:
        """Return the sandbox-facing surface acting on behalf of *actor*."""
        from datasignals.binding import ChipBinding

        return ChipBinding(self, actor, marshaler)

    def get_stats(self) -> dict[str, Any]:
        return {
            "groups": self.groups.get_stats(),
            "listeners": self.listeners.get_stats(),
        }
