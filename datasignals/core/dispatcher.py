"""Dispatcher — resolves send targets and delivers signals to listeners.

A target is an actor, a group name, or a list/tuple nesting any of
these.  The whole target tree is resolved into a de-duplicated recipient
list before the first listener runs, so a malformed target is rejected
without partial delivery and a listener that changes group membership
cannot disturb the send in flight.

Listener failures are contained: each invocation is independent, a
raising listener is logged and counted, and delivery continues to every
remaining listener and recipient.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from typing import TYPE_CHECKING, Any

from datasignals.config import SignalsConfig
from datasignals.core.errors import InvalidSender, InvalidSignal, InvalidTarget
from datasignals.models.delivery import DeliveryFailure, DeliveryReport
from datasignals.models.groups import GroupName
from datasignals.models.signals import (
    Actor,
    TargetKind,
    is_valid_actor,
    is_valid_signal,
    target_kind,
    value_kind,
)

if TYPE_CHECKING:
    from datasignals.core.group_registry import GroupRegistry
    from datasignals.core.listener_registry import Callback, ListenerRegistry

logger = logging.getLogger(__name__)

DEFAULT_MAX_TARGET_DEPTH = SignalsConfig.model_fields["max_target_depth"].default


class Dispatcher:
    """Stateless fan-out over a group registry and a listener registry.

    Usage
    -----
    >>> dispatcher = Dispatcher(groups, listeners)
    >>> dispatcher.send([chip_a, "team:public", [chip_c]], "PING", 1, sender)
    0
    """

    def __init__(
        self,
        groups: GroupRegistry,
        listeners: ListenerRegistry,
        config: SignalsConfig | None = None,
    ) -> None:
        self._groups = groups
        self._listeners = listeners
        self._max_depth = config.max_target_depth if config else DEFAULT_MAX_TARGET_DEPTH
        self._log_failures = config.log_delivery_failures if config else True

    # ------------------------------------------------------------------
    # Send
    # ------------------------------------------------------------------

    def send(self, target: Any, signal: str, data: Any, sender: Actor) -> int:
        """Deliver *signal* with *data* to every actor *target* resolves to.

        Returns the number of listener invocations that raised; zero
        means every listener succeeded.

        Raises
        ------
        InvalidSignal, InvalidDataType, InvalidSender, InvalidTarget,
        InvalidGroupName, InvalidScope
            Before any listener runs.
        """
        return self.send_report(target, signal, data, sender).error_count

    def send_report(
        self, target: Any, signal: str, data: Any, sender: Actor
    ) -> DeliveryReport:
        """Like ``send`` but returns the full ``DeliveryReport``."""
        if not is_valid_signal(signal):
            raise InvalidSignal(f"Invalid data signal name '{signal}'")
        value_kind(data)
        if not is_valid_actor(sender):
            raise InvalidSender("Sender of data signal must be a valid entity")

        recipients = self.resolve(target, sender)

        invocations = 0
        failures: list[DeliveryFailure] = []
        for recipient in recipients:
            for callback in self._listeners.callbacks_for(recipient, signal):
                invocations += 1
                failure = self._invoke(callback, recipient, signal, data, sender)
                if failure is not None:
                    failures.append(failure)

        if failures:
            logger.warning(
                "Signal %s: %d/%d listener invocations failed across %d recipients",
                signal,
                len(failures),
                invocations,
                len(recipients),
            )

        return DeliveryReport(
            signal=signal,
            recipients=len(recipients),
            invocations=invocations,
            failures=failures,
        )

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, target: Any, sender: Actor) -> list[Actor]:
        """Flatten *target* into recipients, in first-seen order.

        Private group names resolve inside *sender*'s owner namespace
        only; there is no way to address another owner's private group.
        """
        found: dict[Actor, None] = {}
        self._resolve_into(found, target, sender.owner(), depth=0, visited=set())
        return list(found)

    def _resolve_into(
        self,
        found: dict[Actor, None],
        target: Any,
        owner: Hashable,
        *,
        depth: int,
        visited: set[int],
    ) -> None:
        kind = target_kind(target)

        if kind is TargetKind.ACTOR:
            found.setdefault(target, None)

        elif kind is TargetKind.GROUP:
            group = GroupName.parse(target)
            for member in self._groups.members(group, owner):
                found.setdefault(member, None)

        else:
            if depth >= self._max_depth:
                raise InvalidTarget(
                    f"Data signal target nested deeper than {self._max_depth} levels"
                )
            # a collection reachable twice (or through itself) is walked once
            if id(target) in visited:
                return
            visited.add(id(target))
            for element in target:
                self._resolve_into(found, element, owner, depth=depth + 1, visited=visited)

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------

    def _invoke(
        self,
        callback: Callback,
        recipient: Actor,
        signal: str,
        data: Any,
        sender: Actor,
    ) -> DeliveryFailure | None:
        try:
            callback(signal, data, sender)
        except Exception as exc:  # noqa: BLE001
            if self._log_failures:
                logger.error(
                    "Listener %r on %r failed for signal %s: %s",
                    callback,
                    recipient,
                    signal,
                    exc,
                )
            return DeliveryFailure(
                signal=signal,
                recipient=repr(recipient),
                callback=repr(callback),
                error_type=type(exc).__name__,
                error=str(exc),
            )
        return None
