"""Shared test fixtures for Datasignals."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from datasignals.core.dispatcher import Dispatcher
from datasignals.core.group_registry import GroupRegistry
from datasignals.core.hub import SignalHub
from datasignals.core.listener_registry import ListenerRegistry
from datasignals.host import Chip
from datasignals.models.signals import ActorKind


class Recorder:
    """A listener that records every (signal, data, sender) it receives."""

    def __init__(self, name: str = "recorder") -> None:
        self.name = name
        self.calls: list[tuple[str, Any, Any]] = []

    def __call__(self, signal: str, data: Any, sender: Any) -> None:
        self.calls.append((signal, data, sender))

    @property
    def signals(self) -> list[str]:
        return [call[0] for call in self.calls]

    def __repr__(self) -> str:
        return f"Recorder({self.name})"


class Exploding:
    """A listener that always raises *exc_type*."""

    def __init__(self, exc_type: type[Exception] = RuntimeError) -> None:
        self.exc_type = exc_type
        self.calls = 0

    def __call__(self, signal: str, data: Any, sender: Any) -> None:
        self.calls += 1
        raise self.exc_type(f"listener exploded on {signal}")


@pytest.fixture
def groups() -> GroupRegistry:
    """Provide an empty GroupRegistry."""
    return GroupRegistry()


@pytest.fixture
def listeners() -> ListenerRegistry:
    """Provide an empty ListenerRegistry."""
    return ListenerRegistry()


@pytest.fixture
def dispatcher(groups: GroupRegistry, listeners: ListenerRegistry) -> Dispatcher:
    """Provide a Dispatcher wired to the test registries."""
    return Dispatcher(groups, listeners)


@pytest.fixture
def hub() -> SignalHub:
    """Provide a fresh SignalHub."""
    return SignalHub()


# ---------------------------------------------------------------------------
# Chip factories — shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_chip() -> Callable[..., Chip]:
    """Factory fixture: build a Chip owned by *player*."""

    def _factory(
        player: str = "alice",
        name: str = "",
        actor_kind: ActorKind = ActorKind.ENTITY,
    ) -> Chip:
        return Chip(player, name=name, actor_kind=actor_kind)

    return _factory


@pytest.fixture
def sender(make_chip: Callable[..., Chip]) -> Chip:
    """Convenience: a valid chip owned by alice to send from."""
    return make_chip("alice", name="sender")


@pytest.fixture
def make_recorder() -> Callable[..., Recorder]:
    return Recorder


@pytest.fixture
def make_exploding() -> Callable[..., Exploding]:
    return Exploding
