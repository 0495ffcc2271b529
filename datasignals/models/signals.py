"""Signal names, payload values, actors and send targets.

A data signal is a short name plus a single value.  Names are up to
twenty characters of letters, digits and underbar.  The reserved name
``$default`` is only a subscription key: listeners registered under it
receive every signal sent to their chip.
"""

from __future__ import annotations

import re
from collections.abc import Hashable
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from datasignals.core.errors import InvalidDataType, InvalidTarget

DEFAULT_SIGNAL = "$default"
MAX_SIGNAL_LENGTH = 20

_SIGNAL_PATTERN = re.compile(r"[A-Za-z0-9_]+")


def is_valid_signal(signal: Any) -> bool:
    """Return True if *signal* is a sendable signal name."""
    return (
        isinstance(signal, str)
        and len(signal) <= MAX_SIGNAL_LENGTH
        and _SIGNAL_PATTERN.fullmatch(signal) is not None
    )


def is_listenable_signal(signal: Any) -> bool:
    """Return True if *signal* may be used as a subscription key."""
    return signal == DEFAULT_SIGNAL or is_valid_signal(signal)


# ---------------------------------------------------------------------------
# Actors
# ---------------------------------------------------------------------------


class ActorKind(str, Enum):
    """Host entity flavours that travel as actor references."""

    ENTITY = "entity"
    NPC = "npc"
    PLAYER = "player"


@runtime_checkable
class Actor(Protocol):
    """Host entity as seen by the routing core.

    The core only holds references to actors; it never creates, keeps
    alive or destroys them.  Implementations must be hashable.
    """

    def is_valid(self) -> bool: ...

    def owner(self) -> Hashable: ...


def is_actor(obj: Any) -> bool:
    # a class satisfies the protocol structurally but is not an entity
    return obj is not None and not isinstance(obj, type) and isinstance(obj, Actor)


def is_valid_actor(obj: Any) -> bool:
    return is_actor(obj) and bool(obj.is_valid())


def actor_kind_of(actor: Actor) -> ActorKind:
    kind = getattr(actor, "actor_kind", ActorKind.ENTITY)
    try:
        return ActorKind(kind)
    except ValueError as exc:
        raise InvalidDataType(
            f"Invalid data signal data type: unknown actor kind {kind!r}."
        ) from exc


# ---------------------------------------------------------------------------
# Payload values
# ---------------------------------------------------------------------------


class Angle(BaseModel):
    """Pitch/yaw/roll in degrees."""

    model_config = ConfigDict(frozen=True)

    pitch: float = 0.0
    yaw: float = 0.0
    roll: float = 0.0


class Vector(BaseModel):
    """A point or direction in world space."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class ValueKind(str, Enum):
    """The nine payload kinds a signal may carry."""

    ANGLE = "Angle"
    BOOLEAN = "boolean"
    ACTOR = "Entity"
    NIL = "nil"
    NPC = "NPC"
    NUMBER = "number"
    PLAYER = "Player"
    STRING = "string"
    VECTOR = "Vector"


_ACTOR_VALUE_KINDS = {
    ActorKind.ENTITY: ValueKind.ACTOR,
    ActorKind.NPC: ValueKind.NPC,
    ActorKind.PLAYER: ValueKind.PLAYER,
}


def value_kind(data: Any) -> ValueKind:
    """Classify a payload, raising ``InvalidDataType`` for anything else."""
    if data is None:
        return ValueKind.NIL
    # bool first: it is an int subclass
    if isinstance(data, bool):
        return ValueKind.BOOLEAN
    if isinstance(data, (int, float)):
        return ValueKind.NUMBER
    if isinstance(data, str):
        return ValueKind.STRING
    if isinstance(data, Angle):
        return ValueKind.ANGLE
    if isinstance(data, Vector):
        return ValueKind.VECTOR
    if is_actor(data):
        return _ACTOR_VALUE_KINDS[actor_kind_of(data)]
    raise InvalidDataType(
        f"Invalid data signal data type: {type(data).__name__}."
    )


def is_actor_value(kind: ValueKind) -> bool:
    return kind in _ACTOR_VALUE_KINDS.values()


# ---------------------------------------------------------------------------
# Send targets
# ---------------------------------------------------------------------------


class TargetKind(str, Enum):
    """Shapes a send target can take."""

    ACTOR = "actor"
    GROUP = "group"
    COLLECTION = "collection"


def target_kind(target: Any) -> TargetKind:
    """Classify a send target, raising ``InvalidTarget`` for anything else."""
    if isinstance(target, str):
        return TargetKind.GROUP
    if isinstance(target, (list, tuple)):
        return TargetKind.COLLECTION
    if is_actor(target):
        return TargetKind.ACTOR
    raise InvalidTarget(f"Invalid data signal target: {type(target).__name__}")
