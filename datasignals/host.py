"""Reference host entity.

Real hosts provide their own entity type; anything with ``is_valid()``
and ``owner()`` works.  ``Chip`` is the minimal one the CLI demo and
tests build scenes from.
"""

from __future__ import annotations

import itertools
from collections.abc import Hashable
from dataclasses import dataclass, field

from datasignals.models.signals import ActorKind

_ids = itertools.count(1)


@dataclass(eq=False)
class Chip:
    """A host entity owned by *player*.  Equality and hash are by identity."""

    player: Hashable
    name: str = ""
    actor_kind: ActorKind = ActorKind.ENTITY
    entity_id: int = field(default_factory=lambda: next(_ids))
    _valid: bool = field(default=True, repr=False)

    def is_valid(self) -> bool:
        return self._valid

    def owner(self) -> Hashable:
        return self.player

    def remove(self) -> None:
        """Mark the entity as removed from the world."""
        self._valid = False

    def __repr__(self) -> str:
        label = self.name or self.actor_kind.value
        return f"Chip[{self.entity_id}]({label}, owner={self.player!r})"
