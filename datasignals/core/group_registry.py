"""GroupRegistry — namespaced group membership.

Private groups are namespaced per owner: ``"team"`` joined by a chip of
player A and ``"team"`` joined by a chip of player B are different
groups.  Public groups (``"team:public"``) are shared by everyone.

Groups are created lazily on first join and never destroyed; an empty
group and a missing one look the same to every query.  Members are held
by reference only and are not removed when they become invalid.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Hashable
from typing import Any

from datasignals.core.errors import InvalidActor
from datasignals.models.groups import GroupKey, GroupName, ScopeKind
from datasignals.models.signals import Actor, is_actor, is_valid_actor

logger = logging.getLogger(__name__)

# Insertion-ordered member set
_Members = dict[Actor, None]


class GroupRegistry:
    """Owns every group membership set.

    Usage
    -----
    >>> registry = GroupRegistry()
    >>> registry.join("alpha", chip)
    >>> registry.members("alpha", chip.owner())
    (chip,)
    """

    def __init__(self) -> None:
        self._private: dict[Hashable, dict[str, _Members]] = {}
        self._public: dict[str, _Members] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def join(self, group_name: str, actor: Actor) -> None:
        """Add *actor* to the group.  Joining twice is a no-op.

        Raises
        ------
        InvalidGroupName, InvalidScope
            If *group_name* is malformed.
        InvalidActor
            If *actor* is absent or no longer valid.
        """
        group = GroupName.parse(group_name)
        if not is_valid_actor(actor):
            raise InvalidActor("Chip registered with data signal must be a valid entity")

        with self._lock:
            members = self._table(group, actor.owner(), create=True)
            members[actor] = None
        logger.debug("Actor %r joined group %s", actor, group)

    def leave(self, group_name: str, actor: Actor) -> None:
        """Remove *actor* from the group.  Leaving as a non-member is a no-op.

        An actor that has become invalid may still leave, so stale
        memberships can be cleaned up explicitly.
        """
        group = GroupName.parse(group_name)
        if not is_actor(actor):
            raise InvalidActor("Chip leaving a data signal group must be an entity")

        with self._lock:
            members = self._table(group, actor.owner(), create=False)
            if members is not None and actor in members:
                del members[actor]
                logger.debug("Actor %r left group %s", actor, group)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def members(self, group_name: str | GroupName, owner: Hashable) -> tuple[Actor, ...]:
        """Return a stable snapshot of the group's members in join order.

        *owner* selects the private namespace; it is ignored for public
        groups.  Looking up an unknown group creates nothing.
        """
        group = group_name if isinstance(group_name, GroupName) else GroupName.parse(group_name)
        with self._lock:
            members = self._table(group, owner, create=False)
            return tuple(members) if members else ()

    def groups_of(self, actor: Actor) -> list[GroupName]:
        """Return every group *actor* currently belongs to."""
        found: list[GroupName] = []
        with self._lock:
            for table in self._private.values():
                for name, members in table.items():
                    if actor in members:
                        found.append(GroupName(name=name, scope=ScopeKind.PRIVATE))
            for name, members in self._public.items():
                if actor in members:
                    found.append(GroupName(name=name, scope=ScopeKind.PUBLIC))
        return sorted(found, key=lambda g: (g.scope.value, g.name))

    def keys(self) -> list[GroupKey]:
        """Return the key of every non-empty group."""
        with self._lock:
            keys = [
                GroupKey(ScopeKind.PRIVATE, owner, name)
                for owner, table in self._private.items()
                for name, members in table.items()
                if members
            ]
            keys.extend(
                GroupKey(ScopeKind.PUBLIC, None, name)
                for name, members in self._public.items()
                if members
            )
        return keys

    def get_stats(self) -> dict[str, Any]:
        """Return summary counts.

        Returns
        -------
        dict[str, Any]
            Keys: ``private_owners``, ``private_groups``, ``public_groups``
            and ``memberships`` (total member entries across all groups).
        """
        with self._lock:
            private_groups = sum(len(t) for t in self._private.values())
            memberships = sum(
                len(m) for t in self._private.values() for m in t.values()
            ) + sum(len(m) for m in self._public.values())
            return {
                "private_owners": len(self._private),
                "private_groups": private_groups,
                "public_groups": len(self._public),
                "memberships": memberships,
            }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _table(
        self, group: GroupName, owner: Hashable, *, create: bool
    ) -> _Members | None:
        if group.is_public:
            scope_table = self._public
        else:
            scope_table = self._private.get(owner)
            if scope_table is None:
                if not create:
                    return None
                scope_table = self._private[owner] = {}

        members = scope_table.get(group.name)
        if members is None and create:
            members = scope_table[group.name] = {}
        return members
