"""Group naming models — scope, parsed group names and registry keys."""

from __future__ import annotations

import re
from collections.abc import Hashable
from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict

from datasignals.core.errors import InvalidGroupName, InvalidScope

# ``name`` then an optional ``:scope`` of lower-case letters.
_GROUP_PATTERN = re.compile(r"([A-Za-z0-9_]+)(?::([a-z]+))?")


class ScopeKind(str, Enum):
    """Which namespace a group lives in."""

    PRIVATE = "private"
    PUBLIC = "public"


class GroupName(BaseModel):
    """A parsed group name.

    Examples
    --------
    >>> GroupName.parse("alpha")
    GroupName(name='alpha', scope=<ScopeKind.PRIVATE: 'private'>)
    >>> str(GroupName.parse("alpha:public"))
    'alpha:public'
    """

    model_config = ConfigDict(frozen=True)

    name: str
    scope: ScopeKind = ScopeKind.PRIVATE

    @classmethod
    def parse(cls, text: Any) -> GroupName:
        """Parse ``<name>`` or ``<name>:<scope>``.

        Raises
        ------
        InvalidGroupName
            If *text* is not a string or does not match the grammar.
        InvalidScope
            If the scope suffix is neither ``public`` nor ``private``.
        """
        if not isinstance(text, str):
            raise InvalidGroupName(
                f"Data signal group name must be a string, got {type(text).__name__}"
            )
        match = _GROUP_PATTERN.fullmatch(text)
        if match is None:
            raise InvalidGroupName(f"Invalid data signal group name '{text}'")

        name, scope = match.group(1), match.group(2)
        if scope is None:
            return cls(name=name)
        try:
            return cls(name=name, scope=ScopeKind(scope))
        except ValueError as exc:
            raise InvalidScope(f"Invalid data signal scope name ':{scope}'") from exc

    @property
    def is_public(self) -> bool:
        return self.scope is ScopeKind.PUBLIC

    def key_for(self, owner: Hashable) -> GroupKey:
        """Return the registry key of this group as seen by *owner*.

        Public groups ignore the owner entirely.
        """
        if self.is_public:
            return GroupKey(ScopeKind.PUBLIC, None, self.name)
        return GroupKey(ScopeKind.PRIVATE, owner, self.name)

    def __str__(self) -> str:
        return f"{self.name}:{self.scope.value}"


class GroupKey(NamedTuple):
    """Fully-qualified group identity: (scope, owner or None, name)."""

    scope: ScopeKind
    owner: Hashable | None
    name: str
