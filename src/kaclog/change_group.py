""" The fixed set of change categories that a Keep a Changelog release is broken into. """

from __future__ import annotations

import enum
import typing as t


class ChangeGroup(enum.Enum):
    """The closed enumeration of change groups. The member values are the canonical display names and the declaration
    order is the order in which groups are rendered inside a release."""

    ADDED = "Added"
    CHANGED = "Changed"
    DEPRECATED = "Deprecated"
    REMOVED = "Removed"
    FIXED = "Fixed"
    SECURITY = "Security"

    def __str__(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @staticmethod
    def resolve(name: str) -> ChangeGroup | None:
        """Returns the group whose display name is exactly *name*, or `None`. Matching is case-sensitive, so
        `"added"` and `"Addedd"` both resolve to `None`."""

        try:
            return ChangeGroup(name)
        except ValueError:
            return None

    @staticmethod
    def ordered(groups: t.Iterable[ChangeGroup]) -> list[ChangeGroup]:
        return sorted(groups, key=lambda g: g.rank)


_RANKS = {group: index for index, group in enumerate(ChangeGroup)}
