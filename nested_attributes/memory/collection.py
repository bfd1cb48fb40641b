"""Related collections of to-many associations."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any


class RelatedCollection:
    """Ordered members of one parent's to-many association.

    Membership is by identity: two distinct members with equal fields are
    still distinct.
    """

    def __init__(self, relationship: Any, parent: Any, members: list[Any] | None = None) -> None:
        self.relationship = relationship
        self.parent = parent
        self._members: list[Any] = list(members or [])

    def get(self, *key: Any) -> Any | None:
        """Return the member whose key equals ``key``, or None."""
        for member in self._members:
            if tuple(member.key) == key:
                return member
        return None

    def new(self, attributes: Mapping[str, Any] | None = None) -> Any:
        """Build a member, link it to the parent and append it."""
        member = self.relationship.build(self.parent)
        if attributes:
            member.set_attributes(attributes)
        self._members.append(member)
        return member

    def all(self, conditions: Mapping[Any, Any]) -> RelatedCollection:
        """Members matching every condition.

        A condition keyed by a relationship matches members whose related
        resource is the given resource. Any other key is a field name.
        """
        matched = [member for member in self._members if _matches(member, conditions)]
        return RelatedCollection(self.relationship, self.parent, matched)

    def append(self, member: Any) -> None:
        if not self.contains(member):
            self._members.append(member)

    def remove(self, member: Any) -> None:
        self._members = [existing for existing in self._members if existing is not member]

    def contains(self, member: Any) -> bool:
        return any(existing is member for existing in self._members)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._members))

    def __len__(self) -> int:
        return len(self._members)

    def __getitem__(self, index: int) -> Any:
        return self._members[index]

    def __repr__(self) -> str:
        return f"RelatedCollection({self.relationship.name!r}, {self._members!r})"


def _matches(member: Any, conditions: Mapping[Any, Any]) -> bool:
    for condition, expected in conditions.items():
        if isinstance(condition, str):
            if getattr(member, condition) != expected:
                return False
        elif condition.get(member) is not expected:
            return False
    return True
