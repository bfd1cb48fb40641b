"""Per-association nested attribute configuration.

An Acceptor is built once, when an association is declared as accepting
nested attributes, and shared by every assignment made through it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from nested_attributes.core.exceptions import InvalidOptionsError
from nested_attributes.core.options import DEFAULT_DELETE_KEY, NestedAttributesOptions
from nested_attributes.core.protocol import Relationship

# Form-style boolean values accepted as a set delete flag
TRUE_VALUES: frozenset[Any] = frozenset([True, 1, "1", "t", "T", "true", "TRUE"])


@dataclass(frozen=True)
class NoReject:
    """New records are never rejected."""


@dataclass(frozen=True)
class NamedCheck:
    """Reject by calling ``getattr(parent, name)(attributes)``."""

    name: str


@dataclass(frozen=True)
class Predicate:
    """Reject by calling ``fn(parent, attributes)``."""

    fn: Callable[[Any, Mapping[str, Any]], Any]


RejectIf = NoReject | NamedCheck | Predicate


def _to_reject_if(value: str | Callable[..., Any] | None) -> RejectIf:
    if value is None:
        return NoReject()
    if isinstance(value, str):
        return NamedCheck(value)
    return Predicate(value)


@dataclass(frozen=True)
class Acceptor:
    """Nested attribute configuration for one relationship."""

    relationship: Relationship
    allow_destroy: bool = False
    reject_if: RejectIf = field(default_factory=NoReject)
    delete_key: str = DEFAULT_DELETE_KEY

    @classmethod
    def from_options(cls, relationship: Relationship, **options: Any) -> Acceptor:
        """Validate raw options and build an Acceptor.

        Raises:
            InvalidOptionsError: If an option is unknown or has the wrong type.
        """
        try:
            validated = NestedAttributesOptions(**options)
        except ValidationError as e:
            raise InvalidOptionsError(relationship.name, str(e)) from e
        return cls(
            relationship=relationship,
            allow_destroy=validated.allow_destroy,
            reject_if=_to_reject_if(validated.reject_if),
            delete_key=validated.delete_key,
        )

    @property
    def is_many_to_many(self) -> bool:
        return self.relationship.is_many_to_many

    def has_delete_flag(self, attributes: Mapping[str, Any]) -> bool:
        """Check whether ``attributes`` carry a truthy delete flag."""
        value = attributes.get(self.delete_key)
        try:
            return value in TRUE_VALUES
        except TypeError:
            # unhashable values are never a delete flag
            return False

    def reject_new_record(self, parent: Any, attributes: Mapping[str, Any]) -> bool:
        """Evaluate the reject guard for a would-be new record."""
        guard = self.reject_if
        if isinstance(guard, NamedCheck):
            return bool(getattr(parent, guard.name)(attributes))
        if isinstance(guard, Predicate):
            return bool(guard.fn(parent, attributes))
        return False

    def uncreatable_keys(self, resource: Any) -> frozenset[str]:
        """Attribute names excluded when building a new nested resource.

        Includes the delete flag and every field the relationship itself
        sets on the new resource.
        """
        return frozenset([self.delete_key, *self.relationship.inherited_keys])

    def unupdatable_keys(self, resource: Any) -> frozenset[str]:
        """Attribute names excluded when updating an existing nested resource."""
        return self.uncreatable_keys(resource) | frozenset(self.relationship.target_key)
