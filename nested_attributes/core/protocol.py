"""Collaborator protocols.

The assignment engines only talk to relationships, resources and collections
through these interfaces. Any backend that implements them can be driven by
nested attribute assignment.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Resource(Protocol):
    """A persistable domain object."""

    @property
    def key(self) -> tuple[Any, ...]:
        """Ordered key values identifying this resource."""
        ...

    @property
    def destroyables(self) -> list[Any]:
        """Resources marked for deletion on this resource's next save."""
        ...

    def is_new(self) -> bool:
        """True if the resource has never been persisted."""
        ...

    def is_dirty_self(self) -> bool:
        """True if the resource has unsaved local changes."""
        ...

    def is_dirty_children(self) -> bool:
        """True if any loaded descendant has unsaved changes."""
        ...

    def set_attributes(self, attributes: Mapping[str, Any]) -> None:
        """Bulk-assign field values."""
        ...

    def save(self) -> bool:
        """Persist the resource. May raise."""
        ...


@runtime_checkable
class Collection(Protocol):
    """The related side of a to-many association."""

    def get(self, *key: Any) -> Any | None:
        """Return the member whose key equals ``key``, or None."""
        ...

    def new(self, attributes: Mapping[str, Any] | None = None) -> Any:
        """Build a new member and append it to the collection."""
        ...

    def all(self, conditions: Mapping[Any, Any]) -> Collection:
        """Return the members matching every condition."""
        ...

    def __iter__(self) -> Iterator[Any]: ...


@runtime_checkable
class Relationship(Protocol):
    """An association between a parent model and a target model."""

    name: str

    @property
    def target_model(self) -> type:
        """Class of the related records; calling it builds a new record."""
        ...

    @property
    def target_key(self) -> tuple[str, ...]:
        """Key field names of the target model."""
        ...

    @property
    def inherited_keys(self) -> dict[str, str]:
        """Target field name -> parent field name, for fields the relationship sets."""
        ...

    @property
    def is_many_to_many(self) -> bool: ...

    @property
    def through(self) -> Relationship | None:
        """Relationship from the parent to the join records (many-to-many only)."""
        ...

    @property
    def via(self) -> Relationship | None:
        """Relationship from a join record to the target (many-to-many only)."""
        ...

    def extract_keys_for_nested_attributes(
        self,
        parent: Any,
        attributes: Mapping[str, Any],
    ) -> tuple[Any, ...] | None:
        """Build the target key from the parent and ``attributes``, or None."""
        ...

    def get(self, parent: Any) -> Any:
        """Return the related resource (to-one) or collection (to-many)."""
        ...

    def set(self, parent: Any, value: Any) -> None:
        """Replace the related resource or collection."""
        ...
