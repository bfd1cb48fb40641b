"""Nested attribute assignment for to-many associations."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from nested_attributes.assignment.resource import ResourceAssignment
from nested_attributes.core.exceptions import InvalidAttributesError

logger = logging.getLogger(__name__)

_EXPECTED = "should be a Mapping of Mappings or a Sequence of Mappings"


def _type_names(values: Any) -> list[str]:
    """Distinct type names of ``values``, in order of first appearance."""
    return list(dict.fromkeys(type(value).__name__ for value in values))


def assert_mapping_or_sequence_of_mappings(param_name: str, value: Any) -> None:
    """Raise unless ``value`` is a mapping of mappings or a sequence of mappings.

    Raises:
        InvalidAttributesError: Naming the offending value types.
    """
    if isinstance(value, Mapping):
        if not all(isinstance(item, Mapping) for item in value.values()):
            raise InvalidAttributesError(
                param_name,
                f"{_EXPECTED}, but was a Mapping with {_type_names(value.values())}",
            )
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        if not all(isinstance(item, Mapping) for item in value):
            raise InvalidAttributesError(
                param_name,
                f"{_EXPECTED}, but was a Sequence with {_type_names(value)}",
            )
    else:
        raise InvalidAttributesError(param_name, f"{_EXPECTED}, but was {type(value).__name__}")


def normalize_attributes_collection(
    attributes: Mapping[Any, Mapping[str, Any]] | Sequence[Mapping[str, Any]],
) -> list[Mapping[str, Any]]:
    """Return the attribute mappings in input order, dropping outer mapping keys."""
    if isinstance(attributes, Mapping):
        return list(attributes.values())
    return list(attributes)


class CollectionAssignment(ResourceAssignment):
    """Assigns nested attributes to the members of a to-many association.

    Example::

        for_collection(acceptor, person).assign({
            "1": {"id": 1, "name": "Peter"},
            "2": {"name": "John"},
            "3": {"id": 2, "_delete": True},
        })

    updates the name of the member with id 1, builds a new member named
    John and, when the acceptor allows destruction, marks the member with
    id 2 for destruction. A list of the same mappings behaves identically.
    """

    def assign(self, attributes: Any) -> CollectionAssignment:
        """Assign every attribute mapping of ``attributes`` in order.

        Each mapping is resolved on its own: an error in one entry leaves
        the entries before it applied.

        Raises:
            InvalidAttributesError: Before any change, if the shape is wrong.
            UpdateConflictError: If a matched member is new or dirty.
        """
        assert_mapping_or_sequence_of_mappings("attributes", attributes)

        attributes_collection = normalize_attributes_collection(attributes)
        logger.debug(
            "Assigning %d nested %s entries", len(attributes_collection), self.relationship.name
        )
        for member_attributes in attributes_collection:
            self._assign_one(member_attributes)
        return self

    @property
    def collection(self) -> Any:
        return self.relationship.get(self.assignee)

    def existing_resource_for_key(self, key: tuple[Any, ...]) -> Any | None:
        return self.collection.get(*key)

    def assign_new_resource(self, attributes: Mapping[str, Any]) -> Any:
        new_resource = self.collection.new()
        new_resource.set_attributes(self.creatable_attributes(new_resource, attributes))
        logger.debug("Building new nested %s member", self.relationship.name)
        return new_resource
