"""Shared machinery of the nested attribute assignment engines.

An assignment engine is built for one call: it holds the acceptor, the
parent (assignee) and the relationship, resolves the given attributes into
create, update or destroy decisions and applies them.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from nested_attributes.core.acceptor import Acceptor
from nested_attributes.core.exceptions import UpdateConflictError

logger = logging.getLogger(__name__)


def _except(attributes: Mapping[str, Any], excluded: frozenset[str]) -> dict[str, Any]:
    """Copy ``attributes`` without the ``excluded`` keys."""
    return {name: value for name, value in attributes.items() if name not in excluded}


class Assignment(ABC):
    """Base class of the nested attribute assignment engines.

    Args:
        acceptor: Configuration of the association receiving the attributes.
        assignee: The parent object owning the association.
    """

    def __init__(self, acceptor: Acceptor, assignee: Any) -> None:
        self.acceptor = acceptor
        self.relationship = acceptor.relationship
        self.assignee = assignee

    @classmethod
    def for_resource(cls, acceptor: Acceptor, assignee: Any) -> Assignment:
        """Build the engine for a to-one association."""
        from nested_attributes.assignment.factory import for_resource

        return for_resource(acceptor, assignee)

    @classmethod
    def for_collection(cls, acceptor: Acceptor, assignee: Any) -> Assignment:
        """Build the engine for a to-many association."""
        from nested_attributes.assignment.factory import for_collection

        return for_collection(acceptor, assignee)

    @abstractmethod
    def assign(self, attributes: Any) -> Assignment:
        """Resolve and apply ``attributes``, returning the engine."""

    def extract_keys(self, attributes: Mapping[str, Any]) -> tuple[Any, ...] | None:
        """Extract the target key needed to find an existing nested record.

        Values inherited from the assignee take priority over the given
        attributes. Key fields the relationship does not inherit must be
        present in ``attributes``.
        """
        return self.relationship.extract_keys_for_nested_attributes(self.assignee, attributes)

    def update_or_mark_as_destroyable(self, resource: Any, attributes: Mapping[str, Any]) -> None:
        """Update ``resource``, or mark it for destruction if allowed and flagged."""
        if self.acceptor.has_delete_flag(attributes) and self.acceptor.allow_destroy:
            self.mark_as_destroyable(resource)
        else:
            self.update(resource, attributes)

    def update(self, resource: Any, attributes: Mapping[str, Any]) -> None:
        self.assert_nested_update_clean_only(resource)
        logger.debug("Updating nested %s %r", self.relationship.name, resource.key)
        resource.set_attributes(self.updatable_attributes(resource, attributes))
        resource.save()

    def mark_as_destroyable(self, resource: Any) -> None:
        logger.debug("Marking nested %s %r as destroyable", self.relationship.name, resource.key)
        if self.acceptor.is_many_to_many:
            self.mark_intermediaries_as_destroyable(resource)
        self.destroyables.append(resource)

    def mark_intermediaries_as_destroyable(self, resource: Any) -> None:
        """Mark the join records linking the assignee to ``resource``."""
        intermediary_collection = self.relationship.through.get(self.assignee)
        intermediaries = intermediary_collection.all({self.relationship.via: resource})
        for intermediary in intermediaries:
            self.destroyables.append(intermediary)

    @property
    def destroyables(self) -> list[Any]:
        return self.assignee.destroyables

    def creatable_attributes(self, resource: Any, attributes: Mapping[str, Any]) -> dict[str, Any]:
        return _except(attributes, self.acceptor.uncreatable_keys(resource))

    def updatable_attributes(self, resource: Any, attributes: Mapping[str, Any]) -> dict[str, Any]:
        return _except(attributes, self.acceptor.unupdatable_keys(resource))

    def assert_nested_update_clean_only(self, resource: Any) -> None:
        """Raise if ``resource`` or any of its loaded children is dirty.

        Raises:
            UpdateConflictError: If the resource cannot be safely updated.
        """
        if resource.is_dirty_self() or resource.is_dirty_children():
            state = "new" if resource.is_new() else "dirty"
            raise UpdateConflictError(type(resource).__name__, state)
