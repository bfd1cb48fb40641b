"""Nested attribute assignment for to-one associations."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from nested_attributes.assignment.base import Assignment
from nested_attributes.core.exceptions import InvalidAttributesError

logger = logging.getLogger(__name__)


class ResourceAssignment(Assignment):
    """Assigns nested attributes to the target of a to-one association."""

    def assign(self, attributes: Any) -> ResourceAssignment:
        """Assign ``attributes`` to the associated resource.

        If the attributes carry key values matching the currently linked
        record, that record is updated, or marked for destruction when the
        delete flag is set and destruction is allowed. Otherwise a new record
        is built and linked, unless the acceptor's reject guard refuses it.

        It is not necessary to give key values the relationship inherits
        from the assignee.

        Raises:
            InvalidAttributesError: If ``attributes`` is not a mapping.
            UpdateConflictError: If the matched record is new or dirty.
        """
        if not isinstance(attributes, Mapping):
            raise InvalidAttributesError(
                "attributes", f"should be a Mapping, but was {type(attributes).__name__}"
            )
        self._assign_one(attributes)
        return self

    def _assign_one(self, attributes: Mapping[str, Any]) -> None:
        keys = self.extract_keys(attributes)
        if keys is not None:
            existing_resource = self.existing_resource_for_key(keys)
            if existing_resource is not None:
                self.update_or_mark_as_destroyable(existing_resource, attributes)
                return

        if self.acceptor.reject_new_record(self.assignee, attributes):
            logger.debug("Rejected new nested %s", self.relationship.name)
            return

        self.assign_new_resource(attributes)

    def existing_resource_for_key(self, key: tuple[Any, ...]) -> Any | None:
        """Return the linked resource if its key equals ``key``."""
        existing_related = self.relationship.get(self.assignee)
        if existing_related is not None and tuple(existing_related.key) == tuple(key):
            return existing_related
        return None

    def assign_new_resource(self, attributes: Mapping[str, Any]) -> Any:
        new_resource = self.relationship.target_model()
        new_resource.set_attributes(self.creatable_attributes(new_resource, attributes))
        logger.debug("Building new nested %s", self.relationship.name)
        self.relationship.set(self.assignee, new_resource)
        return new_resource
