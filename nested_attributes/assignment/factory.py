"""Assignment engine construction.

Choosing between the two is up to the caller, based on the cardinality of
the association.
"""

from __future__ import annotations

from typing import Any

from nested_attributes.assignment.collection import CollectionAssignment
from nested_attributes.assignment.resource import ResourceAssignment
from nested_attributes.core.acceptor import Acceptor


def for_resource(acceptor: Acceptor, assignee: Any) -> ResourceAssignment:
    """Engine for a to-one association of ``assignee``."""
    return ResourceAssignment(acceptor, assignee)


def for_collection(acceptor: Acceptor, assignee: Any) -> CollectionAssignment:
    """Engine for a to-many association of ``assignee``."""
    return CollectionAssignment(acceptor, assignee)
