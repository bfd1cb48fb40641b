"""nested_attributes - nested attribute assignment for object associations."""

from __future__ import annotations

from nested_attributes.assignment import (
    Assignment,
    CollectionAssignment,
    ResourceAssignment,
    for_collection,
    for_resource,
)
from nested_attributes.core.acceptor import (
    Acceptor,
    NamedCheck,
    NoReject,
    Predicate,
    RejectIf,
)
from nested_attributes.core.exceptions import (
    AssignmentError,
    ConfigurationError,
    InvalidAttributesError,
    InvalidOptionsError,
    NestedAttributesError,
    PersistenceError,
    SaveFailureError,
    StoreError,
    UpdateConflictError,
)
from nested_attributes.core.options import NestedAttributesOptions
from nested_attributes.core.protocol import Collection, Relationship, Resource

__all__ = [
    # Assignment
    "Assignment",
    "ResourceAssignment",
    "CollectionAssignment",
    "for_resource",
    "for_collection",
    # Configuration
    "Acceptor",
    "NestedAttributesOptions",
    "RejectIf",
    "NoReject",
    "NamedCheck",
    "Predicate",
    # Protocols
    "Relationship",
    "Resource",
    "Collection",
    # Exceptions
    "NestedAttributesError",
    "AssignmentError",
    "InvalidAttributesError",
    "UpdateConflictError",
    "ConfigurationError",
    "InvalidOptionsError",
    "PersistenceError",
    "SaveFailureError",
    "StoreError",
]
