"""Assignment layer - resolve nested attributes into create, update or destroy."""

from __future__ import annotations

from nested_attributes.assignment.base import Assignment
from nested_attributes.assignment.collection import CollectionAssignment
from nested_attributes.assignment.factory import for_collection, for_resource
from nested_attributes.assignment.resource import ResourceAssignment

__all__ = [
    "Assignment",
    "ResourceAssignment",
    "CollectionAssignment",
    "for_resource",
    "for_collection",
]
