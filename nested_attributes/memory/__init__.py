"""In-memory backend - models, store and relationships for nested assignment."""

from __future__ import annotations

from nested_attributes.memory.collection import RelatedCollection
from nested_attributes.memory.model import Model
from nested_attributes.memory.relationship import (
    ManyToMany,
    ManyToOne,
    MemoryRelationship,
    OneToMany,
    OneToOne,
)
from nested_attributes.memory.store import Store

__all__ = [
    "Store",
    "Model",
    "RelatedCollection",
    "MemoryRelationship",
    "OneToOne",
    "OneToMany",
    "ManyToOne",
    "ManyToMany",
]
