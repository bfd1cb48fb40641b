"""Shared test fixtures."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from nested_attributes.memory.store import Store


@pytest.fixture
def store() -> Store:
    """Empty in-memory store."""
    return Store()


@pytest.fixture
def make_relationship():
    """Helper to build a mocked Relationship collaborator.

    Usage:
        relationship = make_relationship(keys=(1,), linked=resource)
    """

    def _make(
        keys: tuple[Any, ...] | None = None,
        linked: Any = None,
        inherited_keys: dict[str, str] | None = None,
        many_to_many: bool = False,
    ) -> MagicMock:
        relationship = MagicMock()
        relationship.name = "children"
        relationship.target_key = ("id",)
        relationship.inherited_keys = inherited_keys if inherited_keys is not None else {}
        relationship.is_many_to_many = many_to_many
        relationship.extract_keys_for_nested_attributes.return_value = keys
        relationship.get.return_value = linked
        return relationship

    return _make


@pytest.fixture
def make_resource():
    """Helper to build a mocked Resource collaborator."""

    def _make(
        key: tuple[Any, ...] = (1,),
        dirty_self: bool = False,
        dirty_children: bool = False,
        new: bool = False,
    ) -> MagicMock:
        resource = MagicMock()
        resource.key = key
        resource.is_new.return_value = new
        resource.is_dirty_self.return_value = dirty_self
        resource.is_dirty_children.return_value = dirty_children
        return resource

    return _make


@pytest.fixture
def assignee() -> MagicMock:
    """Mocked parent object with an empty destroyables list."""
    parent = MagicMock()
    parent.destroyables = []
    return parent
