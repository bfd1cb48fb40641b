"""In-memory store.

One identity map per model class, keyed by the model's key tuple. Models
with a single key field get serial keys assigned on insert.
"""

from __future__ import annotations

import logging
from typing import Any

from nested_attributes.core.exceptions import StoreError

logger = logging.getLogger(__name__)


class Store:
    """Identity-mapped storage for Model instances."""

    def __init__(self) -> None:
        self._tables: dict[type, dict[tuple[Any, ...], Any]] = {}
        self._serials: dict[type, int] = {}

    def attach(self, resource: Any) -> Any:
        """Bind ``resource`` to this store without saving it."""
        resource.bind_store(self)
        return resource

    def create(self, model: type, **attributes: Any) -> Any:
        """Build, attach and save a new ``model`` instance."""
        resource = self.attach(model(**attributes))
        resource.save()
        return resource

    def insert(self, resource: Any) -> None:
        """Add a new resource, assigning a serial key when it has none."""
        model = type(resource)
        table = self._tables.setdefault(model, {})
        key_fields = model.key_fields

        if len(key_fields) == 1 and getattr(resource, key_fields[0]) is None:
            serial = self._serials.get(model, 0) + 1
            self._serials[model] = serial
            setattr(resource, key_fields[0], serial)

        key = tuple(resource.key)
        if any(part is None for part in key):
            raise StoreError(f"Cannot insert {model.__name__} with incomplete key {key}")
        if key in table:
            raise StoreError(f"Duplicate {model.__name__} key {key}")

        table[key] = resource
        self.attach(resource)
        logger.debug("Inserted %s %r", model.__name__, key)

    def update(self, resource: Any) -> None:
        """Re-index an existing resource under its current key."""
        table = self._tables.setdefault(type(resource), {})
        if table.get(tuple(resource.key)) is resource:
            return
        for key, stored in list(table.items()):
            if stored is resource:
                del table[key]
        table[tuple(resource.key)] = resource

    def delete(self, resource: Any) -> None:
        table = self._tables.get(type(resource), {})
        table.pop(tuple(resource.key), None)
        logger.debug("Deleted %s %r", type(resource).__name__, resource.key)

    def get(self, model: type, *key: Any) -> Any | None:
        """Look up a resource by its key values."""
        return self._tables.get(model, {}).get(tuple(key))

    def find(self, model: type, **conditions: Any) -> list[Any]:
        """All resources of ``model`` whose fields equal ``conditions``, in insertion order."""
        return [
            resource
            for resource in self._tables.get(model, {}).values()
            if all(getattr(resource, name) == value for name, value in conditions.items())
        ]

    def count(self, model: type) -> int:
        return len(self._tables.get(model, {}))
