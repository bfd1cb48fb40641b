"""In-memory model base class.

Models are Pydantic models with dirty tracking, association state and a
save() that cascades to loaded associations before flushing destroyables.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from functools import lru_cache
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, PrivateAttr, TypeAdapter, ValidationError

from nested_attributes.core.exceptions import SaveFailureError, StoreError


class Model(BaseModel):
    """Base class for in-memory persistable models.

    Subclasses declare fields the Pydantic way and may override
    ``key_fields``, ``raise_on_save_failure`` and ``is_valid``.
    """

    model_config = ConfigDict(validate_assignment=True)

    key_fields: ClassVar[tuple[str, ...]] = ("id",)
    raise_on_save_failure: ClassVar[bool] = False

    _store: Any = PrivateAttr(default=None)
    _persisted: bool = PrivateAttr(default=False)
    _destroyed: bool = PrivateAttr(default=False)
    _original: dict[str, Any] = PrivateAttr(default_factory=dict)
    _associations: dict[str, tuple[Any, Any]] = PrivateAttr(default_factory=dict)
    _destroyables: list[Any] = PrivateAttr(default_factory=list)
    _released: list[Any] = PrivateAttr(default_factory=list)

    @classmethod
    def typecast_field(cls, name: str, value: Any) -> Any:
        """Coerce ``value`` to the declared type of field ``name``.

        Values that cannot be coerced are returned unchanged.
        """
        try:
            return field_adapter(cls, name).validate_python(value)
        except ValidationError:
            return value

    # --- State ---

    @property
    def key(self) -> tuple[Any, ...]:
        return tuple(getattr(self, name) for name in self.key_fields)

    @property
    def store(self) -> Any:
        return self._store

    @property
    def destroyables(self) -> list[Any]:
        return self._destroyables

    def bind_store(self, store: Any) -> None:
        self._store = store

    def is_new(self) -> bool:
        return not self._persisted

    def is_destroyed(self) -> bool:
        return self._destroyed

    def is_dirty_self(self) -> bool:
        return self.is_new() or self.model_dump() != self._original

    def is_dirty_children(self) -> bool:
        for relationship, value in self._associations.values():
            if not relationship.is_child:
                continue
            for child in _members(value):
                if child.is_dirty_self() or child.is_dirty_children():
                    return True
        return False

    def is_dirty(self) -> bool:
        return self.is_dirty_self() or self.is_dirty_children()

    def is_valid(self) -> bool:
        """Validation hook consulted by save()."""
        return True

    def set_attributes(self, attributes: Mapping[str, Any]) -> None:
        """Assign every field in ``attributes``, validating each value."""
        for name, value in attributes.items():
            setattr(self, name, value)

    # --- Associations ---

    def has_association(self, name: str) -> bool:
        return name in self._associations

    def association(self, name: str) -> Any:
        return self._associations[name][1]

    def set_association(self, relationship: Any, value: Any) -> None:
        self._associations[relationship.name] = (relationship, value)

    def release(self, resource: Any) -> None:
        """Queue a resource unlinked from this one to be saved with it."""
        self._released.append(resource)

    # --- Persistence ---

    def save(self) -> bool:
        """Save parents, self, children and released records, then destroy the destroyables.

        Returns:
            False if ``is_valid()`` fails and ``raise_on_save_failure`` is off.

        Raises:
            SaveFailureError: If validation fails and ``raise_on_save_failure`` is on.
            StoreError: If the resource is not attached to a store.
        """
        if self._store is None:
            raise StoreError(f"{type(self).__name__} is not attached to a store")

        for relationship, value in list(self._associations.values()):
            relationship.before_save(self, value)

        if not self.is_valid():
            if self.raise_on_save_failure:
                raise SaveFailureError(type(self).__name__)
            return False

        if self.is_new():
            self._store.insert(self)
            self._persisted = True
        elif self.is_dirty_self():
            self._store.update(self)
        self._original = self.model_dump()

        for relationship, value in list(self._associations.values()):
            relationship.after_save(self, value)

        while self._released:
            self._released.pop(0).save()

        self._destroy_destroyables()
        return True

    def destroy(self) -> bool:
        if not self.is_new() and self._store is not None:
            self._store.delete(self)
        self._persisted = False
        self._destroyed = True
        return True

    def _destroy_destroyables(self) -> None:
        while self._destroyables:
            resource = self._destroyables.pop(0)
            resource.destroy()
            self._forget(resource)

    def _forget(self, resource: Any) -> None:
        """Drop ``resource`` from every loaded association."""
        for name, (relationship, value) in list(self._associations.items()):
            if relationship.is_to_many:
                value.remove(resource)
            elif value is resource:
                self._associations[name] = (relationship, None)


def _members(value: Any) -> Iterator[Any]:
    if value is None:
        return iter(())
    if isinstance(value, Model):
        return iter((value,))
    return iter(value)


@lru_cache(maxsize=None)
def field_adapter(model: type[BaseModel], name: str) -> TypeAdapter[Any]:
    """Cached TypeAdapter for the declared type of ``model.name``."""
    return TypeAdapter(model.model_fields[name].annotation)
