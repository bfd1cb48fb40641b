"""In-memory relationships.

Each relationship keeps its per-parent state on the parent model and knows
how to load it from the parent's store and how to save it alongside the
parent.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from nested_attributes.memory.collection import RelatedCollection


def _as_tuple(fields: str | tuple[str, ...]) -> tuple[str, ...]:
    return (fields,) if isinstance(fields, str) else tuple(fields)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class MemoryRelationship:
    """Base class of the in-memory relationships."""

    is_to_many = False
    is_child = True
    is_many_to_many = False
    through: MemoryRelationship | None = None
    via: MemoryRelationship | None = None

    def __init__(self, name: str, target_model: type) -> None:
        self.name = name
        self._target_model = target_model

    @property
    def target_model(self) -> type:
        return self._target_model

    @property
    def target_key(self) -> tuple[str, ...]:
        return self._target_model.key_fields

    @property
    def inherited_keys(self) -> dict[str, str]:
        return {}

    def extract_keys_for_nested_attributes(
        self,
        parent: Any,
        attributes: Mapping[str, Any],
    ) -> tuple[Any, ...] | None:
        """Build the target key from the parent and ``attributes``.

        Key fields the relationship inherits are always read from the
        parent, whatever ``attributes`` say. Returns None if any key value
        is blank.
        """
        inherited = self.inherited_keys
        keys = []
        for name in self.target_key:
            if name in inherited:
                value = getattr(parent, inherited[name])
            else:
                value = attributes.get(name)
            if _is_blank(value):
                return None
            keys.append(self._target_model.typecast_field(name, value))
        return tuple(keys)

    def get(self, parent: Any) -> Any:
        if not parent.has_association(self.name):
            parent.set_association(self, self.load(parent))
        return parent.association(self.name)

    def set(self, parent: Any, value: Any) -> None:
        parent.set_association(self, value)

    def load(self, parent: Any) -> Any:
        raise NotImplementedError

    def build(self, parent: Any) -> Any:
        """Build a new target linked to ``parent``."""
        target = self._target_model()
        if parent.store is not None:
            parent.store.attach(target)
        self.link(parent, target)
        return target

    def link(self, parent: Any, target: Any) -> None:
        """Copy the inherited key values from ``parent`` onto ``target``."""
        for target_field, parent_field in self.inherited_keys.items():
            setattr(target, target_field, getattr(parent, parent_field))

    def unlink(self, target: Any) -> None:
        """Clear the inherited key values on ``target``."""
        for target_field in self.inherited_keys:
            setattr(target, target_field, None)

    def before_save(self, parent: Any, value: Any) -> None:
        pass

    def after_save(self, parent: Any, value: Any) -> None:
        pass

    def _save_target(self, parent: Any, target: Any) -> None:
        if target.store is None:
            parent.store.attach(target)
        if target.is_dirty():
            target.save()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self._target_model.__name__})"


class _ChildKeyRelationship(MemoryRelationship):
    """A relationship whose targets hold a foreign key to the parent."""

    def __init__(
        self,
        name: str,
        target_model: type,
        foreign_key: str | tuple[str, ...],
        parent_key: str | tuple[str, ...] = "id",
    ) -> None:
        super().__init__(name, target_model)
        self.foreign_key = _as_tuple(foreign_key)
        self.parent_key = _as_tuple(parent_key)

    @property
    def inherited_keys(self) -> dict[str, str]:
        return dict(zip(self.foreign_key, self.parent_key, strict=True))

    def _find_targets(self, parent: Any) -> list[Any]:
        if parent.is_new() or parent.store is None:
            return []
        conditions = {
            target_field: getattr(parent, parent_field)
            for target_field, parent_field in self.inherited_keys.items()
        }
        return parent.store.find(self._target_model, **conditions)


class OneToMany(_ChildKeyRelationship):
    """Parent has many targets; each target holds the foreign key."""

    is_to_many = True

    def load(self, parent: Any) -> RelatedCollection:
        return RelatedCollection(self, parent, self._find_targets(parent))

    def set(self, parent: Any, value: Any) -> None:
        collection = RelatedCollection(self, parent)
        for target in value:
            self.link(parent, target)
            collection.append(target)
        parent.set_association(self, collection)

    def after_save(self, parent: Any, value: Any) -> None:
        for target in value:
            self.link(parent, target)
            self._save_target(parent, target)


class OneToOne(_ChildKeyRelationship):
    """Parent has at most one target; the target holds the foreign key."""

    def load(self, parent: Any) -> Any | None:
        targets = self._find_targets(parent)
        return targets[0] if targets else None

    def set(self, parent: Any, value: Any) -> None:
        previous = self.get(parent)
        if previous is not None and previous is not value:
            self.unlink(previous)
            if not previous.is_new():
                parent.release(previous)
        if value is not None:
            if parent.store is not None and value.store is None:
                parent.store.attach(value)
            self.link(parent, value)
        parent.set_association(self, value)

    def after_save(self, parent: Any, value: Any) -> None:
        if value is not None:
            self.link(parent, value)
            self._save_target(parent, value)


class ManyToOne(MemoryRelationship):
    """Parent holds a foreign key to a single target."""

    is_child = False

    def __init__(
        self,
        name: str,
        target_model: type,
        foreign_key: str | tuple[str, ...],
    ) -> None:
        super().__init__(name, target_model)
        self.foreign_key = _as_tuple(foreign_key)

    def load(self, parent: Any) -> Any | None:
        key = tuple(getattr(parent, name) for name in self.foreign_key)
        if parent.store is None or any(part is None for part in key):
            return None
        return parent.store.get(self._target_model, *key)

    def set(self, parent: Any, value: Any) -> None:
        parent.set_association(self, value)
        if value is None:
            for name in self.foreign_key:
                setattr(parent, name, None)
        elif not value.is_new():
            self._copy_key(parent, value)

    def before_save(self, parent: Any, value: Any) -> None:
        if value is None:
            return
        if value.store is None:
            parent.store.attach(value)
        # Only the target itself: its children may include the parent being saved
        if value.is_dirty_self():
            value.save()
        self._copy_key(parent, value)

    def _copy_key(self, parent: Any, target: Any) -> None:
        for name, part in zip(self.foreign_key, target.key, strict=True):
            setattr(parent, name, part)


class ManyToMany(MemoryRelationship):
    """Parent and targets linked through join records.

    Args:
        through: OneToMany from the parent to the join model.
        via: ManyToOne from the join model to the target model.
    """

    is_to_many = True
    is_many_to_many = True

    def __init__(
        self,
        name: str,
        target_model: type,
        through: OneToMany,
        via: ManyToOne,
    ) -> None:
        super().__init__(name, target_model)
        self.through = through
        self.via = via

    def load(self, parent: Any) -> RelatedCollection:
        targets = [self.via.get(join) for join in self.through.get(parent)]
        return RelatedCollection(self, parent, [target for target in targets if target is not None])

    def set(self, parent: Any, value: Any) -> None:
        collection = RelatedCollection(self, parent)
        for target in value:
            collection.append(target)
        parent.set_association(self, collection)

    def link(self, parent: Any, target: Any) -> None:
        pass

    def after_save(self, parent: Any, value: Any) -> None:
        joins = self.through.get(parent)
        for target in value:
            self._save_target(parent, target)
            if not any(self.via.get(join) is target for join in joins):
                join = joins.new()
                self.via.set(join, target)
        self.through.after_save(parent, joins)
