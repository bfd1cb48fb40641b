"""End-to-end nested assignment over the in-memory backend."""

from __future__ import annotations

from typing import Any, ClassVar

import pytest

from nested_attributes import (
    Acceptor,
    InvalidAttributesError,
    UpdateConflictError,
    for_collection,
    for_resource,
)
from nested_attributes.memory import ManyToMany, ManyToOne, Model, OneToMany, OneToOne, Store


class Person(Model):
    id: int | None = None
    name: str | None = None

    def blank_street(self, attributes: dict[str, Any]) -> bool:
        return not attributes.get("street")


class Address(Model):
    id: int | None = None
    person_id: int | None = None
    street: str | None = None


class Task(Model):
    id: int | None = None
    person_id: int | None = None
    title: str | None = None


class Audit(Model):
    key_fields: ClassVar[tuple[str, ...]] = ("person_id", "audit_id")

    person_id: int | None = None
    audit_id: int | None = None
    note: str | None = None


class Tag(Model):
    id: int | None = None
    name: str | None = None


class Tagging(Model):
    id: int | None = None
    person_id: int | None = None
    tag_id: int | None = None


address = OneToOne("address", Address, foreign_key="person_id")
tasks = OneToMany("tasks", Task, foreign_key="person_id")
audits = OneToMany("audits", Audit, foreign_key="person_id")
owner = ManyToOne("owner", Person, foreign_key="person_id")
taggings = OneToMany("taggings", Tagging, foreign_key="person_id")
tags = ManyToMany("tags", Tag, through=taggings, via=ManyToOne("tag", Tag, foreign_key="tag_id"))


@pytest.fixture
def person(store: Store) -> Person:
    return store.create(Person, name="Alice")


@pytest.fixture
def peter_and_paul(store: Store, person: Person) -> tuple[Task, Task]:
    return (
        store.create(Task, person_id=person.id, title="Peter's task"),
        store.create(Task, person_id=person.id, title="Paul's task"),
    )


class TestToOne:
    def test_creates_when_no_key(self, store: Store, person: Person) -> None:
        for_resource(Acceptor.from_options(address), person).assign(
            {"street": "Main St", "person_id": 42, "_delete": "1"}
        )

        home = address.get(person)
        assert home.street == "Main St"
        assert home.person_id == person.id
        assert home.is_new()

        person.save()
        assert store.count(Address) == 1
        assert not home.is_new()

    def test_updates_linked_record(self, store: Store, person: Person) -> None:
        home = store.create(Address, person_id=person.id, street="Main St")

        for_resource(Acceptor.from_options(address), person).assign(
            {"id": str(home.id), "street": "Elm St"}
        )

        assert address.get(person) is home
        assert home.street == "Elm St"
        assert not home.is_dirty()
        assert store.count(Address) == 1

    def test_unknown_key_replaces_with_new_record(self, store: Store, person: Person) -> None:
        home = store.create(Address, person_id=person.id, street="Main St")

        for_resource(Acceptor.from_options(address), person).assign({"id": 99, "street": "Elm St"})

        replacement = address.get(person)
        assert replacement is not home
        assert replacement.id == 99
        assert replacement.street == "Elm St"
        assert home.street == "Main St"

    def test_replacement_unlinks_previous_record(self, store: Store, person: Person) -> None:
        home = store.create(Address, person_id=person.id, street="Main St")

        for_resource(Acceptor.from_options(address), person).assign({"street": "Elm St"})
        person.save()

        linked = store.find(Address, person_id=person.id)
        assert len(linked) == 1
        assert linked[0].street == "Elm St"
        assert home.person_id is None
        assert not home.is_dirty()
        assert store.count(Address) == 2
        assert address.load(person) is linked[0]

    def test_destroy(self, store: Store, person: Person) -> None:
        home = store.create(Address, person_id=person.id, street="Main St")

        for_resource(Acceptor.from_options(address, allow_destroy=True), person).assign(
            {"id": home.id, "_delete": "true"}
        )

        assert person.destroyables == [home]
        assert home.street == "Main St"

        person.save()
        assert store.count(Address) == 0
        assert address.get(person) is None

    def test_named_reject_check(self, store: Store, person: Person) -> None:
        acceptor = Acceptor.from_options(address, reject_if="blank_street")

        for_resource(acceptor, person).assign({"street": ""})
        assert address.get(person) is None

        for_resource(acceptor, person).assign({"street": "Main St"})
        assert address.get(person).street == "Main St"

    def test_dirty_linked_record_conflicts(self, store: Store, person: Person) -> None:
        home = store.create(Address, person_id=person.id, street="Main St")
        home.street = "Unsaved St"

        with pytest.raises(UpdateConflictError, match="Address#update"):
            for_resource(Acceptor.from_options(address), person).assign(
                {"id": home.id, "street": "Elm St"}
            )
        assert home.street == "Unsaved St"

    def test_many_to_one_target(self, store: Store) -> None:
        task = store.create(Task, title="orphan")

        for_resource(Acceptor.from_options(owner), task).assign({"name": "Bob"})
        task.save()

        assert task.person_id is not None
        assert store.get(Person, task.person_id).name == "Bob"


class TestToMany:
    def test_update_create_and_destroy(
        self, store: Store, person: Person, peter_and_paul: tuple[Task, Task]
    ) -> None:
        peter, paul = peter_and_paul
        acceptor = Acceptor.from_options(tasks, allow_destroy=True)

        for_collection(acceptor, person).assign(
            {
                "1": {"id": peter.id, "title": "Peter"},
                "2": {"title": "John"},
                "3": {"id": paul.id, "_delete": True},
            }
        )

        assert peter.title == "Peter"
        assert not peter.is_dirty()
        assert [task.title for task in tasks.get(person)] == ["Peter", "Paul's task", "John"]
        assert person.destroyables == [paul]
        assert paul.title == "Paul's task"
        assert store.count(Task) == 2

        person.save()

        assert [task.title for task in tasks.get(person)] == ["Peter", "John"]
        assert [task.title for task in store.find(Task, person_id=person.id)] == ["Peter", "John"]
        assert paul.is_destroyed()

    def test_array_input_matches_mapping_input(
        self, store: Store, person: Person, peter_and_paul: tuple[Task, Task]
    ) -> None:
        peter, paul = peter_and_paul

        for_collection(Acceptor.from_options(tasks, allow_destroy=True), person).assign(
            [
                {"id": str(peter.id), "title": "Peter"},
                {"title": "John"},
                {"id": str(paul.id), "_delete": "1"},
            ]
        )

        assert peter.title == "Peter"
        assert len(tasks.get(person)) == 3
        assert person.destroyables == [paul]

    def test_delete_flag_ignored_without_allow_destroy(
        self, person: Person, peter_and_paul: tuple[Task, Task]
    ) -> None:
        _, paul = peter_and_paul

        for_collection(Acceptor.from_options(tasks), person).assign(
            [{"id": paul.id, "_delete": True, "title": "Paul"}]
        )

        assert person.destroyables == []
        assert paul.title == "Paul"

    def test_repeated_update_is_idempotent(
        self, store: Store, person: Person, peter_and_paul: tuple[Task, Task]
    ) -> None:
        peter, _ = peter_and_paul
        assignment = for_collection(Acceptor.from_options(tasks), person)

        assignment.assign([{"id": peter.id, "title": "Peter"}])
        first = peter.model_dump()
        assignment.assign([{"id": peter.id, "title": "Peter"}])

        assert peter.model_dump() == first
        assert len(tasks.get(person)) == 2
        assert store.count(Task) == 2

    def test_reject_all_new_records(
        self, person: Person, peter_and_paul: tuple[Task, Task]
    ) -> None:
        peter, _ = peter_and_paul
        acceptor = Acceptor.from_options(tasks, reject_if=lambda parent, attributes: True)

        for_collection(acceptor, person).assign(
            [{"title": "John"}, {"id": peter.id, "title": "Peter"}]
        )

        assert len(tasks.get(person)) == 2
        assert peter.title == "Peter"

    def test_composite_key_inherits_parent_part(self, store: Store, person: Person) -> None:
        audit = store.create(Audit, person_id=person.id, audit_id=2, note="old")

        for_collection(Acceptor.from_options(audits), person).assign(
            {
                "1": {"person_id": 999, "audit_id": "2", "note": "new"},
                "2": {"audit_id": 3, "note": "other"},
            }
        )

        assert audit.note == "new"
        assert audit.person_id == person.id
        created = audits.get(person)[1]
        assert created.key == (person.id, 3)

    def test_invalid_input_changes_nothing(
        self, person: Person, peter_and_paul: tuple[Task, Task]
    ) -> None:
        peter, _ = peter_and_paul

        with pytest.raises(InvalidAttributesError):
            for_collection(Acceptor.from_options(tasks), person).assign(
                [{"id": peter.id, "title": "Peter"}, "John"]
            )

        assert peter.title == "Peter's task"
        assert not person.has_association("tasks")

    def test_conflict_keeps_earlier_entries(
        self, person: Person, peter_and_paul: tuple[Task, Task]
    ) -> None:
        peter, paul = peter_and_paul
        paul.title = "unsaved"

        with pytest.raises(UpdateConflictError):
            for_collection(Acceptor.from_options(tasks), person).assign(
                [{"id": peter.id, "title": "Peter"}, {"id": paul.id, "title": "Paul"}]
            )

        assert peter.title == "Peter"
        assert paul.title == "unsaved"


class TestManyToMany:
    def test_destroy_marks_join_records(self, store: Store, person: Person) -> None:
        red = store.create(Tag, name="red")
        blue = store.create(Tag, name="blue")
        red_join = store.create(Tagging, person_id=person.id, tag_id=red.id)
        store.create(Tagging, person_id=person.id, tag_id=blue.id)

        for_collection(Acceptor.from_options(tags, allow_destroy=True), person).assign(
            [{"id": red.id, "_delete": True}]
        )

        assert person.destroyables == [red_join, red]

        person.save()
        assert [tag.name for tag in tags.get(person)] == ["blue"]
        assert store.count(Tagging) == 1
        assert store.get(Tag, red.id) is None

    def test_create_links_through_join_record(self, store: Store, person: Person) -> None:
        for_collection(Acceptor.from_options(tags), person).assign({"0": {"name": "green"}})
        person.save()

        green = tags.get(person)[0]
        assert green.name == "green"
        assert [join.tag_id for join in store.find(Tagging, person_id=person.id)] == [green.id]
