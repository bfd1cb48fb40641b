"""
Example 01: Collection Assignment

This example updates, builds and destroys the tasks of a person from one
nested attributes mapping, the way a form submission would.
"""

from nested_attributes import Acceptor, for_collection
from nested_attributes.memory import Model, OneToMany, Store


class Person(Model):
    """Person entity"""
    id: int | None = None
    name: str | None = None


class Task(Model):
    """Task entity, owned by a person"""
    id: int | None = None
    person_id: int | None = None
    title: str | None = None


tasks = OneToMany("tasks", Task, foreign_key="person_id")


def main():
    store = Store()
    person = store.create(Person, name="Alice")
    store.create(Task, person_id=person.id, title="Write report")
    store.create(Task, person_id=person.id, title="Book travel")

    print("=== Collection Assignment ===\n")

    print("1. Existing tasks:")
    for task in tasks.get(person):
        print(f"   - #{task.id} {task.title}")
    print()

    # Acceptor is built once per association
    acceptor = Acceptor.from_options(tasks, allow_destroy=True)

    print("2. Assign nested attributes:")
    for_collection(acceptor, person).assign({
        "0": {"id": "1", "title": "Write final report"},
        "1": {"title": "Review budget"},
        "2": {"id": "2", "_delete": "1"},
    })
    print(f"   Marked for destruction: {[task.title for task in person.destroyables]}\n")

    print("3. Save person:")
    person.save()
    for task in tasks.get(person):
        print(f"   - #{task.id} {task.title}")
    print()


if __name__ == "__main__":
    main()
