"""
Example 02: Resource Assignment

This example assigns nested attributes to a to-one association, with a
reject guard that skips blank addresses.
"""

from nested_attributes import Acceptor, UpdateConflictError, for_resource
from nested_attributes.memory import Model, OneToOne, Store


class Person(Model):
    """Person entity"""
    id: int | None = None
    name: str | None = None

    def blank_address(self, attributes):
        return not attributes.get("street")


class Address(Model):
    """Address entity, one per person"""
    id: int | None = None
    person_id: int | None = None
    street: str | None = None


address = OneToOne("address", Address, foreign_key="person_id")


def main():
    store = Store()
    person = store.create(Person, name="Alice")
    acceptor = Acceptor.from_options(address, reject_if="blank_address")

    print("=== Resource Assignment ===\n")

    print("1. Blank address is rejected:")
    for_resource(acceptor, person).assign({"street": ""})
    print(f"   Address: {address.get(person)}\n")

    print("2. New address is built:")
    for_resource(acceptor, person).assign({"street": "123 Main St"})
    person.save()
    home = address.get(person)
    print(f"   Address #{home.id}: {home.street}\n")

    print("3. Matching key updates the address:")
    for_resource(acceptor, person).assign({"id": home.id, "street": "9 Elm St"})
    print(f"   Address #{home.id}: {home.street}\n")

    print("4. Unsaved changes block nested updates:")
    home.street = "unsaved"
    try:
        for_resource(acceptor, person).assign({"id": home.id, "street": "1 Oak St"})
    except UpdateConflictError as e:
        print(f"   {e}\n")


if __name__ == "__main__":
    main()
