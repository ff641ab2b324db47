"""
operations.py
-------------
The demonstration operations, one per basic document-database task.

Each operation logs what happened and returns the result. Errors are logged
and the operation returns None without retrying or re-raising.
"""

from typing import Any

from pymongo.errors import PyMongoError

from .models import Person
from .typing import ValidationError, get_field_name
from .utilities.logger import get_logger
from .utilities.setup_error import SetupError

# Errors an operation logs and stops on
OPERATION_ERRORS = (PyMongoError, ValueError, TypeError, ValidationError, SetupError)

DEFAULT_PEOPLE: list[dict[str, Any]] = [
    {"name": "Mary", "age": 25, "favorite_foods": ["Rice", "Fish"]},
    {"name": "John", "age": 20, "favorite_foods": ["Burger", "Fries"]},
    {"name": "Lucy", "age": 30, "favorite_foods": ["Pasta", "Salad"]},
]
FOOD_TO_ADD = "Hamburger"
AGE_TO_SET = 20


def create_and_save_person() -> Person | None:
    """
    Create one person and save it.

    Returns:
        The saved Person, or None on error.
    """
    try:
        person = Person(name="Hellen", age=22, favorite_foods=["Pizza", "Burger"])
        person.db_insert_self()
    except OPERATION_ERRORS as e:
        get_logger().error(f"Failed to save person: {e}")
        return None
    get_logger().info(f"Person saved successfully: {person!r}")
    return person


def create_many_people(array_of_people: list[dict[str, Any]] | None = None) -> list[Person] | None:
    """
    Insert several people at once.

    Args:
        array_of_people: Person fields for each record. Defaults to Mary, John and Lucy.

    Returns:
        The inserted people, or None on error.
    """
    if array_of_people is None:
        array_of_people = DEFAULT_PEOPLE
    try:
        people = Person.db_insert_many([Person(**fields) for fields in array_of_people])
    except OPERATION_ERRORS as e:
        get_logger().error(f"Failed to add people: {e}")
        return None
    get_logger().info(f"Many people added: {people!r}")
    return people


def find_people_by_name(person_name: str) -> list[Person] | None:
    """Find everyone with the given name."""
    try:
        people = Person.db_find_many({get_field_name(Person.name): person_name})
    except OPERATION_ERRORS as e:
        get_logger().error(f"Failed to find people named {person_name}: {e}")
        return None
    get_logger().info(f"People named {person_name}: {people!r}")
    return people


def find_one_by_food(food: str) -> Person | None:
    """Find one person who has the food among their favorite foods."""
    try:
        person = Person.db_find_one({get_field_name(Person.favorite_foods): food})
    except OPERATION_ERRORS as e:
        get_logger().error(f"Failed to find a person who likes {food}: {e}")
        return None
    get_logger().info(f"Person who likes {food}: {person!r}")
    return person


def find_person_by_id(person_id: str) -> Person | None:
    try:
        person = Person.db_find_by_id(person_id)
    except OPERATION_ERRORS as e:
        get_logger().error(f"Failed to find person {person_id}: {e}")
        return None
    get_logger().info(f"Person found by ID: {person!r}")
    return person


def find_edit_then_save(person_id: str) -> Person | None:
    """
    Load a person, add a favorite food in memory, then save the whole document back.

    Returns:
        The updated Person, or None if the person doesn't exist or on error.
    """
    try:
        person = Person.db_find_by_id(person_id)
        if person is None:
            get_logger().warning(f"Person not found: {person_id}")
            return None

        person.favorite_foods.append(FOOD_TO_ADD)
        person.db_update_self()
    except OPERATION_ERRORS as e:
        get_logger().error(f"Failed to update person {person_id}: {e}")
        return None
    get_logger().info(f"Person updated successfully: {person!r}")
    return person


def find_and_update(person_name: str) -> Person | None:
    """
    Set the age of the first person with the given name in a single atomic update.

    Returns:
        The person as stored after the update, or None if nobody matched or on error.
    """
    try:
        person = Person.db_find_one_and_update(
            {get_field_name(Person.name): person_name},
            {get_field_name(Person.age): AGE_TO_SET},
            return_after_update=True
        )
    except OPERATION_ERRORS as e:
        get_logger().error(f"Failed to update person named {person_name}: {e}")
        return None
    get_logger().info(f"Updated person: {person!r}")
    return person


def remove_by_id(person_id: str) -> Person | None:
    """
    Delete one person by id.

    Returns:
        The deleted Person, or None if there was nobody to delete or on error.
    """
    try:
        person = Person.db_find_by_id_and_delete(person_id)
    except OPERATION_ERRORS as e:
        get_logger().error(f"Failed to delete person {person_id}: {e}")
        return None
    get_logger().info(f"Person deleted successfully: {person!r}")
    return person


def remove_many_people(name: str = "Mary") -> int | None:
    """
    Delete everyone with the given name.

    Returns:
        The number of deleted people, or None on error.
    """
    try:
        deleted_count = Person.db_delete_many({get_field_name(Person.name): name})
    except OPERATION_ERRORS as e:
        get_logger().error(f"Failed to delete people named {name}: {e}")
        return None
    get_logger().info(f"All people named {name} deleted: {deleted_count} removed")
    return deleted_count


def chain_search(food: str = "burritos") -> list[Person] | None:
    """
    Find people who like the food, sorted by name, at most two, without their age.

    The returned people are partial: their age is UNDEFINED and they can't be saved.
    """
    try:
        people = (
            Person.query({get_field_name(Person.favorite_foods): food})
            .sort(get_field_name(Person.name))
            .limit(2)
            .select(f"-{get_field_name(Person.age)}")
            .exec()
        )
    except OPERATION_ERRORS as e:
        get_logger().error(f"Chained search for {food} failed: {e}")
        return None
    get_logger().info(f"Chained search results: {people!r}")
    return people
