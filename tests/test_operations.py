import logging

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from mongo_people import operations
from mongo_people.models import Person
from mongo_people.utilities.logger import set_logger
from mongo_people.utilities.undefined import UNDEFINED


@pytest.fixture(autouse=True)
def info_logs(caplog):
    caplog.set_level(logging.INFO, logger="mongo_people")


def test_create_and_save_person(mongo_handle, caplog):
    person = operations.create_and_save_person()

    assert person.name == "Hellen"
    assert person.age == 22
    assert person.favorite_foods == ["Pizza", "Burger"]
    assert Person.db_require_one_by_id(person._id).name == "Hellen"
    assert "Person saved successfully" in caplog.text


def test_create_many_people_defaults(mongo_handle):
    people = operations.create_many_people()

    assert [person.name for person in people] == ["Mary", "John", "Lucy"]
    assert Person.db_count_documents() == 3


def test_create_many_people_logs_invalid_people(mongo_handle, caplog):
    result = operations.create_many_people([{"name": "Ann"}, {"age": 3}])

    assert result is None
    assert "Failed to add people" in caplog.text
    assert Person.db_count_documents() == 0


def test_create_many_people_logs_unknown_fields(mongo_handle, caplog):
    result = operations.create_many_people([{"name": "Ann", "favoriteFoods": ["Pizza"]}])

    assert result is None
    assert "Failed to add people" in caplog.text
    assert Person.db_count_documents() == 0


def test_find_people_by_name(people):
    marys = operations.find_people_by_name("Mary")
    assert sorted(person.age for person in marys) == [25, 41]
    assert operations.find_people_by_name("Nobody") == []


def test_find_one_by_food(people):
    assert operations.find_one_by_food("Fries").name == "John"
    assert operations.find_one_by_food("Sushi") is None


def test_find_person_by_id(people):
    assert operations.find_person_by_id(people[2]._id).name == "Lucy"
    assert operations.find_person_by_id("missing") is None


def test_find_edit_then_save(people):
    person = operations.find_edit_then_save(people[1]._id)

    assert person.favorite_foods[-1] == "Hamburger"
    stored = Person.db_require_one_by_id(people[1]._id)
    assert stored.favorite_foods == ["Burger", "Fries", "burritos", "Hamburger"]


def test_find_edit_then_save_missing_person(mongo_handle, caplog):
    assert operations.find_edit_then_save("missing") is None
    assert "Person not found" in caplog.text


def test_find_and_update(people):
    person = operations.find_and_update("Lucy")

    assert person.age == 20
    assert Person.db_require_one_by_id(people[2]._id).age == 20
    assert operations.find_and_update("Nobody") is None


def test_remove_by_id(people):
    removed = operations.remove_by_id(people[0]._id)

    assert removed.name == "Mary"
    assert Person.db_find_by_id(people[0]._id) is None


def test_remove_many_people(people):
    assert operations.remove_many_people() == 2
    assert operations.find_people_by_name("Mary") == []
    assert operations.remove_many_people("John") == 1


def test_chain_search(people):
    found = operations.chain_search()

    assert [person.name for person in found] == ["John", "Lucy"]
    assert all(person.age is UNDEFINED for person in found)


def test_chain_search_other_food(people):
    assert [person.name for person in operations.chain_search("Rice")] == ["Mary"]


def test_errors_are_logged_and_stop_the_operation(mongo_handle, monkeypatch, caplog):
    def unreachable(*args, **kwargs):
        raise ServerSelectionTimeoutError("no servers found")

    monkeypatch.setattr(Person, "get_collection", classmethod(unreachable))

    assert operations.find_people_by_name("Mary") is None
    assert operations.remove_many_people() is None
    assert "Failed to find people named Mary: no servers found" in caplog.text
    assert "Failed to delete people named Mary" in caplog.text
    assert all(record.levelno == logging.ERROR for record in caplog.records if "Failed" in record.getMessage())


def test_missing_configuration_is_logged(monkeypatch, caplog):
    from mongo_people.document import mongo_db

    mongo_db.close_mongo_db()
    monkeypatch.delenv("MONGO_URI", raising=False)

    assert operations.create_and_save_person() is None
    assert "Please set MONGO_URI" in caplog.text


@pytest.fixture
def audit_logger():
    custom = logging.getLogger("people_audit")
    custom.setLevel(logging.INFO)
    set_logger(custom)
    yield custom
    set_logger(logging.getLogger("mongo_people"))


def test_set_logger_redirects_operation_logs(mongo_handle, audit_logger, caplog):
    operations.create_and_save_person()

    messages = [record.getMessage() for record in caplog.records if record.name == "people_audit"]
    assert any("Person saved successfully" in message for message in messages)
