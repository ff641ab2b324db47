import pytest
from pymongo import ASCENDING, DESCENDING

from mongo_people.document.document_query import DocumentQuery, parse_projection_spec, parse_sort_spec
from mongo_people.models import Person
from mongo_people.utilities.undefined import UNDEFINED


def test_parse_sort_spec_string_forms():
    assert parse_sort_spec("name") == [("name", ASCENDING)]
    assert parse_sort_spec("-age +name") == [("age", DESCENDING), ("name", ASCENDING)]
    assert parse_sort_spec({"age": -1}) == [("age", DESCENDING)]
    assert parse_sort_spec([("name", 1)]) == [("name", ASCENDING)]


def test_parse_sort_spec_rejects_bad_directions():
    with pytest.raises(ValueError):
        parse_sort_spec({"age": 2})
    with pytest.raises(ValueError):
        parse_sort_spec("-")


def test_parse_projection_spec():
    assert parse_projection_spec("-age") == {"age": 0}
    assert parse_projection_spec("name age") == {"name": 1, "age": 1}
    assert parse_projection_spec(["name"]) == {"name": 1}
    assert parse_projection_spec("name -_id") == {"name": 1, "_id": 0}
    assert parse_projection_spec({"age": False}) == {"age": 0}


def test_parse_projection_spec_rejects_mixed_projection():
    with pytest.raises(ValueError, match="mixes inclusion and exclusion"):
        parse_projection_spec("name -age")


def test_chaining_returns_the_same_query():
    query = Person.query({"name": "Mary"})
    assert isinstance(query, DocumentQuery)
    assert query.sort("age").limit(2).skip(1).select("-age") is query


def test_limit_and_skip_must_not_be_negative():
    with pytest.raises(ValueError):
        Person.query().limit(-1)
    with pytest.raises(ValueError):
        Person.query().skip(-1)


def test_sort_limit_select_exec(people):
    found = Person.query({"favorite_foods": "burritos"}).sort("name").limit(2).select("-age").exec()

    assert [person.name for person in found] == ["John", "Lucy"]
    assert all(person.age is UNDEFINED for person in found)
    assert all(person.is_partial() for person in found)


def test_later_sort_replaces_earlier_sort(people):
    found = Person.query().sort("name").sort("-age").exec()
    assert [person.age for person in found] == [41, 30, 25, 20]


def test_limit_zero_means_no_limit(people):
    assert len(Person.query().limit(0).exec()) == 4


def test_where_adds_conditions(people):
    query = Person.query({"name": "Mary"}).where({"age": {"$gt": 30}})
    assert [person.age for person in query] == [41]


def test_first_and_count(people):
    query = Person.query({"favorite_foods": "burritos"}).sort("-age").limit(5)
    oldest = query.first()

    assert oldest.name == "Mary"
    assert oldest.age == 41
    assert query.count() == 3
    assert Person.query({"name": "Nobody"}).first() is None


def test_projected_results_refuse_to_be_saved(people, mongo_handle):
    lucy = Person.query({"name": "Lucy"}).select("-age").first()
    assert lucy.is_partial()

    with pytest.raises(ValueError):
        lucy.db_update_self()
    assert lucy.__version__ == 0
    with pytest.raises(ValueError):
        lucy.db_insert_self()

    assert mongo_handle["people"].find_one({"_id": lucy._id})["age"] == 30
    assert Person.db_count_documents() == 4
