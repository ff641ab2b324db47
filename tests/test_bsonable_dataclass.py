import pytest

from mongo_people.document.document_id import DocumentId
from mongo_people.models import Person
from mongo_people.typing import ValidationError, get_field_name, type_registry
from mongo_people.typing.fields.field_schema import FieldSchema
from mongo_people.typing.serialization.vars import __type_id__
from mongo_people.utilities.undefined import UNDEFINED


def test_fields_are_registered_in_declaration_order():
    assert list(Person.__bsonable_fields__) == [
        "_id", "__version__", "__last_modified__", "name", "age", "favorite_foods"
    ]
    assert isinstance(Person.name, FieldSchema)
    assert Person.name.containing_cls is Person
    assert get_field_name(Person.favorite_foods) == "favorite_foods"


def test_person_is_registered_by_type_id():
    assert type_registry.lookup_type_by_type_id("Person") is Person
    assert type_registry.type_to_type_id(Person) == "Person"


def test_defaults_are_applied():
    person = Person("Hellen")

    assert person.name == "Hellen"
    assert person.age is None
    assert person.favorite_foods == []
    assert isinstance(person._id, DocumentId)
    assert len(person._id) == 24
    assert person.__version__ == 0


def test_default_lists_are_not_shared():
    first = Person("A")
    second = Person("B")
    first.favorite_foods.append("Soup")
    assert second.favorite_foods == []


def test_positional_and_keyword_arguments():
    person = Person("Hellen", 22, favorite_foods=["Pizza"])
    assert (person.name, person.age, person.favorite_foods) == ("Hellen", 22, ["Pizza"])


def test_name_is_required():
    with pytest.raises(ValueError, match="name"):
        Person(age=3)


def test_field_types_are_checked():
    with pytest.raises(ValueError):
        Person(name=42)
    with pytest.raises(ValueError):
        Person(name="Hellen", age="22")
    with pytest.raises(ValueError):
        Person(name="Hellen", age=True)
    with pytest.raises(ValueError):
        Person(name="Hellen", favorite_foods=["Pizza", 3])


def test_field_rules_raise_validation_errors():
    with pytest.raises(ValidationError):
        Person(name="   ")
    with pytest.raises(ValidationError):
        Person(name="Hellen", age=-1)
    with pytest.raises(ValidationError):
        Person(name="Hellen", favorite_foods=[""])


def test_too_many_positional_arguments():
    with pytest.raises(ValueError, match="Too many positional arguments"):
        Person("Hellen", 22, ["Pizza"], "extra")


def test_unknown_fields_are_rejected():
    with pytest.raises(TypeError, match="unexpected field"):
        Person(name="Ann", favoriteFoods=["Pizza"])


def test_to_bson_includes_type_id_and_metadata():
    person = Person(name="Hellen", age=22, favorite_foods=["Pizza", "Burger"])
    bson = person.to_bson()

    assert bson == {
        __type_id__: "Person",
        "_id": str(person._id),
        "__version__": 0,
        "__last_modified__": None,
        "name": "Hellen",
        "age": 22,
        "favorite_foods": ["Pizza", "Burger"],
    }
    assert type(bson["_id"]) is str


def test_from_bson_restores_types_and_keeps_loose_fields():
    bson = {
        __type_id__: "Person",
        "_id": "abc",
        "__version__": 3,
        "__last_modified__": 1700000000.5,
        "name": "Mary",
        "age": 25,
        "favorite_foods": ["Rice"],
        "nickname": "M",
    }
    person = Person.from_bson(bson, None)

    assert isinstance(person._id, DocumentId)
    assert person._id == "abc"
    assert person.__version__ == 3
    assert person.nickname == "M"
    assert person.to_bson()["nickname"] == "M"


def test_from_bson_rejects_wrong_types():
    with pytest.raises(ValueError, match="not of the expected type int"):
        Person.from_bson({"_id": "abc", "name": "Mary", "age": "old"}, None)


def test_from_bson_falls_back_to_defaults_for_missing_optional_fields():
    person = Person.from_bson({__type_id__: "Person", "_id": "abc", "name": "Mary"}, None)
    assert person.age is None
    assert person.favorite_foods == []


def test_partial_objects_leave_missing_fields_undefined():
    person = Person.from_bson({__type_id__: "Person", "_id": "abc", "name": "Mary"}, None, partial=True)

    assert person.is_partial()
    assert person.age is UNDEFINED
    assert "age" not in repr(person)
    with pytest.raises(ValueError, match="projection"):
        person.to_bson()


def test_repr_shows_fields():
    person = Person(name="Hellen", age=22, _id=DocumentId("abc"))
    assert repr(person).startswith("Person(_id='abc', __version__=0, __last_modified__=None, name='Hellen', age=22")
