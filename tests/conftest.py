import mongomock
import pytest

from mongo_people.document import mongo_db
from mongo_people.models import Person


@pytest.fixture
def mongo_handle(monkeypatch):
    """An in-memory database standing in for MongoDB.

    Every connection made while the fixture is active gets the same in-memory client,
    so data survives close_mongo_db() the way it would on a real server.
    """
    client = mongomock.MongoClient()
    monkeypatch.setenv("MONGO_URI", "mongodb://localhost:27017")
    monkeypatch.setenv("MONGO_DB_NAME", "people_test")
    monkeypatch.setattr(mongo_db, "MongoClient", lambda uri, **kwargs: client)
    mongo_db.close_mongo_db()

    db = mongo_db.create_mongo_db()
    yield db
    client.drop_database(db.name)
    mongo_db.close_mongo_db()


@pytest.fixture
def people(mongo_handle):
    """Mary, John and Lucy, plus a second Mary who likes burritos."""
    return Person.db_insert_many([
        Person(name="Mary", age=25, favorite_foods=["Rice", "Fish"]),
        Person(name="John", age=20, favorite_foods=["Burger", "Fries", "burritos"]),
        Person(name="Lucy", age=30, favorite_foods=["Pasta", "burritos"]),
        Person(name="Mary", age=41, favorite_foods=["burritos"]),
    ])
