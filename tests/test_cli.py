import logging

import mongomock
import pytest
from pymongo.errors import ServerSelectionTimeoutError

from mongo_people import cli
from mongo_people.document import mongo_db
from mongo_people.models import Person
from mongo_people.utilities.logger import logger


@pytest.fixture(autouse=True)
def restore_logger():
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_command_is_required():
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == 2


def test_unknown_log_level_is_rejected():
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--log-level", "loud", "chain-search"])
    assert exc_info.value.code == 2


def test_create_and_find(mongo_handle, capsys):
    assert cli.main(["create-many-people"]) == 0
    assert cli.main(["--log-level", "debug", "find-people-by-name", "Mary"]) == 0

    out = capsys.readouterr().out
    assert "MongoDB connected successfully" in out
    assert "Many people added" in out
    assert "People named Mary" in out
    assert "Database Usage Logging" in out


def test_update_and_remove_by_id(mongo_handle):
    person = Person(name="Hellen", favorite_foods=["Pizza"]).db_insert_self()

    assert cli.main(["find-edit-then-save", person._id]) == 0
    assert cli.main(["find-and-update", "Hellen"]) == 0

    stored = Person.db_require_one_by_id(person._id)
    assert stored.favorite_foods == ["Pizza", "Hamburger"]
    assert stored.age == 20

    assert cli.main(["remove-by-id", person._id]) == 0
    assert Person.db_find_by_id(person._id) is None


def test_remove_many_people_with_name(mongo_handle):
    Person.db_insert_many([Person("Ann"), Person("Ann"), Person("Bob")])

    assert cli.main(["remove-many-people", "--name", "Ann"]) == 0
    assert Person.db_count_documents() == 1


def test_missing_uri_exits_with_error(monkeypatch, capsys):
    mongo_db.close_mongo_db()
    monkeypatch.delenv("MONGO_URI", raising=False)

    assert cli.main(["chain-search"]) == 1
    assert "MongoDB connection error: Please set MONGO_URI" in capsys.readouterr().out


def test_unreachable_server_exits_with_error(monkeypatch, capsys):
    def unreachable():
        raise ServerSelectionTimeoutError("no servers found")

    monkeypatch.setattr(cli, "ping_mongo_db", unreachable)

    assert cli.main(["find-one-by-food", "Pizza"]) == 1
    assert "MongoDB connection error: no servers found" in capsys.readouterr().out


def test_bad_log_level_in_environment(monkeypatch, capsys):
    monkeypatch.setenv("MONGO_PEOPLE_LOG_LEVEL", "loud")

    assert cli.main(["chain-search"]) == 1
    assert "MONGO_PEOPLE_LOG_LEVEL" in capsys.readouterr().out


def test_console_logging_is_attached_once(mongo_handle):
    cli.main(["chain-search"])
    cli.main(["chain-search"])

    console_handlers = [handler for handler in logger.handlers if getattr(handler, "_mongo_people_console", False)]
    assert len(console_handlers) == 1
    assert logger.level == logging.INFO
