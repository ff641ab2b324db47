"""Command line entrypoint. Runs one demonstration operation per invocation."""

import argparse

from pymongo.errors import PyMongoError

from . import config, operations
from .document.mongo_db import close_mongo_db, ping_mongo_db
from .utilities.logger import configure_console_logging, get_logger
from .utilities.setup_error import SetupError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mongo-people",
        description="Basic MongoDB operations on a Person collection. Pick one operation per run."
    )
    parser.add_argument("--log-level", choices=config.LOG_LEVELS, type=str.upper, default=None,
                        help="Console log level (default: MONGO_PEOPLE_LOG_LEVEL or INFO).")
    subparsers = parser.add_subparsers(dest="command", required=True, metavar="<command>")

    sub = subparsers.add_parser("create-and-save-person", help="Save one person (Hellen).")
    sub.set_defaults(run=lambda args: operations.create_and_save_person())

    sub = subparsers.add_parser("create-many-people", help="Insert Mary, John and Lucy.")
    sub.set_defaults(run=lambda args: operations.create_many_people())

    sub = subparsers.add_parser("find-people-by-name", help="Find everyone with a name.")
    sub.add_argument("name")
    sub.set_defaults(run=lambda args: operations.find_people_by_name(args.name))

    sub = subparsers.add_parser("find-one-by-food", help="Find one person who likes a food.")
    sub.add_argument("food")
    sub.set_defaults(run=lambda args: operations.find_one_by_food(args.food))

    sub = subparsers.add_parser("find-person-by-id", help="Find a person by _id.")
    sub.add_argument("person_id", metavar="id")
    sub.set_defaults(run=lambda args: operations.find_person_by_id(args.person_id))

    sub = subparsers.add_parser("find-edit-then-save", help=f"Add {operations.FOOD_TO_ADD} to a person's favorite foods and save.")
    sub.add_argument("person_id", metavar="id")
    sub.set_defaults(run=lambda args: operations.find_edit_then_save(args.person_id))

    sub = subparsers.add_parser("find-and-update", help=f"Set the age of the first person with a name to {operations.AGE_TO_SET}.")
    sub.add_argument("name")
    sub.set_defaults(run=lambda args: operations.find_and_update(args.name))

    sub = subparsers.add_parser("remove-by-id", help="Delete a person by _id.")
    sub.add_argument("person_id", metavar="id")
    sub.set_defaults(run=lambda args: operations.remove_by_id(args.person_id))

    sub = subparsers.add_parser("remove-many-people", help="Delete everyone with a name.")
    sub.add_argument("--name", default="Mary")
    sub.set_defaults(run=lambda args: operations.remove_many_people(args.name))

    sub = subparsers.add_parser("chain-search", help="People who like a food, sorted by name, at most 2, age hidden.")
    sub.add_argument("--food", default="burritos")
    sub.set_defaults(run=lambda args: operations.chain_search(args.food))

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Returns:
        0 once the operation has run (its own errors are logged), 1 if setup or the connection failed.
    """
    args = build_parser().parse_args(argv)

    try:
        configure_console_logging(args.log_level or config.get_log_level())
    except SetupError as e:
        configure_console_logging()
        get_logger().error(str(e))
        return 1

    try:
        ping_mongo_db()
    except (SetupError, PyMongoError) as e:
        get_logger().error(f"MongoDB connection error: {e}")
        close_mongo_db()
        return 1
    get_logger().info("MongoDB connected successfully")

    try:
        args.run(args)
    finally:
        close_mongo_db()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
