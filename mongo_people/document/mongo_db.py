from pymongo import MongoClient
from pymongo.database import Database

from .. import config
from ..utilities.logger import get_logger

# Module-level cache for the client and database instances
_mongo_client: MongoClient | None = None
_mongo_db: Database | None = None

def create_mongo_db() -> Database:
	""" Returns the shared Database handle, connecting on first use. Raises SetupError if MONGO_URI is not set. """
	global _mongo_client, _mongo_db
	if _mongo_db is not None:
		return _mongo_db
	
	mongo_uri = config.get_mongo_uri()
	mongo_db_name = config.get_mongo_db_name()

	# Initialize database
	mongo_client = MongoClient(mongo_uri, serverSelectionTimeoutMS=config.get_server_selection_timeout_ms())
	if mongo_db_name:
		mongo_db = mongo_client[mongo_db_name]
	else:
		mongo_db = mongo_client.get_default_database(default=config.DEFAULT_DB_NAME)
	
	get_logger().debug(f"Created MongoDB handle for database '{mongo_db.name}'.")
	_mongo_client, _mongo_db = mongo_client, mongo_db
	return _mongo_db

def ping_mongo_db() -> None:
	""" Round-trips to the server. Raises a PyMongoError if it can't be reached. """
	create_mongo_db()
	assert _mongo_client is not None
	_mongo_client.admin.command("ping")

def close_mongo_db() -> None:
	""" Close the client and forget the cached handle. The next create_mongo_db() reconnects. """
	global _mongo_client, _mongo_db
	if _mongo_client is not None:
		_mongo_client.close()
		get_logger().debug("Closed MongoDB client.")
	_mongo_client = None
	_mongo_db = None
