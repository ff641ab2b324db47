from datetime import datetime
from typing import Any, Self
import time

from pymongo.collection import Collection
from pymongo.database import Database
from pymongo import ReturnDocument

from .document_id import DocumentId
from .document_context import DocumentContext
from .update_method import UpdateMethod
from ..typing.bsonable_dataclass.bsonable_dataclass import BsonableDataclass
from ..typing.fields.schema_config import _DocumentSchemaConfig, DocumentSchemaConfig
from ..typing.serialization.obj_to_bson import obj_to_bson
from ..typing.serialization.vars import __type_id__, __version__, __last_modified__
from ..utilities.special_values import ABSTRACT
from ..utilities.logger import get_logger

from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from .document_query import DocumentQuery
	from ..typing.fields.field_schema import FieldSchema


# Query update operators whose values can be checked before they reach the database
UPDATE_OPERATORS = ("$set", "$unset", "$push", "$addToSet", "$pull", "$pop")


"""
Validation Behavior:

Every field is validated (type expectation, then validation_func) when:
	- constructing a Document
	- saving a Document (__before_saving__ catches values that were mutated in place, e.g. list.append())
	- changing a field through a query update, if the field allows independent updates. $set checks the new value, $push and $addToSet check the added elements, and $unset is refused for required fields. Dotted paths are refused because they can't be checked.
Documents read back from the database are rebuilt through __init__, so they are validated too. Partial documents (loaded with a projection) are not.
"""

class Document(BsonableDataclass):
	""" A BsonableDataclass that can be saved to MongoDb as a document.

	Subclasses set __type_id__ and __collection_name__. Every stored document carries its __type_id__, and every class-scoped query filters on it, so several Document types can share a collection.
	Retrieved objects will have the _id from the database. Newly created objects will be assigned a randomly generated _id unless you specify one.
	"""
	# Class fields
	__type_id__ = ABSTRACT
	__collection_name__ = ABSTRACT

	@classmethod
	def get_collection_name(cls) -> str:
		if cls.__collection_name__ == ABSTRACT:
			raise ValueError(f"Collection name not defined for {cls.__name__}. __collection_name__ must be specified for concrete document classes.")
		return cls.__collection_name__

	# Instance fields
	# Setting kw_only=True allows for subclasses to add positional fields without the type checker complaining that non-default fields appear after default fields.
	_id: DocumentId = DocumentSchemaConfig(default_factory=DocumentId, kw_only=True)
	__version__: int = DocumentSchemaConfig(default=0, kw_only=True)
	""" Incremented every time the document is updated in the db. """
	__last_modified__: float | None = DocumentSchemaConfig(default=None, kw_only=True)
	""" Stores when we last wrote this document to the db. """

	@classmethod
	def get_collection(cls) -> Collection:
		""" Returns the corresponding Pymongo Collection. """
		return cls.get_db()[cls.get_collection_name()]

	@classmethod
	def get_db(cls) -> Database:
		from .mongo_db import create_mongo_db
		return create_mongo_db()

	@classmethod
	def __class_query__(cls) -> dict:
		""" This method should return a dictionary that specifies a query which should always be applied when retrieving documents of this class. """
		return { __type_id__: cls.__type_id__ }

	@classmethod
	def __class_validation__(cls, document: Self) -> Self:
		""" This method should be run against all documents before any database operations are performed.
		Return the document as is if valid. Raise an error if invalid. """
		return document

	# region: Document <> Bson
	def to_document(self) -> dict[str, Any]:
		# Validate that this object is still in a valid state
		self._validate_self()

		# Update the metadata for the document
		self.__last_modified__ = datetime.now().timestamp()

		return obj_to_bson(self)

	@classmethod
	def from_document(cls, document: Any, *, partial: bool = False) -> Self:
		if not isinstance(document, dict):
			raise ValueError(f"Expected a dict to load a {cls.__name__} from. Got {type(document).__name__}.")

		context = DocumentContext(
			document_id=document.get("_id"),
			collection_name=cls.get_collection_name()
		)

		if partial:
			obj = cls.from_bson(document, context, partial=True)
		else:
			from ..typing.serialization.bson_to_type_annotation import bson_to_type_annotation
			obj = bson_to_type_annotation(document, cls, context)
		if not isinstance(obj, cls):
			raise ValueError(f"Expected document to be deserialized into {cls.__name__}. Instead, document was deserialized into {type(obj).__name__}")
		return obj
	# endregion

	def _validate_self(self) -> None:
		"""
		Force revalidation of the instance by rebuilding it.
		"""
		type(self).from_bson(self.to_bson(), None)

	def __before_deleting__(self) -> bool:
		""" Override this if you want to add validation (like referential integrity) before deleting. """
		return True

	def __before_saving__(self, update_method: UpdateMethod) -> None:
		""" Extend this if you want to perform operations before saving. Always call super(). """
		for field_name, field_schema in type(self).__bsonable_fields__.items():
			field_schema.validate_field_value(getattr(self, field_name))

		if update_method is UpdateMethod.UPDATE:
			self.__version__ += 1

	# DB Class Methods
	@classmethod
	def db_insert_many(cls, objs: list[Self]) -> list[Self]:
		""" Insert multiple objects into the Mongo database. Returns the inserted objects. """
		if not objs:
			return []

		start_time = time.time()
		documents = []
		for obj in objs:
			if not isinstance(obj, cls):
				raise TypeError(f"Expected {cls.__name__}, but got {type(obj).__name__}")
			obj.__before_saving__(UpdateMethod.INSERT)
			documents.append(cls.__class_validation__(obj).to_document())

		cls.get_collection().insert_many(documents)
		get_logger().debug(f"Database Usage Logging: Inserted {len(documents)} documents of type '{cls.__name__}' in {(time.time() - start_time):.3f} seconds")
		return list(objs)

	# Retrieval
	@classmethod
	def db_find_one(cls, query: dict | None = None) -> Self | None:
		""" Query the database and return the first matching document as a Python object. Returns None if there are no matching documents. """
		start_time = time.time()

		if query is None:
			query = {}

		document = cls.get_collection().find_one(cls.__class_query__() | query)

		get_logger().debug(f"Database Usage Logging: Retrieved document of type '{cls.__name__}' for query: {query} in {(time.time() - start_time):.3f} seconds")

		if not document:
			return None
		return cls.__class_validation__(cls.from_document(document))

	@classmethod
	def db_require_one(cls, query: dict | None = None) -> Self:
		""" Query the database and return the first matching document as a Python object. Raises an error if no matching document is found. """
		obj = cls.db_find_one(query)
		if obj is None:
			raise ValueError(f"No {cls.__name__} found for query: {query}")
		return obj

	@classmethod
	def db_find_by_id(cls, _id: str) -> Self | None:
		""" Return one by id, or None. """
		# Scoped by the class query too, so an id belonging to another type in a shared collection is not found
		query = cls.__class_query__() | { "_id": _id }
		document = cls.get_collection().find_one(query)
		if not document:
			return None
		return cls.__class_validation__(cls.from_document(document))

	@classmethod
	def db_require_one_by_id(cls, _id: str) -> Self:
		""" Return one by id. Raises error if not found """
		obj = cls.db_find_by_id(_id)
		if obj is None:
			raise ValueError(f"No {cls.__name__} found with _id {_id}.")
		return obj

	@classmethod
	def db_find_many(cls, query: dict | None = None, sort: dict | list[tuple[str, int]] | None = None, limit: int | None = None, skip: int | None = None, projection: dict[str, int] | None = None) -> list[Self]:
		""" Query the database and return all matching documents as Python objects.
		With a projection, the returned objects are partial: omitted fields are UNDEFINED and the objects can't be saved. """
		start_time = time.time()

		if query is None:
			query = {}
		if projection is not None:
			projection = _keep_type_id(projection)

		cursor = cls.get_collection().find(cls.__class_query__() | query, projection)
		if sort:
			cursor = cursor.sort(list(sort.items()) if isinstance(sort, dict) else list(sort))
		if skip:
			cursor = cursor.skip(skip)
		if limit:
			cursor = cursor.limit(limit)

		objs: list[Self] = []
		for document in cursor:
			obj = cls.from_document(document, partial=projection is not None)
			objs.append(cls.__class_validation__(obj))

		get_logger().debug(f"Database Usage Logging: Retrieved {len(objs)} documents of type '{cls.__name__}' for query: {query} in {(time.time() - start_time):.3f} seconds")
		return objs

	@classmethod
	def query(cls, filter: dict | None = None) -> 'DocumentQuery[Self]':
		""" Start a chainable query, e.g. Person.query({"name": "Mary"}).sort("age").limit(2).exec() """
		from .document_query import DocumentQuery
		return DocumentQuery(cls, filter)

	@classmethod
	def db_count_documents(cls, query: dict | None = None) -> int:
		""" Return the total number of documents that match the query. """
		return cls.get_collection().count_documents(cls.__class_query__() | (query or {}))

	# Updates
	@classmethod
	def db_find_one_and_update(cls, filter: dict, update: dict, return_after_update: bool = True) -> Self | None:
		""" Find a single document and update it, returning either the original or the updated document. Returns None if nothing matched.
		An update without operators is treated as a $set, so {"age": 20} means {"$set": {"age": 20}}. """
		return_option = ReturnDocument.AFTER if return_after_update else ReturnDocument.BEFORE

		document = cls.get_collection().find_one_and_update(
			filter=cls.__class_query__() | filter,
			update=cls._prepare_update(update),
			return_document=return_option
		)

		if document:
			return cls.__class_validation__(cls.from_document(document))
		return None

	@classmethod
	def _prepare_update(cls, update: dict[str, Any]) -> dict[str, Any]:
		""" Validates a query update against the field schemas and adds the document metadata updates. """
		if not update:
			raise ValueError("Update must not be empty.")

		operator_keys = [key for key in update if key.startswith("$")]
		if not operator_keys:
			update = {"$set": update}
		elif len(operator_keys) != len(update):
			raise ValueError(f"Update mixes operators and plain fields: {list(update)}")

		prepared: dict[str, Any] = {}
		for operator, fields in update.items():
			if operator not in UPDATE_OPERATORS:
				raise ValueError(f"Update operator '{operator}' is not supported. Use one of {', '.join(UPDATE_OPERATORS)}.")
			if not isinstance(fields, dict):
				raise ValueError(f"Expected a dict of fields for update operator '{operator}'. Got {type(fields).__name__}.")
			prepared_fields = {}
			for field_name, value in fields.items():
				if "." in field_name:
					raise ValueError(f"Dotted update path '{field_name}' is not supported. Update the whole field instead.")
				field_schema = cls.__bsonable_fields__.get(field_name)
				if field_schema is None:
					raise ValueError(f"{cls.__name__} has no field '{field_name}'.")
				if not isinstance(field_schema.schema_config, _DocumentSchemaConfig) or not field_schema.schema_config.allow_independent_update:
					raise ValueError(f"The field '{field_name}' within class '{cls.__name__}' is not independently updateable.")
				prepared_fields[field_name] = _prepare_update_value(operator, field_schema, value)
			prepared[operator] = prepared_fields

		prepared.setdefault("$set", {})[__last_modified__] = datetime.now().timestamp()
		prepared.setdefault("$inc", {})[__version__] = 1
		return prepared

	def db_insert_self(self) -> Self:
		""" Insert this object into the Mongo database.
		You may optionally specify an _id field.
		"""
		start_time = time.time()

		self.__before_saving__(UpdateMethod.INSERT)
		document = type(self).__class_validation__(self).to_document()
		type(self).get_collection().insert_one(document)

		get_logger().debug(f"Database Usage Logging: Inserted document of type '{type(self).__name__}' with _id: {self._id} in {(time.time() - start_time):.3f} seconds")
		return self

	def db_update_self(self) -> Self:
		""" Persist the in-memory state of this object to the database, replacing the stored document. """
		start_time = time.time()

		# Metadata changes only stick once the replace succeeds
		previous_version, previous_last_modified = self.__version__, self.__last_modified__
		try:
			self.__before_saving__(UpdateMethod.UPDATE)
			document = type(self).__class_validation__(self).to_document()
			result = type(self).get_collection().replace_one(type(self).__class_query__() | {"_id": self._id}, document)
			if result.matched_count != 1:
				raise ValueError(f"Error replacing the document. Are you sure a {type(self).__name__} with this _id {self._id} already exists?")
		except Exception:
			self.__version__, self.__last_modified__ = previous_version, previous_last_modified
			raise

		get_logger().debug(f"Database Usage Logging: Updated document of type '{type(self).__name__}' with _id: {self._id} in {(time.time() - start_time):.3f} seconds")
		return self

	# Deletion
	def db_delete_self(self) -> None:
		""" Delete this object from the Mongo database. """
		if not self.__before_deleting__():
			raise ValueError(f"Can't delete {type(self).__name__} with _id {self._id}.")

		result = type(self).get_collection().delete_one(type(self).__class_query__() | {"_id": self._id})
		if result.deleted_count != 1:
			raise ValueError(f"Error deleting the document. Are you sure a document with this _id {self._id} exists?")

	@classmethod
	def db_delete_one(cls, query: dict[str, Any]) -> None:
		""" Delete the first document matching the query. Raises an error if there is none. """
		obj = cls.db_find_one(query)
		if obj is None:
			raise ValueError("Error deleting the document. Are you sure a document matching this query exists?")
		obj.db_delete_self()

	@classmethod
	def db_find_by_id_and_delete(cls, _id: str) -> Self | None:
		""" Delete one document by id, returning the deleted document. Returns None if there was nothing to delete. """
		obj = cls.db_find_by_id(_id)
		if obj is None:
			return None
		if not obj.__before_deleting__():
			raise ValueError(f"Can't delete {cls.__name__} with _id {_id}.")

		document = cls.get_collection().find_one_and_delete(cls.__class_query__() | {"_id": _id})
		if not document:
			return None
		return cls.__class_validation__(cls.from_document(document))

	@classmethod
	def db_delete_many(cls, query: dict[str, Any]) -> int:
		""" Delete all objects matching the query from the Mongo database. Returns the number of deleted documents. """
		result = cls.get_collection().delete_many(cls.__class_query__() | query)
		get_logger().debug(f"Database Usage Logging: Deleted {result.deleted_count} documents of type '{cls.__name__}' for query: {query}")
		return result.deleted_count


def _keep_type_id(projection: dict[str, int]) -> dict[str, int]:
	""" Inclusion projections must still return __type_id__ so that the document's type can be recognized. """
	included = [value for key, value in projection.items() if key != "_id" and value]
	if included and __type_id__ not in projection:
		return projection | {__type_id__: 1}
	return projection


def _prepare_update_value(operator: str, field_schema: 'FieldSchema', value: Any) -> Any:
	""" Checks one field of a query update and converts its value to bson. Raises ValueError (or ValidationError) before anything is written.
	Array operators check the added elements on their own, so field rules must hold element by element. """
	field_name = field_schema.field_name
	field_type = field_schema.type_expectation.type_info.type_

	if operator == "$set":
		field_schema.validate_field_value(value)
		return obj_to_bson(value)

	if operator == "$unset":
		if not field_schema.schema_config.has_default():
			raise ValueError(f"Can't unset the required field '{field_name}'.")
		return ""

	if field_type not in (list, tuple):
		raise ValueError(f"Update operator '{operator}' only applies to list fields. '{field_name}' is a {field_schema.type_expectation}.")

	if operator in ("$push", "$addToSet"):
		if isinstance(value, dict):
			if set(value) != {"$each"} or not isinstance(value["$each"], list):
				raise ValueError(f"'{operator}' on '{field_name}' accepts a single element or {{'$each': [...]}}. Got {value!r}.")
			elements = value["$each"]
			field_schema.validate_field_value(field_type(elements))
			return {"$each": obj_to_bson(elements)}
		field_schema.validate_field_value(field_type([value]))
		return obj_to_bson(value)

	if operator == "$pop":
		if value not in (1, -1) or isinstance(value, bool):
			raise ValueError(f"'$pop' on '{field_name}' must be 1 or -1. Got {value!r}.")
		return value

	# $pull only removes elements, so its condition is passed through as given
	return value
