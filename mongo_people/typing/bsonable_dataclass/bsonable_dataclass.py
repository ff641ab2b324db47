from abc import ABC
from typing import Any, ClassVar, Self

from .bsonable_dataclass_meta import BsonableDataclassMeta
from ..fields.field_schema import FieldSchema
from ...utilities.special_values import ABSTRACT
from ...utilities.undefined import UNDEFINED
from ..serialization.vars import __type_id__, __partial__, get_type_id
from ...utilities.logger import get_logger

from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from ...document.document_context import DocumentContext


class BsonableDataclass(ABC, metaclass=BsonableDataclassMeta):
	""" All mappable dataclasses must specify a __type_id__. """
	__bsonable_fields__: ClassVar[dict[str, FieldSchema]] # Special field that stores a dictionary mapping field names -> field schemas
	__type_id__: ClassVar[str] = ABSTRACT

	def __str__(self) -> str:
		output = f"{type(self).__name__}(\n"
		for field_name, field_value in self._iter_set_fields():
			output += f"\t{field_name}={field_value!r},\n"
		output += ")"
		return output

	def __repr__(self) -> str:
		fields_str = ", ".join(f"{field_name}={field_value!r}" for field_name, field_value in self._iter_set_fields())
		return f"{type(self).__name__}({fields_str})"

	def _iter_set_fields(self):
		""" Yields the declared fields in declaration order, then any loose fields. UNDEFINED fields are skipped. """
		for field_name in type(self).__bsonable_fields__:
			field_value = self.__dict__.get(field_name, UNDEFINED)
			if field_value is not UNDEFINED:
				yield field_name, field_value
		for field_name, field_value in self.__dict__.items():
			if field_name in type(self).__bsonable_fields__ or field_name.startswith("__"):
				continue
			yield field_name, field_value

	def __post_init__(self) -> None:
		""" By default, post init does nothing. """
		return

	def is_partial(self) -> bool:
		""" True when this object was loaded with a projection and is missing some of its fields. """
		return self.__dict__.get(__partial__, False)

	@classmethod
	def inspect_type_id(cls, bson: Any, document_context: 'DocumentContext | None') -> type['BsonableDataclass'] | None:
		""" Inspect the bson for a __type_id__. If the __type_id__ is a valid subclass of this cls, returns the type. Otherwise, returns None.
		Raises a ValueError when the bson belongs to a registered type outside this class's hierarchy, so it is never loaded (and later saved) as the wrong type. """
		from .. import type_registry

		type_id = get_type_id(bson, document_context)
		if type_id:
			bson_asserted_type = type_registry.lookup_type_by_type_id(type_id)
			if bson_asserted_type:
				if bson_asserted_type is cls:
					return None
				elif issubclass(bson_asserted_type, cls):
					return bson_asserted_type
				else:
					raise ValueError(f"Bson asserted __type_id__ '{type_id}', which is not a '{cls.__name__}'.\n{document_context}")
			else:
				get_logger().info(f"Warning: Bson asserted an unrecognized __type_id__ '{type_id}'.\n{document_context}")
		return None

	def to_bson(self) -> dict[str, Any]:
		from ..serialization.obj_to_bson import obj_to_bson
		
		# Raise error for abstract classes
		if type(self).__type_id__ == ABSTRACT:
			raise ValueError(f"Error serializing object of type '{type(self).__name__}'. Abstract classes cannot be serialized.")
		
		if self.is_partial():
			raise ValueError(f"Error serializing object of type '{type(self).__name__}'. It was loaded with a projection and is missing fields.")
		
		output = { __type_id__: type(self).__type_id__ } # Initialize the dict with __type_id__

		for field_name in type(self).__bsonable_fields__:
			value = getattr(self, field_name)
			output[field_name] = obj_to_bson(value)

		# Also serialize any additional fields that may be stored within the object beyond what is annotated
		for key, value in self.__dict__.items():
			# Skip over all keys we've already looked at
			if key in type(self).__bsonable_fields__:
				continue

			# Skip all special fields
			if key.startswith("__"):
				continue

			# Store loose fields into the result
			output[key] = obj_to_bson(value)

		return output

	@classmethod
	def from_bson(cls, bson: Any, document_context: 'DocumentContext | None', *, partial: bool = False) -> Self:
		""" Instantiate this BsonableDataclass from bson.
		If an annotated field is missing from the bson it will be set to its default. With partial=True (projected documents), missing fields are left UNDEFINED instead and the object is not validated. """
		from ..serialization.bson_to_type_expectation import bson_to_type_expectation

		if not isinstance(bson, dict):
			raise ValueError(f"Expected a dict to deserialize into {cls.__name__}. Got {type(bson).__name__}.\n{document_context}")

		# See if there is a valid subtype, if so, deserialize it into that instead of this cls.
		valid_subtype = cls.inspect_type_id(bson, document_context)
		if valid_subtype:
			return valid_subtype.from_bson(bson, document_context, partial=partial) # type: ignore

		# Raise an error when deserializing abstract classes. (Subclasses of abstract classes would have asserted a valid_type_id above and not reached this step.)
		if cls.__type_id__ == ABSTRACT:
			raise ValueError(f"Error deserializing bson into abstract class of type {cls.__name__}. In order to deserialize an abstract class, the bson itself must assert a valid subtype of the abstract class.\n{document_context}")
		
		obj_dict = {}
		
		# Look for all expected fields
		for expected_field_name, expected_field_schema in cls.__bsonable_fields__.items():
			
			# Look for this field in the following order:
			# 1. If the field name exists in the document, use that.
			# 2. If this is a partial document, leave the field undefined.
			# 3. Use a default value, if set.
			# 4. If all else fails, raise an Exception.
			if expected_field_name in bson:
				new_document_context = document_context.subpath(expected_field_name) if document_context else None
				obj_dict[expected_field_name] = bson_to_type_expectation(bson[expected_field_name], expected_field_schema.type_expectation, new_document_context)

			elif partial:
				obj_dict[expected_field_name] = UNDEFINED

			elif expected_field_schema.schema_config.has_default():
				field_default_value = expected_field_schema.schema_config.get_default()
				get_logger().warning(f"Using default value of {field_default_value!r} for {expected_field_name}.\n\n{document_context}")
				obj_dict[expected_field_name] = field_default_value

			else:
				raise ValueError(f"Error converting document to object of type {cls.__name__}. Document missing a value for field {expected_field_name}.\n\n{document_context}")
		
		# Also keep fields beyond what is expected within the type.
		# This helps with forward-compatibility when stored documents carry fields the class doesn't know about yet.
		loose_fields = {key: value for key, value in bson.items() if key not in cls.__bsonable_fields__ and key != __type_id__}

		if partial:
			# Partial objects skip __init__ so that missing required fields don't raise
			obj = cls.__new__(cls)
			for key, value in obj_dict.items():
				setattr(obj, key, value)
			setattr(obj, __partial__, True)
		else:
			obj = cls(**obj_dict)

		# __init__ only accepts declared fields
		for key, value in loose_fields.items():
			setattr(obj, key, value)
		return obj
