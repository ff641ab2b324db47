from abc import ABCMeta
import inspect
from typing import Any, ClassVar, dataclass_transform, get_origin

from ..fields.schema_config import DocumentSchemaConfig, SchemaConfig, _SchemaConfig
from ..fields.field_schema import FieldSchema
from ...utilities.special_values import AUTO
from ...utilities.undefined import UNDEFINED


__bsonable_fields__ = "__bsonable_fields__"

# Dunder names are class settings (__type_id__, __collection_name__, ...), except for these document metadata fields
INCLUDE_SPECIAL_FIELDS = [
	"__version__",
	"__last_modified__"
]


@dataclass_transform(field_specifiers=(SchemaConfig, DocumentSchemaConfig), kw_only_default=False)
class BsonableDataclassMeta(ABCMeta):
	"""Turns annotated class attributes into FieldSchemas and generates a validating __init__.

	Example usage:
		class Person(Document):
			name: str
			age: int | None = None
			favorite_foods: list[str] = DocumentSchemaConfig(default_factory=list, allow_independent_update=True)

	Each FieldSchema replaces the class attribute (so Person.name can be handed to get_field_name) and is
	registered in cls.__bsonable_fields__ in declaration order, parent fields first.
	"""

	def __new__(cls, name, bases, dct):
		new_cls = super().__new__(cls, name, bases, dct)

		if getattr(new_cls, '__type_id__', None) == AUTO:
			setattr(new_cls, '__type_id__', name)

		field_schemas = _build_field_schemas(new_cls)
		for field_name, field_schema in field_schemas.items():
			setattr(new_cls, field_name, field_schema)
		setattr(new_cls, __bsonable_fields__, field_schemas)

		new_cls.__init__ = _bsonable_init
		return new_cls


def _is_field(field_name: str, field_annotation: Any) -> bool:
	if field_name.startswith("__") and field_name.endswith("__") and field_name not in INCLUDE_SPECIAL_FIELDS:
		return False
	if field_annotation is ClassVar or get_origin(field_annotation) is ClassVar:
		return False
	return True


def _build_field_schemas(new_cls: type) -> dict[str, FieldSchema]:
	from ..registration.get_type_expectation_from_type_annotation import get_type_expectation_from_type_annotation

	# Rebuild inherited fields too, so every schema names this class as its containing_cls
	annotations_dict: dict[str, Any] = {}
	for klass in reversed(new_cls.__mro__):
		annotations_dict.update(inspect.get_annotations(klass))

	field_schemas: dict[str, FieldSchema] = {}
	for field_name, field_annotation in annotations_dict.items():
		if not _is_field(field_name, field_annotation):
			continue

		type_expectation = get_type_expectation_from_type_annotation(field_annotation)

		# getattr also finds values set on parent classes, where they are already FieldSchemas
		declared = getattr(new_cls, field_name, UNDEFINED)
		if isinstance(declared, _SchemaConfig):
			field_config = declared
		elif isinstance(declared, FieldSchema):
			field_config = declared.schema_config
		elif declared is UNDEFINED:
			field_config = SchemaConfig()
		else:
			field_config = SchemaConfig(default=declared)

		if field_config.has_default() and not type_expectation._is_valid_value(field_config.get_default()):
			raise ValueError(f"Field '{field_name}' has an improperly set default value. Expected type '{type_expectation}' but specified default value of {field_config.get_default()!r}.")

		field_schemas[field_name] = FieldSchema(
			field_name=field_name,
			containing_cls=new_cls, #type: ignore
			type_expectation=type_expectation,
			configuration=field_config
		)
	return field_schemas


def _bsonable_init(self, *args, **kwargs) -> None:
	cls_name = type(self).__name__
	field_schemas: dict[str, FieldSchema] = type(self).__bsonable_fields__
	positional_names = [field_name for field_name, field_schema in field_schemas.items() if not field_schema.schema_config.kw_only]

	if len(args) > len(positional_names):
		extra_args_str = ", ".join(f"Idx {idx}: Value '{value}'" for idx, value in enumerate(args) if idx >= len(positional_names))
		raise ValueError(f"Error creating instance of '{cls_name}'. Too many positional arguments were supplied. The following positional arguments do not line up with the defined fields. {extra_args_str}")

	supplied: dict[str, Any] = {}
	for field_name, value in zip(positional_names, args):
		if field_name in kwargs:
			raise TypeError(f"Error creating instance of '{cls_name}'. Got multiple values for field '{field_name}'.")
		supplied[field_name] = value

	for field_name, field_schema in field_schemas.items():
		if field_name in supplied:
			field_value = supplied[field_name]
		elif field_name in kwargs:
			field_value = kwargs.pop(field_name)
		elif field_schema.schema_config.has_default():
			field_value = field_schema.schema_config.get_default()
		else:
			kind = "Required keyword-only field" if field_schema.schema_config.kw_only else "Field"
			raise ValueError(f"Error creating instance of '{cls_name}'. {kind} '{field_name}' was not supplied.")

		field_schema.validate_field_value(field_value)
		setattr(self, field_name, field_value)

	if kwargs:
		raise TypeError(f"Error creating instance of '{cls_name}'. Got unexpected field(s): {', '.join(kwargs)}.")

	self.__post_init__()
