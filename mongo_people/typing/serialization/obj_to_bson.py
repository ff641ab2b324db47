from typing import Any

from ..bsonable_dataclass.bsonable_dataclass import BsonableDataclass
from ..pseudo_primitives.default import _pseudo_primitive_to_bson
from .primitive_to_bson import primitive_to_bson
from .. import type_registry


def obj_to_bson(obj: Any) -> Any:
	"""
	Serializes a Python object into Bson.
	"""

	# Handle types from specific (complex) to general (simple)
	if isinstance(obj, BsonableDataclass):
		return obj.to_bson()
	
	# First try to catch primitives based on an exact type match. This should not allow for inheritance, and should be checked before we check pseudoprimitives, as some pseudoprimitives inherit from a primitive.
	elif type_registry.is_primitive_cls(type(obj)):
		return primitive_to_bson(obj)
	
	elif type_registry.is_pseudo_primitive_instance(obj):
		return _pseudo_primitive_to_bson(obj)
	
	elif obj is None:
		return None

	else:
		raise TypeError(f"Type {type(obj).__name__} not serializable.")
