from typing import Any

from ..bsonable_dataclass.bsonable_dataclass import BsonableDataclass
from ..pseudo_primitives.default import _bson_to_pseudo_primitive
from .bson_to_primitive import bson_to_primitive
from .. import type_registry
from ...document.document_context import DocumentContext
from ..registration.type_expectation import TypeExpectation


def bson_to_type_expectation(bson: Any, type_expectation: TypeExpectation, document_context: DocumentContext | None):
	""" Deserializes a Bson value into the specified type expectation. """
	
	# Handle valid null cases
	if bson is None:
		if type_expectation.is_nullable:
			return None
		else:
			raise ValueError(f"Received None for type expectation '{type_expectation}' which is not nullable.\n{document_context}")

	expected_type = type_expectation.type_info.type_

	if isinstance(expected_type, type) and issubclass(expected_type, BsonableDataclass):
		return expected_type.from_bson(bson, document_context)
	
	# First try to catch primitives based on an exact type match. This should not allow for inheritance, and should be checked before we check pseudoprimitives, as some pseudoprimitives may inherit from a primitive.
	elif type_registry.is_primitive_cls(expected_type):
		return bson_to_primitive(bson, type_expectation.type_info, document_context)
	
	elif type_registry.is_pseudo_primitive_cls(expected_type):
		return _bson_to_pseudo_primitive(bson, type_expectation.type_info, document_context)

	else:
		raise ValueError(f"Unable to deserialize unregistered expected type {expected_type}.\n{document_context}")
