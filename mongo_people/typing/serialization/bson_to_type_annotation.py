from types import UnionType
from typing import Any

from ...document.document_context import DocumentContext
from ..registration.get_type_expectation_from_type_annotation import get_type_expectation_from_type_annotation


def bson_to_type_annotation(bson: Any, type_annotation: type | UnionType, document_context: DocumentContext | None):
	""" Deserializes a Bson value into a Python object, using the type annotation to interpret it. """
	from .bson_to_type_expectation import bson_to_type_expectation

	annotated_type_expectation = get_type_expectation_from_type_annotation(type_annotation)
	return bson_to_type_expectation(bson, annotated_type_expectation, document_context)
