from typing import Any

from ...document.document_context import DocumentContext
from ...document.document_id import DocumentId
from ..registration.type_info import TypeInfo


"""
Default pseudoprimitives and serialization functions.
"""

_pseudo_primitives: list[type] = [
	# Sequences
	list, tuple,
	
	# Strings
	DocumentId,
]

def _pseudo_primitive_to_bson(obj: Any):
	""" Converts a PseudoPrimitive object to its BSON representation. 
	NOTE: We compare exact types instead of using isinstance() because we want to know *exactly* what types we're serializing (no subclasses allowed). """
	from ..serialization.obj_to_bson import obj_to_bson

	if type(obj) in (tuple, list):
		return [obj_to_bson(item) for item in obj]
	elif type(obj) is DocumentId:
		return str(obj)
	else:
		raise TypeError(f"Unable to convert invalid pseudo-primitive type {type(obj).__name__} to BSON.")
	
def _bson_to_pseudo_primitive(bson: Any, expected_type_info: TypeInfo, document_context: DocumentContext | None) -> Any:
	""" Deserializes a BSON value into a PseudoPrimitive object. """
	
	if expected_type_info.type_ in (tuple, list):
		from ..serialization.bson_to_type_annotation import bson_to_type_annotation
		
		if expected_type_info.sub_type is None:
			raise ValueError(f"Sequences should have a subtype specified.\n\n[Document Context]\n{document_context}")
		if not isinstance(bson, list):
			raise ValueError(f"Expected a list for field of type {expected_type_info.type_.__name__}. Instead received {type(bson).__name__}.\n\n[Document Context]\n{document_context}")
		
		obj_list = []
		for idx, element in enumerate(bson):
			new_document_context = document_context.subidx(idx) if document_context else None
			obj_element = bson_to_type_annotation(element, expected_type_info.sub_type, new_document_context)
			obj_list.append(obj_element)
		
		return expected_type_info.type_(obj_list)

	elif expected_type_info.type_ is DocumentId:
		if not isinstance(bson, str): 
			raise ValueError(f"Expected a str for field of type {expected_type_info.type_.__name__}. Instead received {type(bson).__name__}.\n\n[Document Context]\n{document_context}")
		return DocumentId(bson)
	
	else:
		raise ValueError(f"Unable to deserialize invalid pseudo-primitive type {expected_type_info.type_}.\n\n[Document Context]\n{document_context}")
