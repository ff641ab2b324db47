from dataclasses import dataclass
from typing import Any

from .type_info import TypeInfo
from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from ...document.document_context import DocumentContext


@dataclass
class TypeExpectation:
	type_info: TypeInfo
	is_nullable: bool

	def __str__(self) -> str:
		output = self.type_info.type_.__name__
		if self.type_info.sub_type is not None:
			output += f"[{self.type_info.sub_type.__name__}]"
		if self.is_nullable:
			output += " | None"
		return output

	def validate(self, value: Any, document_context: 'DocumentContext | None'):
		""" Raises an error if the provided value does not match this TypeExpectation. """
		if not self._is_valid_value(value):
			raise ValueError(f"Value {value!r} is not valid according to this type expectation '{self}'.\n{document_context}")
	
	def _is_valid_value(self, value: Any) -> bool:
		""" Validate that a value is consistent with this TypeExpectation. """
		if value is None:
			return self.is_nullable
		
		if not _is_instance(value, self.type_info.type_):
			return False
		
		# Sequences must also hold elements of the sub type
		sub_type = self.type_info.sub_type
		if sub_type is not None and self.type_info.type_ in (list, tuple):
			return all(_is_instance(element, sub_type) for element in value)
		
		return True


def _is_instance(value: Any, type_: type) -> bool:
	# bool is a subclass of int, but an age of True is not an int as far as documents are concerned
	if type_ in (int, float) and isinstance(value, bool):
		return False
	if type_ is float and isinstance(value, int):
		return True
	return isinstance(value, type_)
