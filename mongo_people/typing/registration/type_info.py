from dataclasses import dataclass


@dataclass
class TypeInfo:
	""" Stores type information. If the type is a sequence, the element type will be stored within the sub_type field.
	For example list[str] will produce: type_ = list, sub_type = str
	"""
	type_: type
	sub_type: type | None
