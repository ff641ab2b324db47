from types import UnionType

from .get_type_info import get_type_info_list
from .type_expectation import TypeExpectation


def get_type_expectation_from_type_annotation(type_annotation: type | UnionType) -> TypeExpectation:
	"""	### Interpret based on type annotations, including nullable types and types with sub-types. ###
	Only `X` and `X | None` are supported. """

	expected_type_info_list = get_type_info_list(type_annotation)
	is_nullable = False
	
	# If there's only one type option, the expected_type should be that option
	if len(expected_type_info_list) == 1:
		expected_type_info = expected_type_info_list[0]
	
	# If there's two type options, check to make sure the Union type is just a nullable type
	elif len(expected_type_info_list) == 2:
		non_null_type_infos = [type_info for type_info in expected_type_info_list if type_info.type_ is not type(None)]
		if len(non_null_type_infos) != 1:
			raise ValueError(f"The only reason we should have multiple annotated types is if one is None. Got '{type_annotation}'.")
		is_nullable = True
		expected_type_info = non_null_type_infos[0]
	
	# We can't handle union types with three types.
	else:
		raise NotImplementedError(f"We don't handle annotations with more than two types. Got '{type_annotation}'.")
	
	return TypeExpectation(
		type_info=expected_type_info,
		is_nullable=is_nullable
	)
