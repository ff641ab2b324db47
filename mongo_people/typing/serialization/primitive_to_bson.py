from datetime import datetime
from typing import Any


def primitive_to_bson(obj: Any) -> Any:
	""" Converts a primitive object to its BSON representation. """
	if type(obj) is dict:
		from .obj_to_bson import obj_to_bson
		return {_validate_key(key): obj_to_bson(value) for key, value in obj.items()}
	elif type(obj) is datetime:
		return obj # The Python mongo driver will automatically handle datetimes, so you should pass them as datetime objects
	elif type(obj) in (str, float, int, bool):
		return obj
	else:
		raise TypeError(f"Unable to convert invalid primitive type {type(obj).__name__} to BSON.")


def _validate_key(key: Any) -> str:
	if not isinstance(key, str):
		raise TypeError(f"Dict keys must be strings to be stored in BSON. Got {type(key).__name__}.")
	return key
