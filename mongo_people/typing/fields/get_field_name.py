from typing import Any

from .field_schema import FieldSchema


def get_field_name(bsonable_field: Any) -> str:
    """ Get the name of the bsonable field, e.g. get_field_name(Person.name) -> "name". """
    if not isinstance(bsonable_field, FieldSchema):
        raise TypeError(f"Expected a FieldSchema, got {type(bsonable_field).__name__}.")
    return bsonable_field.field_name
