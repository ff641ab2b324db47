from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .schema_config import _DocumentSchemaConfig, _SchemaConfig
if TYPE_CHECKING:
    from ..bsonable_dataclass.bsonable_dataclass import BsonableDataclass
    from ..registration.type_expectation import TypeExpectation


class FieldSchema:
    """ Stores the schema for the field: its name, owner, expected type and configuration. """
    def __init__(self, 
                 field_name: str,
                 containing_cls: type[BsonableDataclass],
                 type_expectation: TypeExpectation,
                 configuration: _SchemaConfig | _DocumentSchemaConfig
                ) -> None:
        self.field_name = field_name
        self.containing_cls = containing_cls
        self.type_expectation = type_expectation
        self.schema_config = configuration

    def __repr__(self) -> str:
        return f"FieldSchema({self.containing_cls.__name__}.{self.field_name}: {self.type_expectation})"

    def validate_field_value(self, field_value: Any) -> None:
        """ Validates the field value first against the type expectation, then against the validation func, if any. 
        The type check raises a ValueError. The validation func should raise a ValidationError with a readable message. """
        
        # Validate against type expectation
        self.type_expectation.validate(field_value, None)
        
        # Validate against validation func
        if self.schema_config.validation_func is not None:
            self.schema_config.validation_func(field_value)
