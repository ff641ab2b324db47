"""
Type Registration Module

This module provides a centralized type registry for managing all serializable types
in the application. The module maintains a stateful `type_registry` object.
"""

from .registration.type_registry import TypeRegistry

# Module-level stateful variable - BsonableDataclasses are added when create_type_registry() is called
type_registry: TypeRegistry = TypeRegistry.initialize()

# Expose these at the module level
from .registration.create_type_registry import create_type_registry
from .fields.get_field_name import get_field_name
from .fields.schema_config import SchemaConfig, DocumentSchemaConfig
from .bsonable_dataclass.bsonable_dataclass import BsonableDataclass
from ..utilities.validation_error import ValidationError
