from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TYPE_CHECKING
from bidict import bidict

if TYPE_CHECKING:
    from ..bsonable_dataclass.bsonable_dataclass import BsonableDataclass


# Note that primitive dicts must only store other primitive types
# By placing a type here, we assert that we have defined a way to serialize and deserialize this type in primitive_to_bson and bson_to_primitive
PRIMITIVES: bidict[str, type] = bidict({
    "dict": dict,
    "datetime": datetime,
    "str": str,
    "float": float,
    "int": int,
    "bool": bool
})


@dataclass
class TypeRegistry:
    """ A registry of all types that can be stored and retrieved from MongoDb. """
    primitives: list[type]
    pseudo_primitives: list[type]

    type_id_dict: bidict[str, type]
    """ Type dictionary with all serializable types, keyed by type id. """

    abstract_bsonable_dataclass_list: list[type['BsonableDataclass']] = field(default_factory=list)
    concrete_bsonable_dataclass_list: list[type['BsonableDataclass']] = field(default_factory=list)

    @classmethod
    def initialize(cls) -> 'TypeRegistry':
        """ Primitives and pseudo-primitives are known up front. BsonableDataclasses are added by create_type_registry(). """
        from ..pseudo_primitives.default import _pseudo_primitives
        type_id_dict: bidict[str, type] = bidict(PRIMITIVES)
        type_id_dict.update({cls_.__name__: cls_ for cls_ in _pseudo_primitives})
        return TypeRegistry(
            primitives=list(PRIMITIVES.values()),
            pseudo_primitives=list(_pseudo_primitives),
            type_id_dict=type_id_dict
        )

    def type_to_type_id(self, type_: type) -> str | None:
        """ Return the type id for the type. """
        return self.type_id_dict.inverse.get(type_)

    def lookup_type_by_type_id(self, type_id: str) -> type['BsonableDataclass'] | None:
        """ Returns None if no Bsonable found with matching type id. """
        return self.type_id_dict.get(type_id)
    
    def is_primitive_cls(self, cls: type) -> bool:
        """Returns True if the class is a primitive type."""
        return cls in self.primitives # Primitive should exactly match a primitive type, not be a subclass
        
    def is_pseudo_primitive_cls(self, cls: type) -> bool:
        """Returns True if the class is a pseudo-primitive type."""
        return cls in self.pseudo_primitives
    
    def is_pseudo_primitive_instance(self, obj: Any) -> bool:
        return type(obj) in self.pseudo_primitives
