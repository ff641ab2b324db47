from .get_all_subclasses import get_all_subclasses
from .type_registry import TypeRegistry
from ...utilities.special_values import ABSTRACT
from ...utilities.logger import get_logger


def create_type_registry() -> None:
	""" Registers every BsonableDataclass subclass (including Documents) by __type_id__ and validates their field schemas.
	Run this after all Document classes have been imported. Running it again rebuilds the registry from scratch. """
	from ..bsonable_dataclass.bsonable_dataclass import BsonableDataclass
	from .. import type_registry
	
	get_logger().debug("Creating type registry...")
	registry = TypeRegistry.initialize()

	for bsonable_dataclass in sorted(get_all_subclasses(BsonableDataclass), key=lambda cls: cls.__qualname__):
		type_id = bsonable_dataclass.__type_id__
		
		# Add abstract classes to list
		if type_id == ABSTRACT:
			registry.abstract_bsonable_dataclass_list.append(bsonable_dataclass)
			continue

		# Ensure the type id is globally unique
		if type_id in registry.type_id_dict:
			raise ValueError(f"{bsonable_dataclass.__name__} uses a duplicate type id '{type_id}' already used by {registry.type_id_dict[type_id].__name__}!")
		registry.type_id_dict[type_id] = bsonable_dataclass
		registry.concrete_bsonable_dataclass_list.append(bsonable_dataclass)

	# Validate that all dataclass fields store a bsonable type
	for bsonable_dataclass in registry.concrete_bsonable_dataclass_list:
		for field_name, field_schema in bsonable_dataclass.__bsonable_fields__.items():
			type_info = field_schema.type_expectation.type_info
			for type_ in (type_info.type_, type_info.sub_type):
				if type_ is None:
					continue
				if registry.is_primitive_cls(type_) or registry.is_pseudo_primitive_cls(type_):
					continue
				if isinstance(type_, type) and issubclass(type_, BsonableDataclass):
					continue
				raise ValueError(f"Field '{field_name}' of '{bsonable_dataclass.__name__}' stores type '{type_}', which is not bsonable.")
	
	get_logger().debug(f"Registered abstract BsonableDataclasses: {', '.join(cls.__name__ for cls in registry.abstract_bsonable_dataclass_list)}")
	get_logger().debug(f"Registered concrete BsonableDataclasses: {', '.join(cls.__name__ for cls in registry.concrete_bsonable_dataclass_list)}")

	# Update the module-level type registry in place so that existing references see the new state
	type_registry.__dict__.update(registry.__dict__)
