from ..document.document import Document
from ..typing import DocumentSchemaConfig, ValidationError


def validate_name(name: str) -> None:
	if not name.strip():
		raise ValidationError("A person's name must not be blank.")

def validate_age(age: int | None) -> None:
	if age is not None and age < 0:
		raise ValidationError(f"A person's age must not be negative. Got {age}.")

def validate_favorite_foods(favorite_foods: list[str]) -> None:
	if any(not food.strip() for food in favorite_foods):
		raise ValidationError("Favorite foods must not be blank.")


class Person(Document):
	""" A person and the foods they like. Stored in the 'people' collection. """
	__type_id__ = "Person"
	__collection_name__ = "people"

	name: str = DocumentSchemaConfig(allow_independent_update=True, validation_func=validate_name)
	age: int | None = DocumentSchemaConfig(default=None, allow_independent_update=True, validation_func=validate_age)
	favorite_foods: list[str] = DocumentSchemaConfig(default_factory=list, allow_independent_update=True, validation_func=validate_favorite_foods)
