from dataclasses import dataclass
from typing import Any, Callable

from ...utilities.undefined import Undefined, UNDEFINED


ValidationFunc = Callable[[Any], None]
""" Raises a ValidationError if the value breaks a field rule. """


@dataclass
class _SchemaConfig:
    """ Do not instantiate this directly. Use SchemaConfig() instead. """
    default_value: Any | Undefined
    default_factory: Callable[[], Any] | None
    kw_only: bool
    validation_func: ValidationFunc | None

    def has_default(self) -> bool:
        return self.default_value is not UNDEFINED or self.default_factory is not None

    def get_default(self) -> Any:
        """ Factories are called on every use, so mutable defaults are never shared between objects. """
        if self.default_value is not UNDEFINED:
            return self.default_value
        if self.default_factory is not None:
            return self.default_factory()
        raise ValueError("No default value set.")


@dataclass
class _DocumentSchemaConfig(_SchemaConfig):
    allow_independent_update: bool
    """ Whether a query update ($set, $push, ...) may change this field without rewriting the whole document. """


def _check_default(default: Any, default_factory: Callable[[], Any] | None) -> None:
    if default is not UNDEFINED and default_factory is not None:
        raise ValueError("Cannot specify both default and default_factory")


# default, default_factory and kw_only are the names dataclass_transform recognizes on a field specifier.
# Both factories return 'Any' so type checkers accept them as the value of an annotated field.

def SchemaConfig(
        *,
        default: Any | Undefined = UNDEFINED,
        default_factory: Callable[[], Any] | None = None,
        kw_only: bool = False,
        validation_func: ValidationFunc | None = None
    ) -> Any:
    """ Field settings for a BsonableDataclass. BsonableDataclassMeta wraps the result into the field's FieldSchema. """
    _check_default(default, default_factory)
    return _SchemaConfig(default, default_factory, kw_only, validation_func)


def DocumentSchemaConfig(
        *,
        default: Any | Undefined = UNDEFINED,
        default_factory: Callable[[], Any] | None = None,
        kw_only: bool = False,
        allow_independent_update: bool = False,
        validation_func: ValidationFunc | None = None
    ) -> Any:
    """ Field settings for a Document. Adds allow_independent_update to SchemaConfig. """
    _check_default(default, default_factory)
    return _DocumentSchemaConfig(default, default_factory, kw_only, validation_func, allow_independent_update)
