from typing import TypeVar


T = TypeVar('T')

def get_all_subclasses(cls: type[T]) -> set[type[T]]:
    """Get all subclasses of a class, including indirect subclasses."""
    subclasses = set()
    for subclass in cls.__subclasses__():
        subclasses.add(subclass)
        subclasses.update(get_all_subclasses(subclass))
    return subclasses
