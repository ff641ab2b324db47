from typing import Any, Generic, Iterator, Self, TypeVar

from pymongo import ASCENDING, DESCENDING

from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from .document import Document


T = TypeVar('T', bound='Document')

SortSpec = str | dict[str, int] | list[tuple[str, int]]
ProjectionSpec = str | dict[str, int] | list[str]


class DocumentQuery(Generic[T]):
	""" A chainable query over one Document class. Nothing touches the database until exec(), first() or count().

	Sort and select accept the short string forms too:
		Person.query({"favorite_foods": "burritos"}).sort("name").limit(2).select("-age").exec()
	"""
	def __init__(self, document_cls: type[T], filter: dict[str, Any] | None = None) -> None:
		self.document_cls = document_cls
		self.filter: dict[str, Any] = dict(filter) if filter else {}
		self._sort: list[tuple[str, int]] | None = None
		self._limit: int | None = None
		self._skip: int | None = None
		self._projection: dict[str, int] | None = None

	def __repr__(self) -> str:
		return f"DocumentQuery({self.document_cls.__name__}, filter={self.filter}, sort={self._sort}, skip={self._skip}, limit={self._limit}, projection={self._projection})"

	def where(self, filter: dict[str, Any]) -> Self:
		""" Adds conditions to the filter. Later conditions on the same field replace earlier ones. """
		self.filter.update(filter)
		return self

	def sort(self, spec: SortSpec) -> Self:
		""" Replaces the sort order. "name" sorts ascending, "-name" descending, and "-age name" by age then name. """
		self._sort = parse_sort_spec(spec)
		return self

	def limit(self, n: int) -> Self:
		""" 0 means no limit. """
		if n < 0:
			raise ValueError(f"Limit must not be negative. Got {n}.")
		self._limit = n
		return self

	def skip(self, n: int) -> Self:
		if n < 0:
			raise ValueError(f"Skip must not be negative. Got {n}.")
		self._skip = n
		return self

	def select(self, spec: ProjectionSpec) -> Self:
		""" Replaces the projection. "-age" hides age, "name age" returns only name and age (plus _id). """
		self._projection = parse_projection_spec(spec)
		return self

	def exec(self) -> list[T]:
		return self.document_cls.db_find_many(
			self.filter,
			sort=self._sort,
			limit=self._limit,
			skip=self._skip,
			projection=self._projection
		)

	def first(self) -> T | None:
		""" Runs the query with a limit of 1. Leaves this query's own limit alone. """
		objs = self.document_cls.db_find_many(
			self.filter,
			sort=self._sort,
			limit=1,
			skip=self._skip,
			projection=self._projection
		)
		return objs[0] if objs else None

	def count(self) -> int:
		""" Counts every document matching the filter, ignoring sort, skip, limit and select. """
		return self.document_cls.db_count_documents(self.filter)

	def __iter__(self) -> Iterator[T]:
		return iter(self.exec())


def parse_sort_spec(spec: SortSpec) -> list[tuple[str, int]]:
	if isinstance(spec, str):
		sort: list[tuple[str, int]] = []
		for token in spec.split():
			if token.startswith("-"):
				sort.append((token[1:], DESCENDING))
			else:
				sort.append((token.removeprefix("+"), ASCENDING))
	elif isinstance(spec, dict):
		sort = list(spec.items())
	else:
		sort = list(spec)

	for field_name, direction in sort:
		if not field_name:
			raise ValueError(f"Empty field name in sort spec {spec!r}.")
		if direction not in (ASCENDING, DESCENDING):
			raise ValueError(f"Sort direction for '{field_name}' must be 1 or -1. Got {direction!r}.")
	return sort


def parse_projection_spec(spec: ProjectionSpec) -> dict[str, int]:
	if isinstance(spec, str):
		projection: dict[str, int] = {}
		for token in spec.split():
			if token.startswith("-"):
				projection[token[1:]] = 0
			else:
				projection[token.removeprefix("+")] = 1
	elif isinstance(spec, dict):
		projection = {field_name: int(bool(value)) for field_name, value in spec.items()}
	else:
		projection = {field_name: 1 for field_name in spec}

	if any(not field_name for field_name in projection):
		raise ValueError(f"Empty field name in projection {spec!r}.")

	# _id is the only field that may be excluded from an inclusion projection
	values = {value for field_name, value in projection.items() if field_name != "_id"}
	if len(values) > 1:
		raise ValueError(f"Projection {spec!r} mixes inclusion and exclusion.")
	return projection
