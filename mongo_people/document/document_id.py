from .random_id import random_id


class DocumentId(str):
	""" Used for a document's own _id field. A new random id is generated when none is given. """
	def __new__(cls, _id: str | None = None):
		if not _id:
			_id = random_id(24)
		return super().__new__(cls, _id)
