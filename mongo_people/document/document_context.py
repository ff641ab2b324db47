from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class DocumentContext:
    """ Where we are inside a stored document while deserializing it. Printed into error messages. """
    document_path: tuple[str | int, ...] = ()
    """ The path of the current field relative to the document root. 
    List elements are stored as their index. """
    
    document_id: str | None = None
    collection_name: str | None = None

    def replace(self, document_path: tuple[str | int, ...]) -> DocumentContext:
        return DocumentContext(
            document_path=document_path,
            document_id=self.document_id,
            collection_name=self.collection_name
        )

    def subpath(self, field_name: str) -> DocumentContext:
        """ Returns a new DocumentContext with a modified document_path. """
        return self.replace(self.document_path + (field_name,))

    def subidx(self, idx: int) -> DocumentContext:
        """ Returns a new DocumentContext with a modified document_path. """
        return self.replace(self.document_path + (idx,))

    def path_str(self) -> str:
        output = ""
        for part in self.document_path:
            if isinstance(part, int):
                output += f"[{part}]"
            else:
                output += f".{part}" if output else part
        return output or "<root>"

    def __str__(self) -> str:
        """ Printable to logs. """
        return f"Collection: {self.collection_name}\nDocument _id: {self.document_id}\nDocument path: {self.path_str()}"
