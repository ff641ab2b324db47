from typing import Any

from ...utilities.logger import get_logger

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from ...document.document_context import DocumentContext


__type_id__ = "__type_id__"
__version__ = "__version__"
__last_modified__ = "__last_modified__"
__partial__ = "__partial__"

def get_type_id(bson: Any, document_context: 'DocumentContext | None') -> str | None:
    """ Get the type_id from the bson, if present. """
    
    if not isinstance(bson, dict):
        return None
    
    type_id = bson.get(__type_id__, None)
    if not type_id:
        get_logger().warning(f"Warning: Bson did not assert a __type_id__.\n{document_context}")
        return None
    
    if not isinstance(type_id, str):
        get_logger().warning(f"Warning: Bson asserted a __type_id__ that is not a string.\n{document_context}")
        return None
    
    return type_id
