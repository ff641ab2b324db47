from .person import Person
from ..typing import create_type_registry

# Register the document classes once they have all been imported
create_type_registry()
