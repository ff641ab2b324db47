ABSTRACT = "ABSTRACT"
""" 
Marks a class that is never stored on its own:
    - Documents (__collection_name__)
    - BsonableDataclasses (__type_id__)
"""

AUTO = "AUTO_1234"
"""
Assigns a BsonableDataclass's __type_id__ from its class name.
Documents should spell out their __type_id__ so that stored type ids stay stable across renames.
"""
