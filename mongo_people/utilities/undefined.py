class Undefined:
    """ Sentinel for telling apart a field which is set to None from a field which has not been set at all.
    Used by SchemaConfig() for defaults and by partial (projected) documents for omitted fields. """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNDEFINED"

    def __bool__(self):
        return False

UNDEFINED = Undefined()
