class ValidationError(Exception):
    """Exception raised when a field rule rejects a value.
    NOTE: Messages in these errors should be readable by whoever typed the value in. """
    
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)
