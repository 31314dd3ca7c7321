"""Domain errors raised by the data-access layer."""


class DataAccessError(Exception):
    """A datastore operation failed; the driver detail stays in the logs."""

    def __init__(self, operation: str):
        self.operation = operation
        self.message = f"Failed to {operation}."
        super().__init__(self.message)
