"""Error taxonomy for fact operations."""


class FactsError(Exception):
    """Base class for all fact-related errors."""

    pass


class ValidationError(FactsError):
    """Raised when input is missing or malformed, before any mutation."""

    pass


class NotFound(FactsError):
    """Raised when an operation targets an id that does not exist."""

    def __init__(self, collection: str, record_id: str) -> None:
        super().__init__(f"No record with id '{record_id}' in {collection}")
        self.collection = collection
        self.record_id = record_id


class OperationFailed(FactsError):
    """Raised when the underlying storage call fails on a write."""

    pass


class NotAuthorized(FactsError):
    """Raised when a moderation operation runs without an admin session."""

    pass
