"""Domain exceptions for the stores app."""


class StoreServiceError(Exception):
    """Base exception for store operations."""
    pass


class StoreInUseError(StoreServiceError):
    """Raised when deleting a store that still has records attached."""
    pass


class StoreAccessError(StoreServiceError):
    """Raised when a user acts on a store they are not assigned to."""
    pass
