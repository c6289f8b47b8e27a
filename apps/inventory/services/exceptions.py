"""Domain-specific exceptions for inventory services."""


class InventoryServiceError(Exception):
    """Base exception for inventory services."""
    pass


class InvalidQuantityError(InventoryServiceError):
    """Raised when a quantity is negative or zero where it must be positive."""
    pass


class InventoryLineNotFoundError(InventoryServiceError):
    """Raised when a store has no stock line for a product variation."""
    pass


class InsufficientStockError(InventoryServiceError):
    """Raised when removing more units than the line holds."""
    pass


class StockCountInProgressError(InventoryServiceError):
    """Raised when starting a count while another is open for the store."""
    pass


class StockCountClosedError(InventoryServiceError):
    """Raised when saving or finalizing a completed count."""
    pass


class StockCountItemError(InventoryServiceError):
    """Raised when counted items do not belong to the count."""
    pass
