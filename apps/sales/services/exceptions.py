"""Domain-specific exceptions for sales services."""


class SalesServiceError(Exception):
    """Base exception for sales services."""
    pass


class RegisterAlreadyOpenError(SalesServiceError):
    """Raised when opening a register that already has an open session."""
    pass


class RegisterClosedError(SalesServiceError):
    """Raised when operating on a closed register, or when none is open."""
    pass


class InvalidCashMovementError(SalesServiceError):
    """Raised when a supply or outflow is invalid."""
    pass


class SaleValidationError(SalesServiceError):
    """Raised when a sale is missing data or has an invalid cart."""
    pass


class PaymentMismatchError(SalesServiceError):
    """Raised when the payments do not add up to the sale total."""
    pass


class PaymentAccountNotConfiguredError(SalesServiceError):
    """Raised when a non-cash method has no destination account."""
    pass


class InvalidReturnError(SalesServiceError):
    """Raised when a return quantity or reason is invalid."""
    pass
