"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(AccountsServiceError):
    """Raised when user registration fails."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    pass


class InvalidTokenError(AccountsServiceError):
    """Raised when a reset token is invalid."""
    pass


class UserNotFoundError(AccountsServiceError):
    """Raised when user does not exist."""
    pass


class StoreAssignmentError(AccountsServiceError):
    """Raised when a role requires a store that was not given."""
    pass


class SelfDeactivationError(AccountsServiceError):
    """Raised when an administrator tries to deactivate their own account."""
    pass


class InvalidSalesTargetError(AccountsServiceError):
    """Raised when a sales target has an invalid goal or rate."""
    pass
