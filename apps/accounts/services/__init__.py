"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
    UserNotFoundError,
    StoreAssignmentError,
    SelfDeactivationError,
    InvalidSalesTargetError,
)
from .user_registration import register_user
from .credentials import authenticate_user, request_password_reset, confirm_password_reset
from .user_management import update_user, deactivate_user
from .sales_targets import set_sales_target

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidTokenError',
    'UserNotFoundError',
    'StoreAssignmentError',
    'SelfDeactivationError',
    'InvalidSalesTargetError',
    # Services
    'register_user',
    'authenticate_user',
    'request_password_reset',
    'confirm_password_reset',
    'update_user',
    'deactivate_user',
    'set_sales_target',
]
