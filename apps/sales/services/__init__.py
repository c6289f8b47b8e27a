"""Services for sales business logic."""

from .exceptions import (
    SalesServiceError,
    RegisterAlreadyOpenError,
    RegisterClosedError,
    InvalidCashMovementError,
    SaleValidationError,
    PaymentMismatchError,
    PaymentAccountNotConfiguredError,
    InvalidReturnError,
)
from .cash_register import current_session, open_register, add_cash_movement, close_register
from .checkout import finalize_sale, compute_discount, split_fee
from .returns import register_return
from .payment_settings import configure_payment_methods

__all__ = [
    # Exceptions
    'SalesServiceError',
    'RegisterAlreadyOpenError',
    'RegisterClosedError',
    'InvalidCashMovementError',
    'SaleValidationError',
    'PaymentMismatchError',
    'PaymentAccountNotConfiguredError',
    'InvalidReturnError',
    # Services
    'current_session',
    'open_register',
    'add_cash_movement',
    'close_register',
    'finalize_sale',
    'compute_discount',
    'split_fee',
    'register_return',
    'configure_payment_methods',
]
