"""
Domain exceptions for the purchases app.

Validation problems raise ``PurchaseServiceError`` subclasses, which the
views turn into 400 responses. State errors on payables are DRF
``APIException`` subclasses and carry their own status code.
"""
from rest_framework.exceptions import APIException


class PurchaseServiceError(Exception):
    """Base exception for purchase service errors."""
    pass


class InvalidPurchaseError(PurchaseServiceError):
    """Raised when a merchandise purchase fails validation."""
    pass


class InvalidExpenseError(PurchaseServiceError):
    """Raised when an expense fails validation."""
    pass


class InvalidSplitError(PurchaseServiceError):
    """Raised when an amount cannot be split into installments."""
    pass


class PayableAlreadyPaidError(APIException):
    """Payable is already settled."""
    status_code = 400
    default_detail = 'This payable has already been paid.'
    default_code = 'payable_already_paid'


class InvalidPayableUpdateError(APIException):
    """Payable edit rejected."""
    status_code = 400
    default_detail = 'Invalid changes for this payable.'
    default_code = 'invalid_payable_update'
