"""
Domain exceptions for the finance app.

They extend DRF's APIException so that errors raised deep inside a
purchase payment or a sale surface with the right status code.
"""
from rest_framework.exceptions import APIException


class FinanceServiceError(APIException):
    """Base exception for finance service errors."""
    status_code = 400
    default_detail = 'Financial operation failed.'
    default_code = 'finance_error'


class InvalidAmountError(FinanceServiceError):
    """Amount is zero or negative."""
    default_detail = 'Amount must be greater than zero.'
    default_code = 'invalid_amount'


class InsufficientFundsError(FinanceServiceError):
    """Account balance does not cover the debit."""
    default_detail = 'Insufficient balance in the account.'
    default_code = 'insufficient_funds'


class SameAccountTransferError(FinanceServiceError):
    """Transfer source and destination are the same account."""
    default_detail = 'Source and destination accounts must be different.'
    default_code = 'same_account_transfer'


class AccountInUseError(FinanceServiceError):
    """Account is referenced by revenues and cannot be deleted."""
    status_code = 409
    default_detail = 'This account has revenues linked to it and cannot be deleted.'
    default_code = 'account_in_use'
