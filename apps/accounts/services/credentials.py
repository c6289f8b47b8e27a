"""
Login and password reset.

Lookups match the email case-insensitively. A reset token is single-use
and expires after ``PASSWORD_RESET_TIMEOUT`` seconds.
"""

import logging
import secrets
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from .exceptions import (
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
    UserNotFoundError,
)

User = get_user_model()

logger = logging.getLogger(__name__)


def _locked_user(**lookup):
    return User.objects.select_for_update().filter(**lookup).first()


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Check the credentials and stamp ``last_login``.

    Wrong email and wrong password raise the same error.
    """
    user = _locked_user(email__iexact=email)
    if user is None or not user.check_password(password):
        raise InvalidCredentialsError("Invalid email or password")
    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])
    return user


@transaction.atomic
def request_password_reset(*, email: str) -> str:
    """Issue a fresh reset token, replacing any pending one."""
    user = _locked_user(email__iexact=email, is_active=True)
    if user is None:
        raise UserNotFoundError(f"No active user with email: {email}")

    user.reset_token = secrets.token_urlsafe(32)
    user.reset_requested_at = timezone.now()
    user.save(update_fields=['reset_token', 'reset_requested_at'])

    logger.info("Password reset requested for %s", user.email)
    return user.reset_token


@transaction.atomic
def confirm_password_reset(*, token: str, new_password: str) -> User:
    """Set a new password and burn the token."""
    user = _locked_user(reset_token=token, is_active=True) if token else None
    if user is None:
        raise InvalidTokenError("Invalid or expired reset token")

    lifetime = timedelta(seconds=settings.PASSWORD_RESET_TIMEOUT)
    if user.reset_requested_at is None or user.reset_requested_at + lifetime < timezone.now():
        raise InvalidTokenError("Invalid or expired reset token")

    user.reset_token = None
    user.reset_requested_at = None
    user.set_password(new_password)
    user.save(update_fields=['password', 'reset_token', 'reset_requested_at'])
    logger.info("Password reset completed for %s", user.email)
    return user
