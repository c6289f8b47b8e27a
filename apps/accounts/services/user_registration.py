"""User registration service."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.accounts.models import UserRole
from .exceptions import UserRegistrationError, StoreAssignmentError

User = get_user_model()

logger = logging.getLogger(__name__)


STORE_BOUND_ROLES = (UserRole.MANAGER, UserRole.EMPLOYEE)


def validate_store_assignment(role, store):
    """Managers and employees always work inside one store."""
    if role in STORE_BOUND_ROLES and store is None:
        raise StoreAssignmentError(f"Role '{role}' requires a store")


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    username: str = "",
    role: str = UserRole.EMPLOYEE,
    store=None,
) -> User:
    """
    Create a back-office user. Only administrators reach this service.

    Args:
        email: Login email, unique case-insensitively
        password: Raw password (will be hashed)
        username: Display name
        role: One of UserRole
        store: Store the user works in, None for global access

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is taken
        StoreAssignmentError: If a store-bound role has no store
    """
    email = User.objects.normalize_email(email).strip()

    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError(f"A user with email {email} already exists")

    validate_store_assignment(role, store)

    user = User.objects.create_user(
        email=email,
        password=password,
        username=username,
        role=role,
        store=store,
    )
    logger.info("User %s registered with role %s", user.email, user.role)
    return user
