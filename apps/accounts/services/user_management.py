"""User administration service."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model

from .exceptions import UserNotFoundError, SelfDeactivationError
from .user_registration import validate_store_assignment

User = get_user_model()

logger = logging.getLogger(__name__)

_UNSET = object()


@transaction.atomic
def update_user(*, user_id, username=None, role=None, store=_UNSET) -> User:
    """
    Update a user's profile, role and store.

    ``store=None`` grants global access; omitting it keeps the current store.
    """
    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError("User not found")

    update_fields = ['updated_at']
    if username is not None:
        user.username = username
        update_fields.append('username')
    if role is not None:
        user.role = role
        update_fields.append('role')
    if store is not _UNSET:
        user.store = store
        update_fields.append('store')

    validate_store_assignment(user.role, user.store)

    user.save(update_fields=update_fields)
    logger.info("User %s updated (%s)", user.email, ', '.join(update_fields[1:]))
    return user


@transaction.atomic
def deactivate_user(*, user_id, performed_by) -> User:
    """
    Deactivate a user so they can no longer log in.

    Accounts are never removed because sales and payables keep a
    reference to the user who created them.
    """
    if str(user_id) == str(performed_by.id):
        raise SelfDeactivationError("You cannot deactivate your own account")

    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError("User not found")

    user.is_active = False
    user.reset_token = None
    user.reset_requested_at = None
    user.save(update_fields=['is_active', 'reset_token', 'reset_requested_at', 'updated_at'])

    logger.info("User %s deactivated by %s", user.email, performed_by.email)
    return user
