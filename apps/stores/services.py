"""
Store services.

``resolve_store`` is the single place where store-bound users are
confined to their own store; other apps call it before writing
store-scoped records.
"""

import logging

from django.db import transaction
from django.db.models import ProtectedError

from .exceptions import StoreInUseError, StoreAccessError
from .models import Store

logger = logging.getLogger(__name__)


def resolve_store(user, store=None):
    """
    Return the store an operation should run against.

    Users bound to a store always act on it; a different explicit store is
    rejected. Users with global access must name the store.
    """
    if not user.has_global_access:
        if store is not None and store.pk != user.store_id:
            raise StoreAccessError("You can only operate on your own store")
        return user.store
    if store is None:
        raise StoreAccessError("A store must be selected")
    return store


def visible_store(user, store=None):
    """
    Store a read-only query should be limited to, or None for all stores.

    Store-bound users always read their own store.
    """
    if not user.has_global_access:
        if store is not None and store.pk != user.store_id:
            raise StoreAccessError("You can only view your own store")
        return user.store
    return store


@transaction.atomic
def delete_store(*, store: Store) -> None:
    """Delete a store unless inventory, sales or financial records reference it."""
    name = store.name
    try:
        store.delete()
    except ProtectedError:
        raise StoreInUseError(
            f"Store '{name}' has inventory, sales or financial records and cannot be deleted"
        )
    logger.info("Store %s deleted", name)
