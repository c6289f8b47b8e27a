"""
Stock level service.

All changes to ``InventoryLine.quantity`` go through this module so the
row is locked with ``select_for_update`` before it is read and written.
"""

import logging
from typing import Optional

from django.conf import settings
from django.db import transaction

from apps.inventory.models import InventoryLine
from .exceptions import (
    InvalidQuantityError,
    InventoryLineNotFoundError,
    InsufficientStockError,
)

logger = logging.getLogger(__name__)


def _locked_line(store, product, color, size) -> Optional[InventoryLine]:
    return (
        InventoryLine.objects
        .select_for_update()
        .filter(store=store, product=product, color=color, size=size)
        .first()
    )


@transaction.atomic
def receive_stock(*, store, product, color: str, size: str, quantity: int) -> InventoryLine:
    """
    Add units to a store's stock, creating the line on first receipt.

    Raises:
        InvalidQuantityError: If quantity is not positive
    """
    if quantity <= 0:
        raise InvalidQuantityError("Quantity received must be greater than zero")

    line = _locked_line(store, product, color, size)
    if line is None:
        line = InventoryLine.objects.create(
            store=store,
            product=product,
            color=color,
            size=size,
            quantity=quantity,
        )
    else:
        line.quantity += quantity
        line.save(update_fields=['quantity', 'updated_at'])

    logger.debug("Received %d x %s %s/%s at %s", quantity, product.code, color, size, store)
    return line


@transaction.atomic
def remove_stock(*, store, product, color: str, size: str, quantity: int) -> InventoryLine:
    """
    Take units out of a store's stock.

    Raises:
        InvalidQuantityError: If quantity is not positive
        InventoryLineNotFoundError: If the variation was never stocked here
        InsufficientStockError: If the line holds fewer units
    """
    if quantity <= 0:
        raise InvalidQuantityError("Quantity must be greater than zero")

    line = _locked_line(store, product, color, size)
    if line is None:
        raise InventoryLineNotFoundError(
            f"No stock of {product.name} ({color}/{size}) in this store"
        )
    if line.quantity < quantity:
        raise InsufficientStockError(
            f"Insufficient stock for {product.name} ({color}/{size}): "
            f"available {line.quantity}, requested {quantity}"
        )

    line.quantity -= quantity
    line.save(update_fields=['quantity', 'updated_at'])
    return line


@transaction.atomic
def set_stock_levels(*, store, entries) -> dict:
    """
    Bulk-set quantities for a store.

    Each entry is ``{'product', 'color', 'size', 'quantity'}``. Existing
    lines take the new value (zero included); missing lines are created
    only for positive quantities.

    Returns:
        dict with 'updated' and 'created' counts
    """
    updated = created = 0
    for entry in entries:
        quantity = entry['quantity']
        if quantity < 0:
            raise InvalidQuantityError("Stock quantity cannot be negative")

        line = _locked_line(store, entry['product'], entry['color'], entry['size'])
        if line is not None:
            if line.quantity != quantity:
                line.quantity = quantity
                line.save(update_fields=['quantity', 'updated_at'])
                updated += 1
        elif quantity > 0:
            InventoryLine.objects.create(
                store=store,
                product=entry['product'],
                color=entry['color'],
                size=entry['size'],
                quantity=quantity,
            )
            created += 1

    logger.info("Stock levels set at %s: %d updated, %d created", store, updated, created)
    return {'updated': updated, 'created': created}


def low_stock(*, store=None, threshold: Optional[int] = None):
    """Inventory lines at or below the threshold (LOW_STOCK_THRESHOLD by default)."""
    if threshold is None:
        threshold = settings.LOW_STOCK_THRESHOLD

    queryset = InventoryLine.objects.filter(quantity__lte=threshold).select_related('store')
    if store is not None:
        queryset = queryset.filter(store=store)
    return queryset.order_by('quantity', 'product_name')
