"""
Stock count (physical inventory) service.

A count snapshots every inventory line of a store, collects counted
quantities over one or more sessions, and on finalization sets each
differing line to the counted quantity.
"""

import logging
from decimal import Decimal

from django.db import transaction, IntegrityError
from django.utils import timezone

from apps.inventory.models import (
    InventoryLine,
    StockCount,
    StockCountItem,
    StockCountStatus,
)
from .exceptions import (
    InvalidQuantityError,
    StockCountInProgressError,
    StockCountClosedError,
    StockCountItemError,
)

logger = logging.getLogger(__name__)


def _locked_open_count(stock_count_id) -> StockCount:
    stock_count = StockCount.objects.select_for_update().get(id=stock_count_id)
    if not stock_count.is_open:
        raise StockCountClosedError("This stock count is already completed")
    return stock_count


@transaction.atomic
def start_stock_count(*, store, user) -> StockCount:
    """
    Open a count for a store and snapshot its inventory.

    Raises:
        StockCountInProgressError: If the store already has an open count
    """
    if StockCount.objects.filter(store=store, status=StockCountStatus.IN_PROGRESS).exists():
        raise StockCountInProgressError(
            f"A stock count is already in progress for {store.name}"
        )

    try:
        with transaction.atomic():
            stock_count = StockCount.objects.create(store=store, started_by=user)
    except IntegrityError:
        raise StockCountInProgressError(
            f"A stock count is already in progress for {store.name}"
        )

    lines = InventoryLine.objects.filter(store=store).select_related('product')
    StockCountItem.objects.bulk_create([
        StockCountItem(
            stock_count=stock_count,
            inventory_line=line,
            product=line.product,
            product_name=line.product_name,
            product_code=line.product_code,
            color=line.color,
            size=line.size,
            system_quantity=line.quantity,
            cost_price=line.product.cost_price,
        )
        for line in lines
    ])

    logger.info("Stock count %s started at %s by %s", stock_count.id, store, user)
    return stock_count


@transaction.atomic
def save_count_progress(*, stock_count_id, counts: dict, user) -> StockCount:
    """
    Record counted quantities.

    Args:
        counts: Mapping of item id -> counted quantity (None clears it)
    """
    stock_count = _locked_open_count(stock_count_id)

    items = {str(item.id): item for item in stock_count.items.filter(id__in=list(counts))}
    unknown = {str(item_id) for item_id in counts} - set(items)
    if unknown:
        raise StockCountItemError(f"Items not part of this count: {', '.join(sorted(unknown))}")

    for item_id, quantity in counts.items():
        if quantity is not None and quantity < 0:
            raise InvalidQuantityError("Counted quantity cannot be negative")
        item = items[str(item_id)]
        item.counted_quantity = quantity

    StockCountItem.objects.bulk_update(items.values(), ['counted_quantity'])

    stock_count.last_saved_by = user
    stock_count.last_saved_at = timezone.now()
    stock_count.save(update_fields=['last_saved_by', 'last_saved_at'])
    return stock_count


def discrepancy_report(stock_count: StockCount) -> dict:
    """
    Compare counted and system quantities.

    Returns:
        dict with 'items' (only those with a difference), 'counted_items',
        'total_items', 'total_unit_difference' and 'total_cost_difference'
    """
    rows = []
    total_units = 0
    total_cost = Decimal('0.00')
    counted = 0
    items = list(stock_count.items.all())

    for item in items:
        if item.counted_quantity is not None:
            counted += 1
        difference = item.difference
        if difference == 0:
            continue
        cost_difference = item.cost_difference
        total_units += difference
        total_cost += cost_difference
        rows.append({
            'item_id': item.id,
            'product_code': item.product_code,
            'product_name': item.product_name,
            'color': item.color,
            'size': item.size,
            'system_quantity': item.system_quantity,
            'counted_quantity': item.counted_quantity or 0,
            'difference': difference,
            'cost_difference': cost_difference,
        })

    return {
        'stock_count_id': stock_count.id,
        'total_items': len(items),
        'counted_items': counted,
        'items': rows,
        'total_unit_difference': total_units,
        'total_cost_difference': total_cost,
    }


@transaction.atomic
def finalize_stock_count(*, stock_count_id, user) -> StockCount:
    """
    Apply counted quantities to inventory and close the count.

    Items never counted are treated as zero units on hand.
    """
    stock_count = _locked_open_count(stock_count_id)
    report = discrepancy_report(stock_count)

    item_ids = [row['item_id'] for row in report['items']]
    items = stock_count.items.filter(id__in=item_ids).select_related('inventory_line')
    line_ids = [item.inventory_line_id for item in items if item.inventory_line_id]
    lines = {
        line.id: line
        for line in InventoryLine.objects.select_for_update().filter(id__in=line_ids)
    }

    for item in items:
        line = lines.get(item.inventory_line_id)
        if line is None:
            continue
        line.quantity = item.counted_quantity or 0
        line.save(update_fields=['quantity', 'updated_at'])

    stock_count.status = StockCountStatus.COMPLETED
    stock_count.completed_by = user
    stock_count.completed_at = timezone.now()
    stock_count.total_unit_difference = report['total_unit_difference']
    stock_count.total_cost_difference = report['total_cost_difference']
    stock_count.save()

    logger.info(
        "Stock count %s finalized: %d units, %s cost difference",
        stock_count.id,
        stock_count.total_unit_difference,
        stock_count.total_cost_difference,
    )
    return stock_count
