"""Returns of sold items back into the store's stock."""

import logging

from django.db import transaction

from apps.inventory.services import receive_stock
from apps.sales.models import Sale, SaleItem, SaleReturn, SaleStatus
from .exceptions import InvalidReturnError

logger = logging.getLogger(__name__)


@transaction.atomic
def register_return(*, sale_id, item_id, quantity: int, reason: str, user) -> SaleReturn:
    """
    Return units of a sale item to stock.

    Raises:
        InvalidReturnError: If the item is not part of the sale, the
            quantity is outside 1..returnable, or the reason is blank
    """
    sale = Sale.objects.select_for_update().select_related('store').get(id=sale_id)
    try:
        item = SaleItem.objects.select_for_update().select_related('product').get(id=item_id, sale=sale)
    except SaleItem.DoesNotExist:
        raise InvalidReturnError("This item does not belong to the sale")

    reason = (reason or '').strip()
    if not reason:
        raise InvalidReturnError("A reason is required for returns")
    if quantity is None or quantity < 1 or quantity > item.returnable_quantity:
        raise InvalidReturnError(
            f"Return quantity must be between 1 and {item.returnable_quantity}"
        )

    receive_stock(
        store=sale.store,
        product=item.product,
        color=item.color,
        size=item.size,
        quantity=quantity,
    )

    item.returned_quantity += quantity
    item.save(update_fields=['returned_quantity'])

    sale.status = SaleStatus.PARTIALLY_RETURNED
    sale.save(update_fields=['status'])

    sale_return = SaleReturn.objects.create(
        sale=sale,
        item=item,
        quantity=quantity,
        reason=reason,
        processed_by=user,
    )
    logger.info("Return of %d x %s on sale %s", quantity, item.product_code, sale.reference)
    return sale_return
