"""
Sale finalization.

``finalize_sale`` runs the whole checkout in one database transaction:
stock leaves the store, cash goes to the register, card and pix receipts
are credited (net of fees) to the accounts configured for each method, and
the sale is stored with its items and payments. Any failure rolls the
whole sale back.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.db import transaction

from apps.finance.services import AccountService
from apps.inventory.services import remove_stock
from apps.sales.models import (
    CashRegisterSession,
    RegisterStatus,
    PaymentMethod,
    PaymentMethodSetting,
    CREDIT_METHODS,
    DiscountType,
    Sale,
    SaleItem,
    SalePayment,
)
from .exceptions import (
    RegisterClosedError,
    SaleValidationError,
    PaymentMismatchError,
    PaymentAccountNotConfiguredError,
)

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def _money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_discount(subtotal: Decimal, discount_type: str, discount_value: Decimal) -> Decimal:
    """Discount in currency, never more than the subtotal."""
    if discount_value is None or discount_value <= 0:
        return Decimal('0.00')
    if discount_type == DiscountType.PERCENTAGE:
        if discount_value > 100:
            raise SaleValidationError("Percentage discount cannot exceed 100%")
        amount = _money(subtotal * discount_value / 100)
    else:
        amount = _money(discount_value)
    return min(amount, subtotal)


def split_fee(amount: Decimal, fee_percentage: Decimal):
    """Return (net, fee) for a gross card or pix receipt."""
    net = _money(amount * (100 - fee_percentage) / 100)
    return net, amount - net


def _add_to_summary(session, method, amount):
    session.total_sales += amount
    if method == PaymentMethod.CASH:
        session.cash_total += amount
        session.current_cash_count += amount
    elif method in CREDIT_METHODS:
        session.credit_total += amount
    elif method == PaymentMethod.DEBIT_CARD:
        session.debit_total += amount
    elif method == PaymentMethod.PIX:
        session.pix_total += amount


def _payment_settings(store, payments):
    """Settings of every non-cash method used, or an error naming the first unconfigured one."""
    methods = {p['method'] for p in payments if p['method'] != PaymentMethod.CASH}
    configured = {
        setting.method: setting
        for setting in PaymentMethodSetting.objects.filter(store=store, method__in=methods)
        .select_related('account')
    }
    for method in methods:
        setting = configured.get(method)
        if setting is None or setting.account_id is None:
            raise PaymentAccountNotConfiguredError(
                f"Payment method '{PaymentMethod(method).label}' has no destination account configured"
            )
    return configured


@transaction.atomic
def finalize_sale(
    *,
    store,
    seller,
    customer,
    items,
    payments,
    discount_type: str = DiscountType.PERCENTAGE,
    discount_value: Decimal = Decimal('0.00'),
    user=None,
) -> Sale:
    """
    Complete a sale.

    Args:
        items: ``product``, ``color``, ``size`` and ``quantity`` per line.
        payments: ``method`` and ``amount`` per payment.

    Raises:
        SaleValidationError: Missing seller or customer, empty cart,
            invalid quantities or discount
        RegisterClosedError: If the store has no open register session
        PaymentMismatchError: If payments differ from the total by more
            than PAYMENT_TOLERANCE
        PaymentAccountNotConfiguredError: If a non-cash method has no account
        InsufficientStockError: If a line does not have enough units
    """
    if seller is None:
        raise SaleValidationError("Select the seller responsible for the sale")
    if not seller.is_active:
        raise SaleValidationError("The selected seller is inactive")
    if not seller.can_access_store(store.id):
        raise SaleValidationError("The selected seller does not work at this store")
    if customer is None:
        raise SaleValidationError("Select a customer for the sale")
    if not items:
        raise SaleValidationError("The cart is empty")
    if any(item['quantity'] <= 0 for item in items):
        raise SaleValidationError("Item quantities must be greater than zero")
    if any(payment['amount'] <= 0 for payment in payments):
        raise SaleValidationError("Payment amounts must be greater than zero")

    session = (
        CashRegisterSession.objects.select_for_update()
        .filter(store=store, status=RegisterStatus.OPEN)
        .first()
    )
    if session is None:
        raise RegisterClosedError("The register is closed. Open it before selling")

    subtotal = sum(
        (_money(item['product'].price * item['quantity']) for item in items),
        Decimal('0.00'),
    )
    discount_amount = compute_discount(subtotal, discount_type, discount_value)
    total = subtotal - discount_amount

    paid = sum((payment['amount'] for payment in payments), Decimal('0.00'))
    tolerance = Decimal(str(settings.PAYMENT_TOLERANCE))
    if abs(paid - total) > tolerance:
        raise PaymentMismatchError(f"Payments ({paid}) do not match the sale total ({total})")

    method_settings = _payment_settings(store, payments)

    sale = Sale.objects.create(
        store=store,
        session=session,
        seller=seller,
        customer=customer,
        subtotal=subtotal,
        discount_type=discount_type,
        discount_value=discount_value or Decimal('0.00'),
        discount_amount=discount_amount,
        total_amount=total,
        created_by=user,
    )

    for item in items:
        product = item['product']
        remove_stock(
            store=store,
            product=product,
            color=item['color'],
            size=item['size'],
            quantity=item['quantity'],
        )
        SaleItem.objects.create(
            sale=sale,
            product=product,
            product_name=product.name,
            product_code=product.code,
            color=item['color'],
            size=item['size'],
            quantity=item['quantity'],
            unit_price=product.price,
            unit_cost=product.cost_price,
            subtotal=_money(product.price * item['quantity']),
        )

    for payment in payments:
        method, amount = payment['method'], payment['amount']
        _add_to_summary(session, method, amount)

        if method == PaymentMethod.CASH:
            SalePayment.objects.create(sale=sale, method=method, amount=amount, net_amount=amount)
            continue

        setting = method_settings[method]
        net, fee = split_fee(amount, setting.fee_percentage)
        if net > 0:
            AccountService.deposit(
                account_id=setting.account_id,
                amount=net,
                description=f"Sale receipt #{sale.reference} ({PaymentMethod(method).label})",
                user=user,
                metadata={
                    'sale_id': str(sale.id),
                    'store_id': str(store.id),
                    'gross_amount': str(amount),
                    'fee_amount': str(fee),
                    'fee_percentage': str(setting.fee_percentage),
                },
            )
        SalePayment.objects.create(
            sale=sale,
            method=method,
            amount=amount,
            fee_amount=fee,
            net_amount=net,
            account_id=setting.account_id,
        )

    session.save()

    logger.info(
        "Sale %s finalized at %s: %s (%d item(s)) by %s",
        sale.reference, store.name, total, len(items), seller.email,
    )
    return sale
