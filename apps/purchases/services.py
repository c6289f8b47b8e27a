"""
Purchase Services Module
========================

Business logic for merchandise purchases, expenses and accounts payable.

Classes:
    PurchaseService: Merchandise purchases (stock receipt plus installments).
    PayableService: Expenses, payable edits and payments.

Installment amounts are split with cent precision: the total is converted
to cents, divided with integer arithmetic and the remainder is handed out
one cent at a time to the first installments, so the installments always
add up to the total.

Example:
    A purchase paid in three installments::

        from apps.purchases.services import PurchaseService

        purchase = PurchaseService.create_merchandise_purchase(
            description='Winter collection',
            supplier=supplier,
            store=store,
            issue_date=date(2025, 5, 2),
            items=[{'product': coat, 'color': 'Black', 'size': 'M',
                    'quantity': 10, 'unit_cost': Decimal('100.00')}],
            due_dates=[date(2025, 6, 2), date(2025, 7, 2), date(2025, 8, 2)],
            user=request.user,
        )
        # Payables: 333.34, 333.33, 333.33
"""

import calendar
import logging
from datetime import date
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from apps.finance.services import AccountService
from apps.inventory.services import receive_stock
from .exceptions import (
    InvalidPurchaseError,
    InvalidExpenseError,
    InvalidSplitError,
    PayableAlreadyPaidError,
    InvalidPayableUpdateError,
)
from .models import (
    Purchase,
    PurchaseItem,
    AccountPayable,
    PayableStatus,
    PayableType,
    PayablePaymentMethod,
)

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def split_amount(total, parts):
    """
    Split ``total`` into ``parts`` amounts that add up exactly.

    Example:
        >>> split_amount(Decimal('100.00'), 3)
        [Decimal('33.34'), Decimal('33.33'), Decimal('33.33')]

    Raises:
        InvalidSplitError: If parts is lower than one or the total has
            fewer cents than installments.
    """
    if parts < 1:
        raise InvalidSplitError("At least one installment is required")

    total_cents = int((Decimal(total) * 100).to_integral_value())
    if total_cents < parts:
        raise InvalidSplitError(
            f"{total} cannot be split into {parts} installments of at least 0.01"
        )
    base_cents, remainder = divmod(total_cents, parts)

    amounts = [
        (Decimal(base_cents + (1 if i < remainder else 0)) / Decimal(100)).quantize(CENT)
        for i in range(parts)
    ]

    if sum(amounts) != Decimal(total_cents) / Decimal(100):
        raise InvalidSplitError(f"Split calculation error: {sum(amounts)} != {total}")
    return amounts


def add_months(start: date, months: int) -> date:
    """Same day ``months`` later, clamped to the end of shorter months."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def installment_description(description, number, count):
    if count > 1:
        return f"{description} ({number}/{count})"
    return description


class PurchaseService:
    """
    Service for merchandise purchases.

    Methods:
        create_merchandise_purchase: Receive stock and create installments.
        delete_purchase: Remove a purchase and its payables.
    """

    @staticmethod
    @transaction.atomic
    def create_merchandise_purchase(
        *,
        description,
        supplier,
        store,
        issue_date,
        items,
        due_dates,
        payment_method=PayablePaymentMethod.BOLETO,
        user=None,
    ):
        """
        Record a merchandise purchase.

        Every item is received into the store's inventory, the purchase and
        its items are stored, and one pending payable is created per due
        date with descriptions ``"<description> (i/N)"``. Everything happens
        in one database transaction.

        Args:
            items (list[dict]): ``product``, ``color``, ``size``,
                ``quantity`` and ``unit_cost`` per received variation.
            due_dates (list[date]): One due date per installment.

        Returns:
            Purchase: The created purchase.

        Raises:
            InvalidPurchaseError: On missing data, empty or invalid items,
                a zero total or a missing due date.
        """
        description = (description or '').strip()
        if not description:
            raise InvalidPurchaseError("Description is required")
        if supplier is None or store is None:
            raise InvalidPurchaseError("Supplier and store are required for merchandise")
        if not items:
            raise InvalidPurchaseError("Add at least one product to the purchase")
        if not due_dates or any(due is None for due in due_dates):
            raise InvalidPurchaseError("Each installment needs a due date")

        total = Decimal('0.00')
        for item in items:
            if item['quantity'] <= 0:
                raise InvalidPurchaseError(f"Quantity for {item['product'].code} must be greater than zero")
            if item['unit_cost'] < 0:
                raise InvalidPurchaseError(f"Unit cost for {item['product'].code} cannot be negative")
            total += item['unit_cost'] * item['quantity']
        if total <= 0:
            raise InvalidPurchaseError("Purchase total must be greater than zero")

        installment_count = len(due_dates)
        purchase = Purchase.objects.create(
            description=description,
            supplier=supplier,
            store=store,
            issue_date=issue_date,
            total_amount=total,
            installment_count=installment_count,
            payment_method=payment_method,
            created_by=user,
        )

        for item in items:
            product = item['product']
            receive_stock(
                store=store,
                product=product,
                color=item['color'],
                size=item['size'],
                quantity=item['quantity'],
            )
            PurchaseItem.objects.create(
                purchase=purchase,
                product=product,
                product_name=product.name,
                product_code=product.code,
                color=item['color'],
                size=item['size'],
                quantity=item['quantity'],
                unit_cost=item['unit_cost'],
            )

        try:
            amounts = split_amount(total, installment_count)
        except InvalidSplitError as e:
            raise InvalidPurchaseError(str(e))
        AccountPayable.objects.bulk_create([
            AccountPayable(
                description=f"{description} ({number}/{installment_count})",
                amount=amount,
                issue_date=issue_date,
                due_date=due_date,
                payment_method=payment_method,
                installment_number=number,
                installment_count=installment_count,
                payable_type=PayableType.MERCHANDISE,
                purchase=purchase,
                supplier=supplier,
                store=store,
                created_by=user,
            )
            for number, (amount, due_date) in enumerate(zip(amounts, due_dates), start=1)
        ])

        logger.info(
            "Purchase %s created: %s in %d installment(s) for %s",
            purchase.id, total, installment_count, store.name,
        )
        return purchase

    @staticmethod
    @transaction.atomic
    def delete_purchase(*, purchase_id):
        """
        Delete a purchase with its items and payables.

        Received stock stays in inventory.
        """
        purchase = Purchase.objects.select_for_update().get(id=purchase_id)
        purchase.payables.all().delete()
        purchase.delete()
        logger.info("Purchase %s deleted", purchase_id)


class PayableService:
    """
    Service for expenses and accounts payable.

    Methods:
        create_expense: Create expense installments or a recurring series.
        pay_payable: Settle a payable from a bank account.
        update_payable: Edit a pending payable.
        delete_payable: Remove a payable.
    """

    @staticmethod
    @transaction.atomic
    def create_expense(
        *,
        description,
        amount,
        expense_category,
        store,
        issue_date,
        due_dates,
        payment_method=PayablePaymentMethod.BOLETO,
        supplier=None,
        employee=None,
        is_recurring=False,
        recurrence_months=1,
        user=None,
    ):
        """
        Create the payables of an expense.

        A recurring expense produces ``recurrence_months`` payables of the
        full amount, due monthly from the first due date. Otherwise the
        amount is split across the given due dates.

        Returns:
            list[AccountPayable]: The created payables, by due date.

        Raises:
            InvalidExpenseError: On missing data, a non-positive amount or
                missing due dates.
        """
        description = (description or '').strip()
        if not description:
            raise InvalidExpenseError("Description is required")
        if expense_category is None:
            raise InvalidExpenseError("Expense category is required")
        if store is None:
            raise InvalidExpenseError("Store is required for expenses")
        if amount is None or amount <= 0:
            raise InvalidExpenseError("Amount must be greater than zero")
        if not due_dates or any(due is None for due in due_dates):
            raise InvalidExpenseError("Each installment needs a due date")

        if is_recurring:
            if recurrence_months < 1:
                raise InvalidExpenseError("Recurring expenses need at least one month")
            count = recurrence_months
            schedule = [add_months(due_dates[0], i) for i in range(count)]
            installment_amount = Decimal(amount).quantize(CENT)
            if installment_amount < CENT:
                raise InvalidExpenseError("Amount must be at least 0.01")
            amounts = [installment_amount] * count
        else:
            count = len(due_dates)
            schedule = list(due_dates)
            try:
                amounts = split_amount(amount, count)
            except InvalidSplitError as e:
                raise InvalidExpenseError(str(e))

        payables = AccountPayable.objects.bulk_create([
            AccountPayable(
                description=installment_description(description, number, count),
                amount=installment_amount,
                issue_date=issue_date,
                due_date=due_date,
                payment_method=payment_method,
                installment_number=number,
                installment_count=count,
                payable_type=PayableType.EXPENSE,
                supplier=supplier,
                store=store,
                expense_category=expense_category,
                employee=employee,
                is_recurring=is_recurring,
                created_by=user,
            )
            for number, (installment_amount, due_date) in enumerate(zip(amounts, schedule), start=1)
        ])

        logger.info(
            "Expense '%s' created: %d payable(s) for %s",
            description, count, store.name,
        )
        return payables

    @staticmethod
    @transaction.atomic
    def pay_payable(*, payable_id, account_id, user=None):
        """
        Pay a pending payable from a bank account.

        The account's balance plus sub-balances must cover the amount; the
        main balance is the one debited. A withdrawal ``"Payment: <desc>"``
        referencing the payable is written to the account ledger.

        Raises:
            PayableAlreadyPaidError: If the payable is not pending.
            InsufficientFundsError: If the account cannot cover the amount.
        """
        payable = AccountPayable.objects.select_for_update().get(id=payable_id)
        if payable.status != PayableStatus.PENDING:
            raise PayableAlreadyPaidError()

        AccountService.withdraw(
            account_id=account_id,
            amount=payable.amount,
            description=f"Payment: {payable.description}",
            user=user,
            metadata={'payable_id': str(payable.id)},
            cover_with_sub_balances=True,
        )

        payable.status = PayableStatus.PAID
        payable.paid_at = timezone.now()
        payable.paid_from_account_id = account_id
        payable.save(update_fields=['status', 'paid_at', 'paid_from_account', 'updated_at'])

        logger.info("Payable %s paid: %s", payable.id, payable.amount)
        return payable

    @staticmethod
    @transaction.atomic
    def update_payable(*, payable_id, description=None, amount=None, due_date=None):
        """
        Edit description, amount or due date of a pending payable.

        Raises:
            PayableAlreadyPaidError: If the payable was already paid.
            InvalidPayableUpdateError: On a blank description or a
                non-positive amount.
        """
        payable = AccountPayable.objects.select_for_update().get(id=payable_id)
        if payable.status != PayableStatus.PENDING:
            raise PayableAlreadyPaidError('Paid payables cannot be edited.')

        if description is not None:
            description = description.strip()
            if not description:
                raise InvalidPayableUpdateError('Description cannot be blank.')
            payable.description = description
        if amount is not None:
            if amount <= 0:
                raise InvalidPayableUpdateError('Amount must be greater than zero.')
            payable.amount = amount
        if due_date is not None:
            payable.due_date = due_date

        payable.save()
        return payable

    @staticmethod
    def delete_payable(*, payable_id):
        AccountPayable.objects.filter(id=payable_id).delete()
        logger.info("Payable %s deleted", payable_id)
