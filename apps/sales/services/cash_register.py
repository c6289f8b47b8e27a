"""
Cash register sessions.

A store has at most one open session. The session tracks the cash that
should be in the drawer (``current_cash_count``) and the day's totals per
payment family; closing it records the counted cash and the difference.
"""

import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.sales.models import (
    CashRegisterSession,
    CashMovement,
    CashMovementKind,
    RegisterStatus,
)
from .exceptions import (
    RegisterAlreadyOpenError,
    RegisterClosedError,
    InvalidCashMovementError,
)

logger = logging.getLogger(__name__)


def current_session(store):
    """Open session of the store, or None."""
    return CashRegisterSession.objects.filter(store=store, status=RegisterStatus.OPEN).first()


@transaction.atomic
def open_register(*, store, opening_balance: Decimal, user) -> CashRegisterSession:
    """
    Open the store's register.

    Raises:
        InvalidCashMovementError: If the opening balance is negative
        RegisterAlreadyOpenError: If a session is already open for the store
    """
    if opening_balance is None or opening_balance < 0:
        raise InvalidCashMovementError("Opening balance cannot be negative")

    if current_session(store) is not None:
        raise RegisterAlreadyOpenError(f"The register of {store.name} is already open")

    try:
        with transaction.atomic():
            session = CashRegisterSession.objects.create(
                store=store,
                opened_by=user,
                opening_balance=opening_balance,
                current_cash_count=opening_balance,
            )
    except IntegrityError:
        raise RegisterAlreadyOpenError(f"The register of {store.name} is already open")
    logger.info("Register opened at %s by %s with %s", store.name, user.email, opening_balance)
    return session


@transaction.atomic
def add_cash_movement(*, session_id, kind: str, amount: Decimal, description: str, user) -> CashMovement:
    """
    Record a supply or an outflow and update the drawer count.

    Raises:
        RegisterClosedError: If the session is closed
        InvalidCashMovementError: If amount is not positive, description is
            blank, or an outflow exceeds the cash in the drawer
    """
    session = CashRegisterSession.objects.select_for_update().get(id=session_id)
    if not session.is_open:
        raise RegisterClosedError("The register must be open to move cash")
    if amount is None or amount <= 0:
        raise InvalidCashMovementError("Amount must be greater than zero")
    description = (description or '').strip()
    if not description:
        raise InvalidCashMovementError("Description is required")

    if kind == CashMovementKind.OUTFLOW:
        if amount > session.current_cash_count:
            raise InvalidCashMovementError(
                f"Outflow of {amount} exceeds the cash in the register ({session.current_cash_count})"
            )
        session.current_cash_count -= amount
    else:
        session.current_cash_count += amount
    session.save(update_fields=['current_cash_count'])

    return CashMovement.objects.create(
        session=session,
        kind=kind,
        amount=amount,
        description=description,
        created_by=user,
    )


@transaction.atomic
def close_register(*, session_id, closing_balance: Decimal, user) -> CashRegisterSession:
    """
    Close a session with the counted cash.

    ``cash_count_difference`` is counted minus expected: negative means
    cash is missing.
    """
    session = CashRegisterSession.objects.select_for_update().get(id=session_id)
    if not session.is_open:
        raise RegisterClosedError("This register session is already closed")
    if closing_balance is None or closing_balance < 0:
        raise InvalidCashMovementError("Closing balance cannot be negative")

    session.status = RegisterStatus.CLOSED
    session.closing_balance = closing_balance
    session.cash_count_difference = closing_balance - session.current_cash_count
    session.closed_by = user
    session.closed_at = timezone.now()
    session.save()

    logger.info(
        "Register closed at %s: expected %s, counted %s",
        session.store_id, session.current_cash_count, closing_balance,
    )
    return session
