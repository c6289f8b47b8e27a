"""Sales target service."""

from decimal import Decimal

from django.db import transaction

from apps.accounts.models import SalesTarget
from .exceptions import InvalidSalesTargetError


@transaction.atomic
def set_sales_target(
    *,
    user,
    month: str,
    monthly_goal: Decimal,
    commission_rate: Decimal,
    bonus_commission_rate: Decimal,
) -> SalesTarget:
    """Create or replace the seller's target for a month."""
    if monthly_goal < 0:
        raise InvalidSalesTargetError("Monthly goal cannot be negative")
    for rate in (commission_rate, bonus_commission_rate):
        if rate < 0 or rate > 100:
            raise InvalidSalesTargetError("Commission rates must be between 0 and 100")

    target, _ = SalesTarget.objects.update_or_create(
        user=user,
        month=month,
        defaults={
            'monthly_goal': monthly_goal,
            'commission_rate': commission_rate,
            'bonus_commission_rate': bonus_commission_rate,
        },
    )
    return target
