"""Per-store configuration of payment methods."""

import logging

from django.db import transaction

from apps.sales.models import PaymentMethodSetting

logger = logging.getLogger(__name__)


@transaction.atomic
def configure_payment_methods(*, store, entries):
    """
    Upsert the destination account and fee of each listed method.

    Each entry is ``{'method', 'account', 'fee_percentage'}``. Methods not
    listed keep their current configuration.

    Returns:
        list[PaymentMethodSetting]
    """
    configured = []
    for entry in entries:
        setting, _ = PaymentMethodSetting.objects.update_or_create(
            store=store,
            method=entry['method'],
            defaults={
                'account': entry.get('account'),
                'fee_percentage': entry.get('fee_percentage', 0),
            },
        )
        configured.append(setting)

    logger.info("Payment methods configured for %s: %s", store.name, [s.method for s in configured])
    return configured
