import pytest
from datetime import timedelta
from decimal import Decimal
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from apps.inventory.models import InventoryLine
from apps.purchases.models import AccountPayable, PayableStatus


# =============================================================================
# Purchases
# =============================================================================

@pytest.mark.django_db
class TestPurchaseApi:

    def _payload(self, supplier, jeans, store, **overrides):
        payload = {
            'description': 'Colecao verao',
            'supplier': str(supplier.id),
            'store': str(store.id),
            'issue_date': '2025-05-02',
            'items': [
                {'product': str(jeans.id), 'color': 'Azul', 'size': '38', 'quantity': 4, 'unit_cost': '95.00'},
                {'product': str(jeans.id), 'color': 'Azul', 'size': '40', 'quantity': 6, 'unit_cost': '95.00'},
            ],
            'due_dates': ['2025-06-02', '2025-07-02'],
        }
        payload.update(overrides)
        return payload

    def test_create(self, finance_client, supplier, jeans, store):
        response = finance_client.post(
            reverse('purchases:purchase-list'),
            self._payload(supplier, jeans, store),
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['total_amount'] == '950.00'
        assert len(response.data['items']) == 2
        assert [p['amount'] for p in response.data['payables']] == ['475.00', '475.00']
        assert InventoryLine.objects.get(store=store, size='40').quantity == 6

    def test_global_user_must_pick_store(self, finance_client, supplier, jeans, store):
        payload = self._payload(supplier, jeans, store)
        del payload['store']

        response = finance_client.post(reverse('purchases:purchase-list'), payload, format='json')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_empty_items_rejected(self, finance_client, supplier, jeans, store):
        response = finance_client.post(
            reverse('purchases:purchase-list'),
            self._payload(supplier, jeans, store, items=[]),
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_employee_forbidden(self, employee_client):
        response = employee_client.get(reverse('purchases:purchase-list'))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_and_retrieve(self, finance_client, purchase):
        response = finance_client.get(reverse('purchases:purchase-list'))
        assert response.data['count'] == 1

        response = finance_client.get(reverse('purchases:purchase-detail', args=[purchase.id]))
        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['payables']) == 3

    def test_delete(self, finance_client, purchase):
        response = finance_client.delete(reverse('purchases:purchase-detail', args=[purchase.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not AccountPayable.objects.exists()


# =============================================================================
# Payables
# =============================================================================

@pytest.mark.django_db
class TestPayableApi:

    def test_expense_launch(self, finance_client, rent_category, store):
        response = finance_client.post(reverse('purchases:payable-expenses'), {
            'description': 'Internet',
            'amount': '150.00',
            'expense_category': str(rent_category.id),
            'store': str(store.id),
            'issue_date': '2025-02-01',
            'due_dates': ['2025-02-10'],
            'is_recurring': True,
            'recurrence_months': 12,
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.data) == 12
        assert response.data[11]['due_date'] == '2026-01-10'

    def test_expense_below_one_cent_per_installment(self, finance_client, rent_category, store):
        response = finance_client.post(reverse('purchases:payable-expenses'), {
            'description': 'Tarifa',
            'amount': '0.02',
            'expense_category': str(rent_category.id),
            'store': str(store.id),
            'issue_date': '2025-02-01',
            'due_dates': ['2025-02-10', '2025-03-10', '2025-04-10'],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not AccountPayable.objects.exists()

    def test_pay(self, finance_client, first_installment, bank_account):
        url = reverse('purchases:payable-pay', args=[first_installment.id])
        response = finance_client.post(url, {'account': str(bank_account.id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'paid'
        assert response.data['paid_from_account_name'] == 'Conta Movimento'

    def test_pay_twice_returns_400(self, finance_client, first_installment, bank_account):
        url = reverse('purchases:payable-pay', args=[first_installment.id])
        finance_client.post(url, {'account': str(bank_account.id)})
        response = finance_client.post(url, {'account': str(bank_account.id)})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_pay_without_funds(self, finance_client, first_installment, bank_account):
        bank_account.balance = Decimal('0.00')
        bank_account.save()

        url = reverse('purchases:payable-pay', args=[first_installment.id])
        response = finance_client.post(url, {'account': str(bank_account.id)})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        first_installment.refresh_from_db()
        assert first_installment.status == PayableStatus.PENDING

    def test_filter_overdue(self, finance_client, purchase):
        overdue = purchase.payables.get(installment_number=1)
        overdue.due_date = timezone.localdate() - timedelta(days=3)
        overdue.save()
        purchase.payables.exclude(id=overdue.id).update(due_date=timezone.localdate() + timedelta(days=30))

        response = finance_client.get(reverse('purchases:payable-list'), {'status': 'overdue'})

        assert response.data['count'] == 1
        assert response.data['results'][0]['display_status'] == 'overdue'

    def test_summary(self, finance_client, purchase):
        purchase.payables.filter(installment_number=1).update(
            due_date=timezone.localdate() - timedelta(days=1),
        )
        purchase.payables.exclude(installment_number=1).update(
            due_date=timezone.localdate() + timedelta(days=10),
        )

        response = finance_client.get(reverse('purchases:payable-summary'))

        assert response.data['pending_count'] == 3
        assert response.data['pending_amount'] == '1000.00'
        assert response.data['overdue_count'] == 1
        assert response.data['overdue_amount'] == '333.34'

    def test_edit_and_delete(self, finance_client, first_installment):
        url = reverse('purchases:payable-detail', args=[first_installment.id])

        response = finance_client.patch(url, {'description': 'Parcela renegociada'}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['description'] == 'Parcela renegociada'

        assert finance_client.delete(url).status_code == status.HTTP_204_NO_CONTENT
