import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.finance.models import BankAccount, Revenue


@pytest.mark.django_db
class TestBankAccountApi:

    def test_finance_creates_account(self, finance_client):
        response = finance_client.post(reverse('finance:account-list'), {
            'name': 'Banco Digital',
            'account_type': 'checking',
            'balance': '500.00',
            'sub_balances': [{'name': 'Impostos', 'amount': '120.00'}],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['total_balance'] == '620.00'

    def test_duplicate_name(self, finance_client, checking):
        response = finance_client.post(reverse('finance:account-list'), {
            'name': 'banco principal',
        }, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_employee_forbidden(self, employee_client, checking):
        response = employee_client.get(reverse('finance:account-list'))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_withdrawal_over_balance_returns_400(self, finance_client, checking):
        url = reverse('finance:account-movement', args=[checking.id])
        response = finance_client.post(url, {
            'transaction_type': 'withdrawal',
            'amount': '5000.00',
            'description': 'Too much',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'Insufficient balance' in response.data['detail']

    def test_deposit_appears_in_ledger(self, finance_client, checking):
        finance_client.post(reverse('finance:account-movement', args=[checking.id]), {
            'transaction_type': 'deposit',
            'amount': '75.50',
            'description': 'Aporte socio',
        })

        response = finance_client.get(reverse('finance:account-transactions', args=[checking.id]))
        assert response.data['count'] == 1
        assert response.data['results'][0]['amount'] == '75.50'
        assert response.data['results'][0]['performed_by_name'] == 'Finance'

    def test_transfer(self, finance_client, checking, savings):
        response = finance_client.post(reverse('finance:account-transfer'), {
            'from_account': str(checking.id),
            'to_account': str(savings.id),
            'amount': '100.00',
        })

        assert response.status_code == status.HTTP_201_CREATED
        checking.refresh_from_db()
        assert checking.balance == Decimal('900.00')

    def test_global_balance(self, finance_client, checking, savings):
        response = finance_client.get(reverse('finance:account-global-balance'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['global_balance'] == '1500.00'
        assert len(response.data['accounts']) == 2

    def test_delete(self, admin_client, checking):
        response = admin_client.delete(reverse('finance:account-detail', args=[checking.id]))
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not BankAccount.objects.exists()


@pytest.mark.django_db
class TestRevenueApi:

    def test_global_user_must_pick_store(self, finance_client, checking, revenue_category):
        response = finance_client.post(reverse('finance:revenue-list'), {
            'category': str(revenue_category.id),
            'description': 'Aluguel',
            'amount': '100.00',
            'received_date': '2025-03-01',
            'destination_account': str(checking.id),
        })
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_create_update_delete(self, finance_client, checking, revenue_category, store):
        response = finance_client.post(reverse('finance:revenue-list'), {
            'category': str(revenue_category.id),
            'description': 'Aluguel',
            'amount': '100.00',
            'received_date': '2025-03-01',
            'destination_account': str(checking.id),
            'store': str(store.id),
        })
        assert response.status_code == status.HTTP_201_CREATED
        revenue_id = response.data['id']

        url = reverse('finance:revenue-detail', args=[revenue_id])
        response = finance_client.patch(url, {'amount': '150.00'}, format='json')
        assert response.status_code == status.HTTP_200_OK
        checking.refresh_from_db()
        assert checking.balance == Decimal('1150.00')

        assert finance_client.delete(url).status_code == status.HTTP_204_NO_CONTENT
        checking.refresh_from_db()
        assert checking.balance == Decimal('1000.00')
        assert not Revenue.objects.exists()

    def test_zero_amount_rejected(self, finance_client, checking, revenue_category, store):
        response = finance_client.post(reverse('finance:revenue-list'), {
            'category': str(revenue_category.id),
            'description': 'Nada',
            'amount': '0.00',
            'received_date': '2025-03-01',
            'destination_account': str(checking.id),
            'store': str(store.id),
        })
        assert response.status_code == status.HTTP_400_BAD_REQUEST
