import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.sales.models import Customer, PaymentMethodSetting, RegisterStatus


# =============================================================================
# Customers
# =============================================================================

@pytest.mark.django_db
class TestCustomerApi:

    def test_create_with_blank_cpf(self, employee_client):
        url = reverse('sales:customer-list')
        first = employee_client.post(url, {'name': 'Ana', 'cpf': ''})
        second = employee_client.post(url, {'name': 'Bruno', 'cpf': ''})

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_201_CREATED
        assert Customer.objects.filter(cpf__isnull=True).count() == 2

    def test_duplicate_cpf(self, employee_client, customer):
        response = employee_client.post(reverse('sales:customer-list'), {
            'name': 'Outra Maria',
            'cpf': customer.cpf,
        })
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_search(self, employee_client, customer):
        Customer.objects.create(name='Joao Lima')
        response = employee_client.get(reverse('sales:customer-list'), {'search': 'souza'})

        assert response.data['count'] == 1
        assert response.data['results'][0]['name'] == 'Maria Souza'

    def test_finance_cannot_use_pos(self, finance_client):
        response = finance_client.get(reverse('sales:customer-list'))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_history(self, employee_client, customer, sale):
        response = employee_client.get(reverse('sales:customer-history', args=[customer.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['sale_count'] == 1
        assert response.data['total_spent'] == '300.00'

    def test_delete_with_sales(self, employee_client, customer, sale):
        response = employee_client.delete(reverse('sales:customer-detail', args=[customer.id]))
        assert response.status_code == status.HTTP_409_CONFLICT


# =============================================================================
# Payment settings
# =============================================================================

@pytest.mark.django_db
class TestPaymentSettingsApi:

    def test_configure(self, finance_client, store, card_account):
        response = finance_client.post(reverse('sales:payment-setting-list'), {
            'store': str(store.id),
            'settings': [
                {'method': 'debit_card', 'account': str(card_account.id), 'fee_percentage': '1.50'},
                {'method': 'cash'},
            ],
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert PaymentMethodSetting.objects.get(store=store, method='debit_card').fee_percentage == Decimal('1.50')

    def test_fee_above_100(self, finance_client, store, card_account):
        response = finance_client.post(reverse('sales:payment-setting-list'), {
            'store': str(store.id),
            'settings': [{'method': 'pix', 'account': str(card_account.id), 'fee_percentage': '101'}],
        }, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_employee_forbidden(self, employee_client):
        response = employee_client.get(reverse('sales:payment-setting-list'))
        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Cash register
# =============================================================================

@pytest.mark.django_db
class TestRegisterApi:

    def test_open_defaults_to_own_store(self, employee_client, store):
        response = employee_client.post(reverse('sales:register-list'), {'opening_balance': '150.00'})

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['store'] == store.id
        assert response.data['current_cash_count'] == '150.00'

    def test_open_twice_conflict(self, employee_client, register):
        response = employee_client.post(reverse('sales:register-list'), {'opening_balance': '0.00'})
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_open_for_other_store_forbidden(self, employee_client, other_store):
        response = employee_client.post(reverse('sales:register-list'), {
            'store': str(other_store.id),
            'opening_balance': '10.00',
        })
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_current(self, employee_client, register):
        response = employee_client.get(reverse('sales:register-current'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == str(register.id)

    def test_current_when_closed(self, employee_client, store):
        response = employee_client.get(reverse('sales:register-current'))
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_outflow_and_close(self, employee_client, register):
        movements_url = reverse('sales:register-movements', args=[register.id])
        response = employee_client.post(movements_url, {
            'kind': 'outflow',
            'amount': '40.00',
            'description': 'Pagamento motoboy',
        })
        assert response.status_code == status.HTTP_201_CREATED

        response = employee_client.post(reverse('sales:register-close', args=[register.id]), {
            'closing_balance': '60.00',
        })
        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == RegisterStatus.CLOSED
        assert response.data['cash_count_difference'] == '0.00'

    def test_outflow_too_large(self, employee_client, register):
        response = employee_client.post(reverse('sales:register-movements', args=[register.id]), {
            'kind': 'outflow',
            'amount': '500.00',
            'description': 'Sangria',
        })
        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Sales
# =============================================================================

@pytest.mark.django_db
class TestSaleApi:

    def _payload(self, employee_user, customer, shirt, **overrides):
        payload = {
            'seller': str(employee_user.id),
            'customer': str(customer.id),
            'items': [{'product': str(shirt.id), 'color': 'Branco', 'size': 'M', 'quantity': 1}],
            'payments': [{'method': 'cash', 'amount': '150.00'}],
        }
        payload.update(overrides)
        return payload

    def test_finalize(self, employee_client, employee_user, customer, shirt, shirt_stock, register):
        response = employee_client.post(
            reverse('sales:sale-list'),
            self._payload(employee_user, customer, shirt),
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['total_amount'] == '150.00'
        assert response.data['seller_name'] == 'Seller'
        assert len(response.data['items']) == 1
        shirt_stock.refresh_from_db()
        assert shirt_stock.quantity == 4

    def test_empty_cart(self, employee_client, employee_user, customer, shirt, register):
        response = employee_client.post(
            reverse('sales:sale-list'),
            self._payload(employee_user, customer, shirt, items=[]),
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_insufficient_stock(self, employee_client, employee_user, customer, shirt, shirt_stock, register):
        payload = self._payload(
            employee_user, customer, shirt,
            items=[{'product': str(shirt.id), 'color': 'Branco', 'size': 'M', 'quantity': 9}],
            payments=[{'method': 'cash', 'amount': '1350.00'}],
        )
        response = employee_client.post(reverse('sales:sale-list'), payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'Insufficient stock' in response.data['error']

    def test_list_scoped_to_store(self, manager_client, admin_client, sale):
        assert manager_client.get(reverse('sales:sale-list')).data['count'] == 1
        assert admin_client.get(reverse('sales:sale-list')).data['count'] == 1

    def test_return(self, employee_client, sale):
        item = sale.items.get()
        response = employee_client.post(reverse('sales:sale-returns', args=[sale.id]), {
            'item': str(item.id),
            'quantity': 1,
            'reason': 'Cliente desistiu',
        })

        assert response.status_code == status.HTTP_201_CREATED
        detail = employee_client.get(reverse('sales:sale-detail', args=[sale.id]))
        assert detail.data['status'] == 'partially_returned'
        assert detail.data['items'][0]['returned_quantity'] == 1

    def test_return_too_many(self, employee_client, sale):
        item = sale.items.get()
        response = employee_client.post(reverse('sales:sale-returns', args=[sale.id]), {
            'item': str(item.id),
            'quantity': 3,
            'reason': 'Defeito',
        })
        assert response.status_code == status.HTTP_400_BAD_REQUEST
