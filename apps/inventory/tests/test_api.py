import pytest
from django.urls import reverse
from rest_framework import status
from apps.inventory.models import InventoryLine, StockCount


@pytest.mark.django_db
class TestInventoryLineApi:

    def test_store_bound_user_sees_only_own_store(self, manager_client, line_m, other_store_line):
        response = manager_client.get(reverse('inventory:line-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['id'] == str(line_m.id)

    def test_admin_sees_all_stores(self, admin_client, line_m, other_store_line):
        response = admin_client.get(reverse('inventory:line-list'))
        assert response.data['count'] == 2

    def test_search_by_code(self, admin_client, line_m):
        response = admin_client.get(reverse('inventory:line-list'), {'search': 'ves-1'})
        assert response.data['count'] == 1

    def test_low_stock(self, manager_client, line_m, line_g):
        response = manager_client.get(reverse('inventory:line-low-stock'))

        assert response.status_code == status.HTTP_200_OK
        assert [row['size'] for row in response.data['results']] == ['G']

    def test_set_levels_uses_users_store(self, manager_client, product, store):
        response = manager_client.post(reverse('inventory:line-set-levels'), {
            'entries': [{'product': str(product.id), 'color': 'Rosa', 'size': 'P', 'quantity': 7}],
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'updated': 0, 'created': 1}
        assert InventoryLine.objects.get(color='Rosa').store == store

    def test_set_levels_other_store_forbidden(self, manager_client, product, other_store):
        response = manager_client.post(reverse('inventory:line-set-levels'), {
            'store': str(other_store.id),
            'entries': [{'product': str(product.id), 'color': 'Rosa', 'size': 'P', 'quantity': 7}],
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_must_choose_store(self, admin_client, product):
        response = admin_client.post(reverse('inventory:line-set-levels'), {
            'entries': [{'product': str(product.id), 'color': 'Rosa', 'size': 'P', 'quantity': 7}],
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_employee_cannot_set_levels(self, employee_client, product):
        response = employee_client.post(reverse('inventory:line-set-levels'), {
            'entries': [{'product': str(product.id), 'color': 'Rosa', 'size': 'P', 'quantity': 7}],
        }, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestStockCountApi:

    def test_full_count_flow(self, manager_client, line_m, line_g):
        response = manager_client.post(reverse('inventory:count-list'), {}, format='json')
        assert response.status_code == status.HTTP_201_CREATED
        count_id = response.data['id']
        items = {item['size']: item['id'] for item in response.data['items']}

        response = manager_client.post(
            reverse('inventory:count-save-progress', args=[count_id]),
            {'counts': [
                {'item': items['M'], 'counted_quantity': 11},
                {'item': items['G'], 'counted_quantity': 5},
            ]},
            format='json',
        )
        assert response.status_code == status.HTTP_200_OK

        response = manager_client.get(reverse('inventory:count-discrepancies', args=[count_id]))
        assert response.data['total_unit_difference'] == 0
        assert len(response.data['items']) == 2

        response = manager_client.post(reverse('inventory:count-finalize', args=[count_id]))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'completed'

        line_m.refresh_from_db()
        assert line_m.quantity == 11

    def test_second_open_count_conflicts(self, manager_client, line_m):
        manager_client.post(reverse('inventory:count-list'), {}, format='json')
        response = manager_client.post(reverse('inventory:count-list'), {}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert StockCount.objects.count() == 1

    def test_finance_cannot_count(self, finance_client, store):
        response = finance_client.post(reverse('inventory:count-list'), {'store': str(store.id)}, format='json')
        assert response.status_code == status.HTTP_403_FORBIDDEN
