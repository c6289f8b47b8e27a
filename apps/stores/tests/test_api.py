import pytest
from django.urls import reverse
from rest_framework import status
from apps.stores.models import Store


@pytest.mark.django_db
class TestStoreApi:

    def test_admin_sees_every_store(self, admin_client, store, other_store):
        response = admin_client.get(reverse('stores:store-list'))

        assert response.status_code == status.HTTP_200_OK
        assert {item['name'] for item in response.data} == {'Centro', 'Shopping Norte'}

    def test_store_bound_user_sees_own_store(self, employee_client, store, other_store):
        response = employee_client.get(reverse('stores:store-list'))

        assert [item['name'] for item in response.data] == ['Centro']

    def test_employee_cannot_create(self, employee_client):
        response = employee_client.post(reverse('stores:store-list'), {'name': 'Outlet'})
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_creates_store(self, admin_client):
        response = admin_client.post(reverse('stores:store-list'), {
            'name': '  Outlet  ',
            'location': 'Rodovia 10, km 3',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert Store.objects.get().name == 'Outlet'

    def test_duplicate_name_case_insensitive(self, admin_client, store):
        response = admin_client.post(reverse('stores:store-list'), {'name': 'centro'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_delete_unused_store(self, admin_client, other_store):
        response = admin_client.delete(reverse('stores:store-detail', args=[other_store.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Store.objects.filter(id=other_store.id).exists()

    def test_delete_store_in_use(self, admin_client, store, manager_user):
        response = admin_client.delete(reverse('stores:store-detail', args=[store.id]))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert Store.objects.filter(id=store.id).exists()
