import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.stores.models import Store


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def client_for(db):
    """Return a factory building a JWT-authenticated client for a user."""
    def _make(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return client
    return _make


# =============================================================================
# Stores
# =============================================================================

@pytest.fixture
def store(db):
    return Store.objects.create(name='Centro', location='Rua Direita, 100')


@pytest.fixture
def other_store(db):
    return Store.objects.create(name='Shopping Norte', location='Av. Norte, 2000')


# =============================================================================
# Users (one per role)
# =============================================================================

@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        username='Admin',
        role=UserRole.ADMIN,
        store=None,
    )


@pytest.fixture
def manager_user(db, store):
    return User.objects.create_user(
        email='manager@example.com',
        password='TestPass123!',
        username='Manager',
        role=UserRole.MANAGER,
        store=store,
    )


@pytest.fixture
def finance_user(db):
    return User.objects.create_user(
        email='finance@example.com',
        password='TestPass123!',
        username='Finance',
        role=UserRole.FINANCE,
        store=None,
    )


@pytest.fixture
def employee_user(db, store):
    return User.objects.create_user(
        email='employee@example.com',
        password='TestPass123!',
        username='Seller',
        role=UserRole.EMPLOYEE,
        store=store,
    )


@pytest.fixture
def admin_client(client_for, admin_user):
    return client_for(admin_user)


@pytest.fixture
def manager_client(client_for, manager_user):
    return client_for(manager_user)


@pytest.fixture
def finance_client(client_for, finance_user):
    return client_for(finance_user)


@pytest.fixture
def employee_client(client_for, employee_user):
    return client_for(employee_user)
