import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole, SalesTarget


# =============================================================================
# Login / Logout / Current user
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, employee_user):
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': 'employee@example.com',
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data['tokens']
        assert response.data['user']['role'] == 'employee'
        assert response.data['user']['store_name'] == 'Centro'

    def test_login_is_case_insensitive_on_email(self, api_client, employee_user):
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': 'Employee@Example.com',
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_200_OK

    def test_login_wrong_password(self, api_client, employee_user):
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': 'employee@example.com',
            'password': 'WrongPass123!',
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_inactive_user(self, api_client, inactive_user):
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': 'inactive@example.com',
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestLogout:
    """Tests for POST /api/auth/logout/"""

    def test_logout_blacklists_refresh_token(self, client_for, employee_user, api_client):
        refresh = RefreshToken.for_user(employee_user)
        client = client_for(employee_user)

        response = client.post(reverse('users:logout'), {'refresh': str(refresh)})
        assert response.status_code == status.HTTP_200_OK

        refresh_response = api_client.post(reverse('token_refresh'), {'refresh': str(refresh)})
        assert refresh_response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout_invalid_token(self, employee_client):
        response = employee_client.post(reverse('users:logout'), {'refresh': 'garbage'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET /api/auth/user/"""

    def test_get_current_user(self, employee_client, employee_user):
        response = employee_client.get(reverse('users:current-user'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == employee_user.email

    def test_admin_shows_global_access(self, admin_client):
        response = admin_client.get(reverse('users:current-user'))

        assert response.data['store'] is None
        assert response.data['store_name'] == 'Global access'

    def test_unauthenticated(self, api_client):
        response = api_client.get(reverse('users:current-user'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Password reset
# =============================================================================

@pytest.mark.django_db
class TestPasswordReset:

    def test_request_reset_creates_token(self, api_client, employee_user):
        response = api_client.post(reverse('users:password-reset'), {'email': employee_user.email})

        assert response.status_code == status.HTTP_200_OK
        employee_user.refresh_from_db()
        assert employee_user.reset_token
        # Tokens are never echoed back outside development
        assert 'token' not in response.data

    def test_request_reset_unknown_email_does_not_leak(self, api_client):
        response = api_client.post(reverse('users:password-reset'), {'email': 'nobody@example.com'})
        assert response.status_code == status.HTTP_200_OK

    def test_confirm_reset(self, api_client, user_with_reset_token):
        response = api_client.post(reverse('users:password-reset-confirm'), {
            'token': 'valid-reset-token-12345',
            'new_password': 'BrandNewPass456!',
            'new_password_confirm': 'BrandNewPass456!',
        })

        assert response.status_code == status.HTTP_200_OK
        user_with_reset_token.refresh_from_db()
        assert user_with_reset_token.check_password('BrandNewPass456!')
        assert user_with_reset_token.reset_token is None

    def test_confirm_reset_invalid_token(self, api_client):
        response = api_client.post(reverse('users:password-reset-confirm'), {
            'token': 'nope',
            'new_password': 'BrandNewPass456!',
            'new_password_confirm': 'BrandNewPass456!',
        })
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_confirm_reset_mismatch(self, api_client, user_with_reset_token):
        response = api_client.post(reverse('users:password-reset-confirm'), {
            'token': 'valid-reset-token-12345',
            'new_password': 'BrandNewPass456!',
            'new_password_confirm': 'Different456!',
        })
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'new_password_confirm' in response.data


# =============================================================================
# User administration
# =============================================================================

@pytest.mark.django_db
class TestUserAdministration:
    """Tests for /api/auth/users/"""

    def test_admin_registers_employee(self, admin_client, store):
        response = admin_client.post(reverse('users:user-list'), {
            'email': 'new.seller@example.com',
            'password': 'SecurePass123!',
            'username': 'New Seller',
            'role': 'employee',
            'store': str(store.id),
        })

        assert response.status_code == status.HTTP_201_CREATED
        user = User.objects.get(email='new.seller@example.com')
        assert user.role == UserRole.EMPLOYEE
        assert user.store == store

    def test_employee_requires_store(self, admin_client):
        response = admin_client.post(reverse('users:user-list'), {
            'email': 'nostore@example.com',
            'password': 'SecurePass123!',
            'username': 'No Store',
            'role': 'employee',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'requires a store' in response.data['error']

    def test_duplicate_email_rejected(self, admin_client, employee_user, store):
        response = admin_client.post(reverse('users:user-list'), {
            'email': 'EMPLOYEE@example.com',
            'password': 'SecurePass123!',
            'username': 'Dup',
            'role': 'employee',
            'store': str(store.id),
        })
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_non_admin_cannot_register(self, manager_client, store):
        response = manager_client.post(reverse('users:user-list'), {
            'email': 'x@example.com',
            'password': 'SecurePass123!',
            'username': 'X',
            'role': 'employee',
            'store': str(store.id),
        })
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_users_filters_by_role(self, admin_client, employee_user, manager_user):
        response = admin_client.get(reverse('users:user-list'), {'role': 'manager'})

        assert response.status_code == status.HTTP_200_OK
        emails = [u['email'] for u in response.data]
        assert emails == ['manager@example.com']

    def test_update_user_role_and_store(self, admin_client, employee_user, other_store):
        url = reverse('users:user-detail', args=[employee_user.id])
        response = admin_client.patch(url, {
            'role': 'manager',
            'store': str(other_store.id),
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        employee_user.refresh_from_db()
        assert employee_user.role == UserRole.MANAGER
        assert employee_user.store == other_store

    def test_update_to_global_access_requires_admin_or_finance(self, admin_client, employee_user):
        url = reverse('users:user-detail', args=[employee_user.id])
        response = admin_client.patch(url, {'store': None}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_delete_deactivates(self, admin_client, employee_user):
        url = reverse('users:user-detail', args=[employee_user.id])
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        employee_user.refresh_from_db()
        assert employee_user.is_active is False

    def test_admin_cannot_deactivate_self(self, admin_client, admin_user):
        url = reverse('users:user-detail', args=[admin_user.id])
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        admin_user.refresh_from_db()
        assert admin_user.is_active is True


@pytest.mark.django_db
class TestSalesTargets:
    """Tests for /api/auth/users/{id}/sales-targets/"""

    def test_set_and_replace_target(self, admin_client, employee_user):
        url = reverse('users:user-sales-targets', args=[employee_user.id])
        payload = {
            'month': '2025-03',
            'monthly_goal': '10000.00',
            'commission_rate': '3.00',
            'bonus_commission_rate': '5.00',
        }
        assert admin_client.post(url, payload).status_code == status.HTTP_201_CREATED

        payload['monthly_goal'] = '12000.00'
        admin_client.post(url, payload)

        target = SalesTarget.objects.get(user=employee_user, month='2025-03')
        assert target.monthly_goal == Decimal('12000.00')
        assert SalesTarget.objects.filter(user=employee_user).count() == 1

    def test_invalid_month(self, admin_client, employee_user):
        url = reverse('users:user-sales-targets', args=[employee_user.id])
        response = admin_client.post(url, {
            'month': '2025-13',
            'monthly_goal': '10000.00',
            'commission_rate': '3.00',
            'bonus_commission_rate': '5.00',
        })
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_targets(self, admin_client, employee_user):
        SalesTarget.objects.create(
            user=employee_user, month='2025-01', monthly_goal=Decimal('5000'),
            commission_rate=Decimal('2'), bonus_commission_rate=Decimal('4'),
        )
        url = reverse('users:user-sales-targets', args=[employee_user.id])
        response = admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['month'] == '2025-01'
