import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from apps.accounts.models import UserRole
from apps.accounts.services import (
    register_user,
    authenticate_user,
    update_user,
    deactivate_user,
    set_sales_target,
    request_password_reset,
    confirm_password_reset,
    UserRegistrationError,
    StoreAssignmentError,
    InvalidCredentialsError,
    InactiveAccountError,
    SelfDeactivationError,
    InvalidSalesTargetError,
    UserNotFoundError,
    InvalidTokenError,
)


@pytest.mark.django_db
class TestRegisterUser:

    def test_finance_can_have_global_access(self):
        user = register_user(
            email='fin@example.com', password='Pass123!x', username='Fin',
            role=UserRole.FINANCE, store=None,
        )
        assert user.has_global_access

    def test_manager_requires_store(self):
        with pytest.raises(StoreAssignmentError):
            register_user(
                email='mgr@example.com', password='Pass123!x', username='Mgr',
                role=UserRole.MANAGER, store=None,
            )

    def test_email_uniqueness_ignores_case(self, employee_user, store):
        with pytest.raises(UserRegistrationError):
            register_user(
                email='EMPLOYEE@EXAMPLE.COM', password='Pass123!x',
                role=UserRole.EMPLOYEE, store=store,
            )


@pytest.mark.django_db
class TestAuthenticateUser:

    def test_success_updates_last_login(self, employee_user):
        user = authenticate_user(email='employee@example.com', password='TestPass123!')
        assert user.last_login is not None

    def test_unknown_email(self):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email='ghost@example.com', password='x')

    def test_inactive(self, inactive_user):
        with pytest.raises(InactiveAccountError):
            authenticate_user(email='inactive@example.com', password='TestPass123!')


@pytest.mark.django_db
class TestPasswordReset:

    def test_email_is_case_insensitive(self, employee_user):
        token = request_password_reset(email='EMPLOYEE@example.com')
        employee_user.refresh_from_db()
        assert employee_user.reset_token == token

    def test_token_is_single_use(self, employee_user):
        token = request_password_reset(email=employee_user.email)
        confirm_password_reset(token=token, new_password='Another123!')

        with pytest.raises(InvalidTokenError):
            confirm_password_reset(token=token, new_password='Again123!')

    def test_expired_token(self, settings, employee_user):
        token = request_password_reset(email=employee_user.email)
        employee_user.refresh_from_db()
        employee_user.reset_requested_at = timezone.now() - timedelta(seconds=settings.PASSWORD_RESET_TIMEOUT + 60)
        employee_user.save()

        with pytest.raises(InvalidTokenError):
            confirm_password_reset(token=token, new_password='Another123!')
        employee_user.refresh_from_db()
        assert employee_user.check_password('TestPass123!')


@pytest.mark.django_db
class TestUserManagement:

    def test_update_keeps_store_when_omitted(self, employee_user, store):
        user = update_user(user_id=employee_user.id, username='Renamed')
        assert user.username == 'Renamed'
        assert user.store == store

    def test_update_unknown_user(self):
        import uuid
        with pytest.raises(UserNotFoundError):
            update_user(user_id=uuid.uuid4(), username='x')

    def test_deactivate_self_rejected(self, admin_user):
        with pytest.raises(SelfDeactivationError):
            deactivate_user(user_id=admin_user.id, performed_by=admin_user)

    def test_deactivate_clears_reset_token(self, admin_user, employee_user):
        request_password_reset(email=employee_user.email)
        user = deactivate_user(user_id=employee_user.id, performed_by=admin_user)
        assert user.is_active is False
        assert user.reset_token is None


@pytest.mark.django_db
class TestSetSalesTarget:

    def test_rate_out_of_range(self, employee_user):
        with pytest.raises(InvalidSalesTargetError):
            set_sales_target(
                user=employee_user, month='2025-01',
                monthly_goal=Decimal('1000'), commission_rate=Decimal('101'),
                bonus_commission_rate=Decimal('5'),
            )

    def test_negative_goal(self, employee_user):
        with pytest.raises(InvalidSalesTargetError):
            set_sales_target(
                user=employee_user, month='2025-01',
                monthly_goal=Decimal('-1'), commission_rate=Decimal('1'),
                bonus_commission_rate=Decimal('5'),
            )
