import pytest
from django.utils import timezone
from apps.accounts.models import User, UserRole


@pytest.fixture
def inactive_user(db, store):
    """Create and return a deactivated employee."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        username='Former Seller',
        role=UserRole.EMPLOYEE,
        store=store,
        is_active=False,
    )


@pytest.fixture
def user_with_reset_token(employee_user):
    """Employee with a pending password reset token."""
    employee_user.reset_token = 'valid-reset-token-12345'
    employee_user.reset_requested_at = timezone.now()
    employee_user.save()
    return employee_user
