from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.validators import MinValueValidator, MaxValueValidator, RegexValidator
from django.db import models
from decimal import Decimal
import uuid


class UserRole(models.TextChoices):
    """Back-office roles; each unlocks a set of areas."""
    ADMIN = 'admin', 'Administrator'
    MANAGER = 'manager', 'Manager'
    FINANCE = 'finance', 'Finance'
    EMPLOYEE = 'employee', 'Employee'


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', UserRole.ADMIN)
        extra_fields.setdefault('store', None)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Back-office user authenticated by email.

    A user without a store has access to every store; otherwise every
    store-scoped listing and operation is limited to ``store``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    username = models.CharField(max_length=100, blank=True)

    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.EMPLOYEE,
    )
    store = models.ForeignKey(
        'stores.Store',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='users',
    )

    # Password reset
    reset_token = models.CharField(max_length=64, blank=True, null=True)
    reset_requested_at = models.DateTimeField(null=True, blank=True)

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        ordering = ['username', 'email']
        indexes = [
            models.Index(fields=['email'], name='users_email_idx'),
            models.Index(fields=['role'], name='users_role_idx'),
        ]

    def __str__(self):
        return self.email

    def get_display_name(self):
        """Return username or email prefix."""
        return self.username or self.email.split('@')[0]

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN

    @property
    def has_global_access(self):
        """True when the user is not bound to a single store."""
        return self.store_id is None

    def can_access_store(self, store_id):
        return self.has_global_access or str(self.store_id) == str(store_id)


class SalesTarget(models.Model):
    """Monthly sales goal and commission rates for one seller."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='sales_targets',
    )
    month = models.CharField(
        max_length=7,
        validators=[RegexValidator(r'^\d{4}-(0[1-9]|1[0-2])$', 'Month must be in YYYY-MM format')],
        help_text='Month in YYYY-MM format',
    )
    monthly_goal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    commission_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00')), MaxValueValidator(Decimal('100.00'))],
        help_text='Commission percentage below the goal',
    )
    bonus_commission_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00')), MaxValueValidator(Decimal('100.00'))],
        help_text='Commission percentage once the goal is reached',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'sales_targets'
        ordering = ['-month']
        constraints = [
            models.UniqueConstraint(fields=['user', 'month'], name='unique_sales_target_per_month'),
        ]

    def __str__(self):
        return f"{self.user} {self.month}: {self.monthly_goal}"
