from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from decimal import Decimal
import uuid


# =============================================================================
# Customers
# =============================================================================

class Customer(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=150)
    phone = models.CharField(max_length=30, blank=True)
    cpf = models.CharField(max_length=14, unique=True, null=True, blank=True)
    email = models.EmailField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        ordering = ['name']
        indexes = [
            models.Index(fields=['name'], name='customers_name_idx'),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        # Blank CPFs are stored as NULL so they don't collide on the unique index
        self.cpf = (self.cpf or '').strip() or None
        super().save(*args, **kwargs)


# =============================================================================
# Payment methods
# =============================================================================

class PaymentMethod(models.TextChoices):
    CASH = 'cash', 'Cash'
    PIX = 'pix', 'Pix'
    DEBIT_CARD = 'debit_card', 'Debit card'
    CREDIT_CARD = 'credit_card', 'Credit card'
    INSTALLMENTS_2X = 'installments_2x', 'Credit card 2x'
    INSTALLMENTS_3X = 'installments_3x', 'Credit card 3x'
    INSTALLMENTS_4X = 'installments_4x', 'Credit card 4x'
    INSTALLMENTS_5X = 'installments_5x', 'Credit card 5x'
    INSTALLMENTS_6X = 'installments_6x', 'Credit card 6x'


CREDIT_METHODS = (
    PaymentMethod.CREDIT_CARD,
    PaymentMethod.INSTALLMENTS_2X,
    PaymentMethod.INSTALLMENTS_3X,
    PaymentMethod.INSTALLMENTS_4X,
    PaymentMethod.INSTALLMENTS_5X,
    PaymentMethod.INSTALLMENTS_6X,
)


class PaymentMethodSetting(models.Model):
    """Destination account and card fee of a payment method in a store."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    store = models.ForeignKey(
        'stores.Store',
        on_delete=models.CASCADE,
        related_name='payment_settings',
    )
    method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    account = models.ForeignKey(
        'finance.BankAccount',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payment_settings',
    )
    fee_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))],
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payment_method_settings'
        ordering = ['store', 'method']
        constraints = [
            models.UniqueConstraint(fields=['store', 'method'], name='unique_payment_setting'),
        ]

    def __str__(self):
        return f"{self.get_method_display()} @ {self.store_id}: {self.fee_percentage}%"


# =============================================================================
# Cash register
# =============================================================================

class RegisterStatus(models.TextChoices):
    OPEN = 'open', 'Open'
    CLOSED = 'closed', 'Closed'


class CashRegisterSession(models.Model):
    """
    One opening-to-closing cycle of a store's cash register.

    ``current_cash_count`` follows every cash sale, supply and outflow; the
    summary totals follow every sale payment.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    store = models.ForeignKey(
        'stores.Store',
        on_delete=models.PROTECT,
        related_name='register_sessions',
    )
    status = models.CharField(max_length=10, choices=RegisterStatus.choices, default=RegisterStatus.OPEN)

    opened_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='register_sessions_opened',
    )
    opened_at = models.DateTimeField(auto_now_add=True)
    opening_balance = models.DecimalField(max_digits=12, decimal_places=2)
    current_cash_count = models.DecimalField(max_digits=12, decimal_places=2)

    closed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='register_sessions_closed',
    )
    closed_at = models.DateTimeField(null=True, blank=True)
    closing_balance = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    cash_count_difference = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    # Daily summary
    total_sales = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    cash_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    credit_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    debit_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    pix_total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))

    class Meta:
        db_table = 'cash_register_sessions'
        ordering = ['-opened_at']
        constraints = [
            models.UniqueConstraint(
                fields=['store'],
                condition=models.Q(status='open'),
                name='one_open_register_per_store',
            ),
        ]

    def __str__(self):
        return f"Register {self.store_id} ({self.status}) opened {self.opened_at:%Y-%m-%d %H:%M}"

    @property
    def is_open(self):
        return self.status == RegisterStatus.OPEN


class CashMovementKind(models.TextChoices):
    SUPPLY = 'supply', 'Supply'
    OUTFLOW = 'outflow', 'Outflow'


class CashMovement(models.Model):
    """Cash put into (supply) or taken out of (outflow) the register."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session = models.ForeignKey(CashRegisterSession, on_delete=models.CASCADE, related_name='movements')
    kind = models.CharField(max_length=10, choices=CashMovementKind.choices)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    description = models.CharField(max_length=255)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='cash_movements',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'cash_movements'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.kind} {self.amount}: {self.description}"


# =============================================================================
# Sales
# =============================================================================

class DiscountType(models.TextChoices):
    AMOUNT = 'amount', 'Amount'
    PERCENTAGE = 'percentage', 'Percentage'


class SaleStatus(models.TextChoices):
    COMPLETED = 'completed', 'Completed'
    PARTIALLY_RETURNED = 'partially_returned', 'Partially returned'


class Sale(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    store = models.ForeignKey('stores.Store', on_delete=models.PROTECT, related_name='sales')
    session = models.ForeignKey(CashRegisterSession, on_delete=models.PROTECT, related_name='sales')
    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='sales',
    )
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='sales')

    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    discount_type = models.CharField(
        max_length=10,
        choices=DiscountType.choices,
        default=DiscountType.PERCENTAGE,
    )
    discount_value = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20, choices=SaleStatus.choices, default=SaleStatus.COMPLETED)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='sales_registered',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'sales'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['store', 'created_at'], name='sales_store_date_idx'),
            models.Index(fields=['seller', 'created_at'], name='sales_seller_date_idx'),
            models.Index(fields=['customer', 'created_at'], name='sales_customer_date_idx'),
        ]

    def __str__(self):
        return f"Sale {str(self.id)[:8]} - {self.total_amount}"

    @property
    def reference(self):
        """Short identifier shown on receipts and ledger entries."""
        return str(self.id)[:8].upper()


class SaleItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey('catalog.Product', on_delete=models.PROTECT, related_name='sale_items')
    product_name = models.CharField(max_length=200)
    product_code = models.CharField(max_length=50)
    color = models.CharField(max_length=60)
    size = models.CharField(max_length=20)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    unit_cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    returned_quantity = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'sale_items'
        ordering = ['product_name', 'color', 'size']
        constraints = [
            models.CheckConstraint(
                check=models.Q(returned_quantity__lte=models.F('quantity')),
                name='returned_not_above_sold',
            ),
        ]

    def __str__(self):
        return f"{self.product_code} {self.color}/{self.size} x{self.quantity}"

    @property
    def returnable_quantity(self):
        return self.quantity - self.returned_quantity


class SalePayment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name='payments')
    method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    fee_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    net_amount = models.DecimalField(max_digits=12, decimal_places=2)
    account = models.ForeignKey(
        'finance.BankAccount',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sale_payments',
    )

    class Meta:
        db_table = 'sale_payments'

    def __str__(self):
        return f"{self.get_method_display()}: {self.amount}"


class SaleReturn(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name='returns')
    item = models.ForeignKey(SaleItem, on_delete=models.CASCADE, related_name='returns')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    reason = models.CharField(max_length=255)
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='sale_returns_processed',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'sale_returns'
        ordering = ['-created_at']

    def __str__(self):
        return f"Return {self.quantity} x {self.item.product_code}"
