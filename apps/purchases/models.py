from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from decimal import Decimal
import uuid


class PayablePaymentMethod(models.TextChoices):
    BOLETO = 'boleto', 'Boleto'
    PIX = 'pix', 'Pix'
    BANK_TRANSFER = 'bank_transfer', 'Bank transfer'
    CREDIT_CARD = 'credit_card', 'Credit card'
    CASH = 'cash', 'Cash'


class Purchase(models.Model):
    """Merchandise bought from a supplier and received into a store."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    description = models.CharField(max_length=255)
    supplier = models.ForeignKey(
        'catalog.Supplier',
        on_delete=models.PROTECT,
        related_name='purchases',
    )
    store = models.ForeignKey(
        'stores.Store',
        on_delete=models.PROTECT,
        related_name='purchases',
    )
    issue_date = models.DateField()
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    installment_count = models.PositiveSmallIntegerField(default=1)
    payment_method = models.CharField(
        max_length=20,
        choices=PayablePaymentMethod.choices,
        default=PayablePaymentMethod.BOLETO,
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='purchases_created',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'purchases'
        ordering = ['-issue_date', '-created_at']
        indexes = [
            models.Index(fields=['store', 'issue_date'], name='purchases_store_date_idx'),
            models.Index(fields=['supplier', 'issue_date'], name='purchases_supplier_date_idx'),
        ]

    def __str__(self):
        return f"{self.description} - {self.total_amount}"


class PurchaseItem(models.Model):
    """One product variation received in a purchase."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    purchase = models.ForeignKey(Purchase, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.PROTECT,
        related_name='purchase_items',
    )
    product_name = models.CharField(max_length=200)
    product_code = models.CharField(max_length=50)
    color = models.CharField(max_length=60)
    size = models.CharField(max_length=20)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
    )

    class Meta:
        db_table = 'purchase_items'
        ordering = ['product_name', 'color', 'size']

    def __str__(self):
        return f"{self.product_code} {self.color}/{self.size} x{self.quantity}"

    @property
    def subtotal(self):
        return self.unit_cost * self.quantity


class PayableStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'


class PayableType(models.TextChoices):
    MERCHANDISE = 'merchandise', 'Merchandise'
    EXPENSE = 'expense', 'Expense'


class AccountPayable(models.Model):
    """
    One installment owed to a supplier, employee or service provider.

    Only ``pending`` and ``paid`` are stored; ``overdue`` is derived from
    the due date (see ``display_status``).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    description = models.CharField(max_length=255)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    issue_date = models.DateField()
    due_date = models.DateField()
    status = models.CharField(
        max_length=10,
        choices=PayableStatus.choices,
        default=PayableStatus.PENDING,
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PayablePaymentMethod.choices,
        default=PayablePaymentMethod.BOLETO,
    )
    installment_number = models.PositiveSmallIntegerField(default=1)
    installment_count = models.PositiveSmallIntegerField(default=1)
    payable_type = models.CharField(max_length=12, choices=PayableType.choices)

    # Origin
    purchase = models.ForeignKey(
        Purchase,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='payables',
    )
    supplier = models.ForeignKey(
        'catalog.Supplier',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='payables',
    )
    store = models.ForeignKey(
        'stores.Store',
        on_delete=models.PROTECT,
        related_name='payables',
    )
    expense_category = models.ForeignKey(
        'finance.ExpenseCategory',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='payables',
    )
    employee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payables',
    )
    is_recurring = models.BooleanField(default=False)

    # Settlement
    paid_at = models.DateTimeField(null=True, blank=True)
    paid_from_account = models.ForeignKey(
        'finance.BankAccount',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payables_paid',
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='payables_created',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'accounts_payable'
        ordering = ['due_date', 'installment_number']
        indexes = [
            models.Index(fields=['status', 'due_date'], name='payables_status_due_idx'),
            models.Index(fields=['store', 'due_date'], name='payables_store_due_idx'),
            models.Index(fields=['payable_type', 'paid_at'], name='payables_type_paid_idx'),
        ]

    def __str__(self):
        return f"{self.description}: {self.amount} due {self.due_date}"

    @property
    def is_overdue(self):
        return self.status == PayableStatus.PENDING and self.due_date < timezone.localdate()

    @property
    def display_status(self):
        """Status shown to users: pending, paid or overdue."""
        if self.is_overdue:
            return 'overdue'
        return self.status
