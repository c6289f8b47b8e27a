from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum
from decimal import Decimal
import uuid


class AccountType(models.TextChoices):
    CHECKING = 'checking', 'Checking'
    SAVINGS = 'savings', 'Savings'
    CASH = 'cash', 'Cash'
    INVESTMENT = 'investment', 'Investment'


class BankAccount(models.Model):
    """
    Bank or cash account.

    ``balance`` is the freely available amount; sub-balances are earmarked
    amounts (reserves, investments) that still count toward the total.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=120, unique=True)
    account_type = models.CharField(max_length=20, choices=AccountType.choices, default=AccountType.CHECKING)
    balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'bank_accounts'
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def sub_balance_total(self):
        return self.sub_balances.aggregate(total=Sum('amount'))['total'] or Decimal('0.00')

    @property
    def total_balance(self):
        return self.balance + self.sub_balance_total


class SubBalance(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    account = models.ForeignKey(BankAccount, on_delete=models.CASCADE, related_name='sub_balances')
    name = models.CharField(max_length=120)
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )

    class Meta:
        db_table = 'bank_sub_balances'
        ordering = ['name']

    def __str__(self):
        return f"{self.account.name} / {self.name}: {self.amount}"


class TransactionType(models.TextChoices):
    DEPOSIT = 'deposit', 'Deposit'
    WITHDRAWAL = 'withdrawal', 'Withdrawal'
    TRANSFER_IN = 'transfer_in', 'Transfer in'
    TRANSFER_OUT = 'transfer_out', 'Transfer out'


class AccountTransaction(models.Model):
    """Ledger entry. Amounts are always positive; the type gives the direction."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    account = models.ForeignKey(BankAccount, on_delete=models.CASCADE, related_name='transactions')
    transaction_type = models.CharField(max_length=20, choices=TransactionType.choices)
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    description = models.CharField(max_length=255)
    metadata = models.JSONField(default=dict, blank=True)
    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='account_transactions',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'account_transactions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['account', '-created_at'], name='account_tx_account_date_idx'),
        ]

    def __str__(self):
        return f"{self.get_transaction_type_display()} {self.amount} ({self.account.name})"

    @property
    def is_credit(self):
        return self.transaction_type in (TransactionType.DEPOSIT, TransactionType.TRANSFER_IN)


class RevenueCategory(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'revenue_categories'
        ordering = ['name']
        verbose_name_plural = 'revenue categories'

    def __str__(self):
        return self.name


class ExpenseCategory(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'expense_categories'
        ordering = ['name']
        verbose_name_plural = 'expense categories'

    def __str__(self):
        return self.name


class Revenue(models.Model):
    """Income outside of sales (rent, services, interest) credited to an account."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    category = models.ForeignKey(RevenueCategory, on_delete=models.PROTECT, related_name='revenues')
    description = models.CharField(max_length=255)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    received_date = models.DateField()
    destination_account = models.ForeignKey(BankAccount, on_delete=models.PROTECT, related_name='revenues')
    store = models.ForeignKey('stores.Store', on_delete=models.PROTECT, related_name='revenues')
    transaction = models.OneToOneField(
        AccountTransaction,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='revenue',
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='revenues_created',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'revenues'
        ordering = ['-received_date', '-created_at']
        indexes = [
            models.Index(fields=['store', 'received_date'], name='revenues_store_date_idx'),
        ]

    def __str__(self):
        return f"{self.description}: {self.amount}"
