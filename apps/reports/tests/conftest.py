import pytest
from decimal import Decimal
from datetime import timedelta
from django.utils import timezone
from apps.accounts.models import User, UserRole
from apps.catalog.models import Category, Supplier, Product
from apps.finance.models import BankAccount, ExpenseCategory, RevenueCategory
from apps.finance.services import RevenueService
from apps.inventory.models import InventoryLine
from apps.purchases.models import AccountPayable, PayableStatus, PayableType
from apps.sales.models import Customer, PaymentMethod
from apps.sales.services import open_register, finalize_sale


@pytest.fixture
def dress(db):
    return Product.objects.create(
        code='VES-300',
        name='Vestido Midi',
        price=Decimal('100.00'),
        cost_price=Decimal('40.00'),
        category=Category.objects.create(name='Vestidos'),
        supplier=Supplier.objects.create(name='Atelie Sul'),
    )


@pytest.fixture
def stock(db, dress, store, other_store):
    """Centro: 20 pretos and 3 azuis (low). Norte: 5 pretos."""
    InventoryLine.objects.create(product=dress, store=store, color='Preto', size='M', quantity=20)
    InventoryLine.objects.create(product=dress, store=store, color='Azul', size='M', quantity=3)
    InventoryLine.objects.create(product=dress, store=other_store, color='Preto', size='M', quantity=5)


@pytest.fixture
def norte_seller(db, other_store):
    return User.objects.create_user(
        email='norte@example.com',
        password='TestPass123!',
        username='Vendedor Norte',
        role=UserRole.EMPLOYEE,
        store=other_store,
    )


@pytest.fixture
def customer(db):
    return Customer.objects.create(name='Clara Dias')


@pytest.fixture
def sales(db, dress, stock, store, other_store, employee_user, norte_seller, customer):
    """Centro sells 2 dresses (200.00), Norte sells 1 (100.00); all cash."""
    open_register(store=store, opening_balance=Decimal('0.00'), user=employee_user)
    open_register(store=other_store, opening_balance=Decimal('0.00'), user=norte_seller)

    centro = finalize_sale(
        store=store,
        seller=employee_user,
        customer=customer,
        items=[{'product': dress, 'color': 'Preto', 'size': 'M', 'quantity': 2}],
        payments=[{'method': PaymentMethod.CASH, 'amount': Decimal('200.00')}],
        user=employee_user,
    )
    norte = finalize_sale(
        store=other_store,
        seller=norte_seller,
        customer=customer,
        items=[{'product': dress, 'color': 'Preto', 'size': 'M', 'quantity': 1}],
        payments=[{'method': PaymentMethod.CASH, 'amount': Decimal('100.00')}],
        user=norte_seller,
    )
    return centro, norte


@pytest.fixture
def bank_account(db):
    return BankAccount.objects.create(name='Conta Central', balance=Decimal('1000.00'))


@pytest.fixture
def paid_expense(db, store, bank_account):
    today = timezone.localdate()
    return AccountPayable.objects.create(
        description='Conta de luz',
        amount=Decimal('50.00'),
        issue_date=today,
        due_date=today,
        status=PayableStatus.PAID,
        payable_type=PayableType.EXPENSE,
        store=store,
        expense_category=ExpenseCategory.objects.create(name='Energia'),
        paid_at=timezone.now(),
        paid_from_account=bank_account,
    )


@pytest.fixture
def overdue_payable(db, store):
    today = timezone.localdate()
    return AccountPayable.objects.create(
        description='Aluguel',
        amount=Decimal('80.00'),
        issue_date=today - timedelta(days=40),
        due_date=today - timedelta(days=10),
        payable_type=PayableType.EXPENSE,
        store=store,
    )


@pytest.fixture
def revenue(db, store, bank_account, admin_user):
    return RevenueService.record_revenue(
        category=RevenueCategory.objects.create(name='Sublocacao'),
        description='Vitrine',
        amount=Decimal('30.00'),
        received_date=timezone.localdate(),
        destination_account=bank_account,
        store=store,
        user=admin_user,
    )
