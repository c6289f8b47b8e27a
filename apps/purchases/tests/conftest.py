import pytest
from datetime import date
from decimal import Decimal
from apps.catalog.models import Category, Supplier, Product
from apps.finance.models import BankAccount, SubBalance, ExpenseCategory
from apps.purchases.services import PurchaseService


@pytest.fixture
def supplier(db):
    return Supplier.objects.create(name='Jeans & Cia')


@pytest.fixture
def jeans(db, supplier):
    category = Category.objects.create(name='Calcas')
    return Product.objects.create(
        code='CAL-010',
        name='Calca Jeans Reta',
        price=Decimal('219.90'),
        cost_price=Decimal('90.00'),
        category=category,
        supplier=supplier,
    )


@pytest.fixture
def rent_category(db):
    return ExpenseCategory.objects.create(name='Aluguel')


@pytest.fixture
def bank_account(db):
    account = BankAccount.objects.create(name='Conta Movimento', balance=Decimal('500.00'))
    SubBalance.objects.create(account=account, name='Reserva', amount=Decimal('200.00'))
    return account


@pytest.fixture
def purchase(db, supplier, jeans, store, finance_user):
    """Ten pairs at 100.00 paid in three installments."""
    return PurchaseService.create_merchandise_purchase(
        description='Reposicao jeans',
        supplier=supplier,
        store=store,
        issue_date=date(2025, 5, 2),
        items=[{
            'product': jeans,
            'color': 'Azul',
            'size': '40',
            'quantity': 10,
            'unit_cost': Decimal('100.00'),
        }],
        due_dates=[date(2025, 6, 2), date(2025, 7, 2), date(2025, 8, 2)],
        user=finance_user,
    )


@pytest.fixture
def first_installment(purchase):
    return purchase.payables.get(installment_number=1)
