import pytest
from decimal import Decimal
from apps.catalog.models import Category, Supplier, Product
from apps.finance.models import BankAccount
from apps.inventory.models import InventoryLine
from apps.sales.models import Customer, PaymentMethodSetting, PaymentMethod
from apps.sales.services import open_register, finalize_sale


@pytest.fixture
def shirt(db):
    category = Category.objects.create(name='Camisas')
    supplier = Supplier.objects.create(name='Tecelagem Norte')
    return Product.objects.create(
        code='CAM-200',
        name='Camisa Linho',
        price=Decimal('150.00'),
        cost_price=Decimal('60.00'),
        category=category,
        supplier=supplier,
    )


@pytest.fixture
def shirt_stock(db, shirt, store):
    return InventoryLine.objects.create(product=shirt, store=store, color='Branco', size='M', quantity=5)


@pytest.fixture
def customer(db):
    return Customer.objects.create(name='Maria Souza', phone='11 99999-0000', cpf='123.456.789-00')


@pytest.fixture
def card_account(db):
    return BankAccount.objects.create(name='Adquirente', balance=Decimal('0.00'))


@pytest.fixture
def payment_settings(db, store, card_account):
    PaymentMethodSetting.objects.create(
        store=store, method=PaymentMethod.CREDIT_CARD, account=card_account, fee_percentage=Decimal('3.00'),
    )
    PaymentMethodSetting.objects.create(
        store=store, method=PaymentMethod.PIX, account=card_account, fee_percentage=Decimal('0.00'),
    )


@pytest.fixture
def register(db, store, employee_user):
    return open_register(store=store, opening_balance=Decimal('100.00'), user=employee_user)


@pytest.fixture
def cart(shirt, shirt_stock):
    return [{'product': shirt, 'color': 'Branco', 'size': 'M', 'quantity': 2}]


@pytest.fixture
def sale(db, store, employee_user, customer, cart, register, payment_settings):
    """Two shirts (300.00): 100.00 cash and 200.00 on credit card."""
    return finalize_sale(
        store=store,
        seller=employee_user,
        customer=customer,
        items=cart,
        payments=[
            {'method': PaymentMethod.CASH, 'amount': Decimal('100.00')},
            {'method': PaymentMethod.CREDIT_CARD, 'amount': Decimal('200.00')},
        ],
        user=employee_user,
    )
