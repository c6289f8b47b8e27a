import pytest
from decimal import Decimal
from apps.catalog.models import Category, Supplier, Product
from apps.inventory.models import InventoryLine


@pytest.fixture
def product(db):
    category = Category.objects.create(name='Vestidos')
    supplier = Supplier.objects.create(name='Atelier Rio')
    return Product.objects.create(
        code='VES-100',
        name='Vestido Midi',
        price=Decimal('199.90'),
        cost_price=Decimal('80.00'),
        category=category,
        supplier=supplier,
    )


@pytest.fixture
def line_m(db, product, store):
    return InventoryLine.objects.create(product=product, store=store, color='Azul', size='M', quantity=12)


@pytest.fixture
def line_g(db, product, store):
    return InventoryLine.objects.create(product=product, store=store, color='Azul', size='G', quantity=4)


@pytest.fixture
def other_store_line(db, product, other_store):
    return InventoryLine.objects.create(product=product, store=other_store, color='Azul', size='M', quantity=2)
