import pytest
from decimal import Decimal
from apps.catalog.models import Category, Color, SizeGrade, Supplier, Product, ProductVariation


@pytest.fixture
def category(db):
    return Category.objects.create(name='Camisetas')


@pytest.fixture
def supplier(db):
    return Supplier.objects.create(name='Malharia Sul', document='12.345.678/0001-90')


@pytest.fixture
def size_grade(db):
    return SizeGrade.objects.create(name='Adulto', sizes=['P', 'M', 'G', 'GG'])


@pytest.fixture
def color(db):
    return Color.objects.create(name='Preto')


@pytest.fixture
def product(db, category, supplier):
    product = Product.objects.create(
        code='CAM-001',
        name='Camiseta Basica',
        price=Decimal('59.90'),
        cost_price=Decimal('25.00'),
        category=category,
        supplier=supplier,
        gender='unisex',
    )
    ProductVariation.objects.create(product=product, color='Preto', size='M')
    ProductVariation.objects.create(product=product, color='Preto', size='G')
    return product
