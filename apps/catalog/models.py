from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid


# =============================================================================
# Product attributes
# =============================================================================

class Category(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'categories'
        ordering = ['name']
        verbose_name_plural = 'categories'

    def __str__(self):
        return self.name


class Color(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=60, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'colors'
        ordering = ['name']

    def __str__(self):
        return self.name


class SizeGrade(models.Model):
    """Named list of sizes, e.g. 'Adult' -> ['P', 'M', 'G', 'GG']."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=60, unique=True)
    sizes = models.JSONField(default=list)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'size_grades'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({', '.join(self.sizes)})"


class Supplier(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=150, unique=True)
    contact = models.CharField(max_length=150, blank=True)
    document = models.CharField(max_length=30, blank=True, help_text='CNPJ or CPF')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'suppliers'
        ordering = ['name']

    def __str__(self):
        return self.name


# =============================================================================
# Products
# =============================================================================

class Gender(models.TextChoices):
    FEMALE = 'female', 'Female'
    MALE = 'male', 'Male'
    UNISEX = 'unisex', 'Unisex'


class Product(models.Model):
    """
    Catalog product. Stock is tracked per store and variation in
    inventory lines, never on the product itself.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=50, unique=True, db_index=True)
    name = models.CharField(max_length=200, db_index=True)
    description = models.TextField(blank=True)

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text='Sale price',
    )
    cost_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    barcode = models.CharField(max_length=64, blank=True, db_index=True)

    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='products')
    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='products')
    gender = models.CharField(max_length=10, choices=Gender.choices, blank=True)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        ordering = ['name']
        indexes = [
            models.Index(fields=['category', 'is_active'], name='products_category_active_idx'),
        ]

    def __str__(self):
        return f"{self.code} - {self.name}"

    @property
    def margin(self):
        """Gross margin as a percentage of the sale price."""
        if not self.price:
            return Decimal('0.00')
        return ((self.price - self.cost_price) / self.price * 100).quantize(Decimal('0.01'))


class ProductVariation(models.Model):
    """One sellable color/size combination of a product."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='variations')
    color = models.CharField(max_length=60)
    size = models.CharField(max_length=20)

    class Meta:
        db_table = 'product_variations'
        ordering = ['color', 'size']
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'color', 'size'],
                name='unique_product_variation',
            ),
        ]

    def __str__(self):
        return f"{self.product.code} {self.color}/{self.size}"
