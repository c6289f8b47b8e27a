from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid


class InventoryLine(models.Model):
    """
    Stock of one product variation in one store.

    Product name, code and price are copied onto the line so listings and
    counts stay readable after catalog edits.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.PROTECT,
        related_name='inventory_lines',
    )
    store = models.ForeignKey(
        'stores.Store',
        on_delete=models.PROTECT,
        related_name='inventory_lines',
    )
    color = models.CharField(max_length=60)
    size = models.CharField(max_length=20)
    quantity = models.IntegerField(default=0, validators=[MinValueValidator(0)])

    # Snapshots
    product_name = models.CharField(max_length=200, blank=True)
    product_code = models.CharField(max_length=50, blank=True)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'inventory_lines'
        ordering = ['product_name', 'color', 'size']
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'store', 'color', 'size'],
                name='unique_inventory_line',
            ),
            models.CheckConstraint(
                check=models.Q(quantity__gte=0),
                name='inventory_quantity_non_negative',
            ),
        ]
        indexes = [
            models.Index(fields=['store', 'quantity'], name='inventory_store_qty_idx'),
        ]

    def __str__(self):
        return f"{self.product_code} {self.color}/{self.size} @ {self.store_id}: {self.quantity}"

    def save(self, *args, **kwargs):
        if not self.product_code:
            self.copy_product_snapshot()
        super().save(*args, **kwargs)

    def copy_product_snapshot(self):
        self.product_name = self.product.name
        self.product_code = self.product.code
        self.unit_price = self.product.price


class StockCountStatus(models.TextChoices):
    IN_PROGRESS = 'in_progress', 'In progress'
    COMPLETED = 'completed', 'Completed'


class StockCount(models.Model):
    """Physical inventory of one store, compared against system quantities."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    store = models.ForeignKey(
        'stores.Store',
        on_delete=models.PROTECT,
        related_name='stock_counts',
    )
    status = models.CharField(
        max_length=20,
        choices=StockCountStatus.choices,
        default=StockCountStatus.IN_PROGRESS,
    )

    started_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='stock_counts_started',
    )
    started_at = models.DateTimeField(auto_now_add=True)
    last_saved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    last_saved_at = models.DateTimeField(null=True, blank=True)
    completed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='stock_counts_completed',
    )
    completed_at = models.DateTimeField(null=True, blank=True)

    total_unit_difference = models.IntegerField(default=0)
    total_cost_difference = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    class Meta:
        db_table = 'stock_counts'
        ordering = ['-started_at']
        constraints = [
            # At most one open count per store
            models.UniqueConstraint(
                fields=['store'],
                condition=models.Q(status='in_progress'),
                name='one_open_stock_count_per_store',
            ),
        ]

    def __str__(self):
        return f"Count {self.store} {self.started_at:%Y-%m-%d} ({self.status})"

    @property
    def is_open(self):
        return self.status == StockCountStatus.IN_PROGRESS


class StockCountItem(models.Model):
    """Snapshot of one inventory line at count start, plus the counted quantity."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    stock_count = models.ForeignKey(StockCount, on_delete=models.CASCADE, related_name='items')
    inventory_line = models.ForeignKey(
        InventoryLine,
        on_delete=models.SET_NULL,
        null=True,
        related_name='count_items',
    )
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.SET_NULL,
        null=True,
        related_name='+',
    )
    product_name = models.CharField(max_length=200)
    product_code = models.CharField(max_length=50)
    color = models.CharField(max_length=60)
    size = models.CharField(max_length=20)

    system_quantity = models.IntegerField()
    counted_quantity = models.IntegerField(null=True, blank=True, validators=[MinValueValidator(0)])
    cost_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))

    class Meta:
        db_table = 'stock_count_items'
        ordering = ['product_name', 'color', 'size']

    def __str__(self):
        return f"{self.product_code} {self.color}/{self.size}"

    @property
    def difference(self):
        """Counted minus system quantity; an uncounted item counts as zero."""
        return (self.counted_quantity or 0) - self.system_quantity

    @property
    def cost_difference(self):
        return self.difference * self.cost_price
