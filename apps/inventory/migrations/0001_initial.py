import uuid
from decimal import Decimal
import django.core.validators
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('stores', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='InventoryLine',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('color', models.CharField(max_length=60)),
                ('size', models.CharField(max_length=20)),
                ('quantity', models.IntegerField(default=0, validators=[django.core.validators.MinValueValidator(0)])),
                ('product_name', models.CharField(blank=True, max_length=200)),
                ('product_code', models.CharField(blank=True, max_length=50)),
                ('unit_price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='inventory_lines', to='catalog.product')),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='inventory_lines', to='stores.store')),
            ],
            options={
                'db_table': 'inventory_lines',
                'ordering': ['product_name', 'color', 'size'],
                'indexes': [
                    models.Index(fields=['store', 'quantity'], name='inventory_store_qty_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('product', 'store', 'color', 'size'), name='unique_inventory_line'),
                    models.CheckConstraint(check=models.Q(('quantity__gte', 0)), name='inventory_quantity_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockCount',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('status', models.CharField(choices=[('in_progress', 'In progress'), ('completed', 'Completed')], default='in_progress', max_length=20)),
                ('started_at', models.DateTimeField(auto_now_add=True)),
                ('last_saved_at', models.DateTimeField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('total_unit_difference', models.IntegerField(default=0)),
                ('total_cost_difference', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('completed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='stock_counts_completed', to=settings.AUTH_USER_MODEL)),
                ('last_saved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('started_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_counts_started', to=settings.AUTH_USER_MODEL)),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_counts', to='stores.store')),
            ],
            options={
                'db_table': 'stock_counts',
                'ordering': ['-started_at'],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status', 'in_progress')), fields=('store',), name='one_open_stock_count_per_store'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockCountItem',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('product_name', models.CharField(max_length=200)),
                ('product_code', models.CharField(max_length=50)),
                ('color', models.CharField(max_length=60)),
                ('size', models.CharField(max_length=20)),
                ('system_quantity', models.IntegerField()),
                ('counted_quantity', models.IntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('cost_price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('inventory_line', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='count_items', to='inventory.inventoryline')),
                ('product', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='catalog.product')),
                ('stock_count', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='inventory.stockcount')),
            ],
            options={
                'db_table': 'stock_count_items',
                'ordering': ['product_name', 'color', 'size'],
            },
        ),
    ]
