import uuid
from decimal import Decimal
import django.core.validators
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion

PAYMENT_METHODS = [
    ('boleto', 'Boleto'),
    ('pix', 'Pix'),
    ('bank_transfer', 'Bank transfer'),
    ('credit_card', 'Credit card'),
    ('cash', 'Cash'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('finance', '0001_initial'),
        ('stores', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Purchase',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('description', models.CharField(max_length=255)),
                ('issue_date', models.DateField()),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('installment_count', models.PositiveSmallIntegerField(default=1)),
                ('payment_method', models.CharField(choices=PAYMENT_METHODS, default='boleto', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='purchases_created', to=settings.AUTH_USER_MODEL)),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchases', to='stores.store')),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchases', to='catalog.supplier')),
            ],
            options={
                'db_table': 'purchases',
                'ordering': ['-issue_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['store', 'issue_date'], name='purchases_store_date_idx'),
                    models.Index(fields=['supplier', 'issue_date'], name='purchases_supplier_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PurchaseItem',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('product_name', models.CharField(max_length=200)),
                ('product_code', models.CharField(max_length=50)),
                ('color', models.CharField(max_length=60)),
                ('size', models.CharField(max_length=20)),
                ('quantity', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('unit_cost', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchase_items', to='catalog.product')),
                ('purchase', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='purchases.purchase')),
            ],
            options={
                'db_table': 'purchase_items',
                'ordering': ['product_name', 'color', 'size'],
            },
        ),
        migrations.CreateModel(
            name='AccountPayable',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('description', models.CharField(max_length=255)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('issue_date', models.DateField()),
                ('due_date', models.DateField()),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('paid', 'Paid')], default='pending', max_length=10)),
                ('payment_method', models.CharField(choices=PAYMENT_METHODS, default='boleto', max_length=20)),
                ('installment_number', models.PositiveSmallIntegerField(default=1)),
                ('installment_count', models.PositiveSmallIntegerField(default=1)),
                ('payable_type', models.CharField(choices=[('merchandise', 'Merchandise'), ('expense', 'Expense')], max_length=12)),
                ('is_recurring', models.BooleanField(default=False)),
                ('paid_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payables_created', to=settings.AUTH_USER_MODEL)),
                ('employee', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payables', to=settings.AUTH_USER_MODEL)),
                ('expense_category', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='payables', to='finance.expensecategory')),
                ('paid_from_account', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payables_paid', to='finance.bankaccount')),
                ('purchase', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='payables', to='purchases.purchase')),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='payables', to='stores.store')),
                ('supplier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='payables', to='catalog.supplier')),
            ],
            options={
                'db_table': 'accounts_payable',
                'ordering': ['due_date', 'installment_number'],
                'indexes': [
                    models.Index(fields=['status', 'due_date'], name='payables_status_due_idx'),
                    models.Index(fields=['store', 'due_date'], name='payables_store_due_idx'),
                    models.Index(fields=['payable_type', 'paid_at'], name='payables_type_paid_idx'),
                ],
            },
        ),
    ]
