from rest_framework import serializers
from apps.accounts.models import User
from apps.catalog.models import Product, Supplier
from apps.finance.models import BankAccount, ExpenseCategory
from apps.stores.models import Store
from .models import (
    Purchase,
    PurchaseItem,
    AccountPayable,
    PayableStatus,
    PayableType,
    PayablePaymentMethod,
)


def _validate_date_range(attrs, start='date_from', end='date_to'):
    if attrs.get(start) and attrs.get(end) and attrs[start] > attrs[end]:
        raise serializers.ValidationError({end: 'End date must be after start date'})
    return attrs


# =============================================================================
# Input Serializers
# =============================================================================

class PurchaseFilterSerializer(serializers.Serializer):
    """
    Query parameters for purchase listing.

    Query Parameters:
        store (UUID): Filter by store
        supplier (UUID): Filter by supplier
        date_from (date): Issued on or after this date
        date_to (date): Issued on or before this date
    """

    store = serializers.UUIDField(required=False)
    supplier = serializers.UUIDField(required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, attrs):
        return _validate_date_range(attrs)


class PurchaseItemInputSerializer(serializers.Serializer):
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())
    color = serializers.CharField(max_length=60)
    size = serializers.CharField(max_length=20)
    quantity = serializers.IntegerField(min_value=1)
    unit_cost = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)


class MerchandisePurchaseInputSerializer(serializers.Serializer):
    """Merchandise purchase: items received plus one due date per installment."""

    description = serializers.CharField(max_length=255)
    supplier = serializers.PrimaryKeyRelatedField(queryset=Supplier.objects.all())
    store = serializers.PrimaryKeyRelatedField(queryset=Store.objects.all(), required=False)
    issue_date = serializers.DateField()
    payment_method = serializers.ChoiceField(
        choices=PayablePaymentMethod.choices,
        default=PayablePaymentMethod.BOLETO,
    )
    items = PurchaseItemInputSerializer(many=True, allow_empty=False)
    due_dates = serializers.ListField(child=serializers.DateField(), allow_empty=False)


class ExpenseInputSerializer(serializers.Serializer):
    """
    Expense launch.

    With ``is_recurring`` only the first due date is used and the full
    amount repeats monthly for ``recurrence_months``.
    """

    description = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    expense_category = serializers.PrimaryKeyRelatedField(queryset=ExpenseCategory.objects.all())
    store = serializers.PrimaryKeyRelatedField(queryset=Store.objects.all(), required=False)
    issue_date = serializers.DateField()
    due_dates = serializers.ListField(child=serializers.DateField(), allow_empty=False)
    payment_method = serializers.ChoiceField(
        choices=PayablePaymentMethod.choices,
        default=PayablePaymentMethod.BOLETO,
    )
    supplier = serializers.PrimaryKeyRelatedField(
        queryset=Supplier.objects.all(),
        required=False,
        allow_null=True,
    )
    employee = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.all(),
        required=False,
        allow_null=True,
    )
    is_recurring = serializers.BooleanField(default=False)
    recurrence_months = serializers.IntegerField(min_value=1, max_value=120, default=1)

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('Amount must be greater than zero')
        return value


class PayableFilterSerializer(serializers.Serializer):
    """
    Query parameters for payable listing.

    Query Parameters:
        status (str): pending, paid or overdue
        payable_type (str): merchandise or expense
        store (UUID): Filter by store
        supplier (UUID): Filter by supplier
        due_from (date): Due on or after this date
        due_to (date): Due on or before this date
    """

    status = serializers.ChoiceField(
        choices=PayableStatus.choices + [('overdue', 'Overdue')],
        required=False,
    )
    payable_type = serializers.ChoiceField(choices=PayableType.choices, required=False)
    store = serializers.UUIDField(required=False)
    supplier = serializers.UUIDField(required=False)
    due_from = serializers.DateField(required=False)
    due_to = serializers.DateField(required=False)

    def validate(self, attrs):
        return _validate_date_range(attrs, 'due_from', 'due_to')


class PayPayableInputSerializer(serializers.Serializer):
    account = serializers.PrimaryKeyRelatedField(queryset=BankAccount.objects.all())


class PayableUpdateSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=255, required=False)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    due_date = serializers.DateField(required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class PurchaseItemSerializer(serializers.ModelSerializer):
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = PurchaseItem
        fields = [
            'id',
            'product',
            'product_name',
            'product_code',
            'color',
            'size',
            'quantity',
            'unit_cost',
            'subtotal',
        ]
        read_only_fields = fields


class AccountPayableSerializer(serializers.ModelSerializer):
    display_status = serializers.CharField(read_only=True)
    store_name = serializers.CharField(source='store.name', read_only=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True, default=None)
    expense_category_name = serializers.CharField(
        source='expense_category.name',
        read_only=True,
        default=None,
    )
    employee_name = serializers.SerializerMethodField()
    paid_from_account_name = serializers.CharField(
        source='paid_from_account.name',
        read_only=True,
        default=None,
    )

    class Meta:
        model = AccountPayable
        fields = [
            'id',
            'description',
            'amount',
            'issue_date',
            'due_date',
            'status',
            'display_status',
            'payment_method',
            'installment_number',
            'installment_count',
            'payable_type',
            'purchase',
            'supplier',
            'supplier_name',
            'store',
            'store_name',
            'expense_category',
            'expense_category_name',
            'employee',
            'employee_name',
            'is_recurring',
            'paid_at',
            'paid_from_account',
            'paid_from_account_name',
            'created_at',
        ]
        read_only_fields = fields

    def get_employee_name(self, obj):
        return obj.employee.get_display_name() if obj.employee else None


class PurchaseListSerializer(serializers.ModelSerializer):
    """Lightweight purchase for list views."""

    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    store_name = serializers.CharField(source='store.name', read_only=True)

    class Meta:
        model = Purchase
        fields = [
            'id',
            'description',
            'supplier',
            'supplier_name',
            'store',
            'store_name',
            'issue_date',
            'total_amount',
            'installment_count',
            'payment_method',
            'created_at',
        ]
        read_only_fields = fields


class PurchaseSerializer(PurchaseListSerializer):
    items = PurchaseItemSerializer(many=True, read_only=True)
    payables = AccountPayableSerializer(many=True, read_only=True)

    class Meta(PurchaseListSerializer.Meta):
        fields = PurchaseListSerializer.Meta.fields + ['items', 'payables', 'created_by']
        read_only_fields = fields


class PayablesSummarySerializer(serializers.Serializer):
    pending_count = serializers.IntegerField()
    pending_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    overdue_count = serializers.IntegerField()
    overdue_amount = serializers.DecimalField(max_digits=14, decimal_places=2)
