from rest_framework import serializers
from apps.accounts.models import User
from apps.catalog.models import Product
from apps.finance.models import BankAccount
from apps.stores.models import Store
from .models import (
    Customer,
    PaymentMethod,
    PaymentMethodSetting,
    CashRegisterSession,
    CashMovement,
    CashMovementKind,
    DiscountType,
    Sale,
    SaleItem,
    SalePayment,
    SaleReturn,
)


# =============================================================================
# Customers
# =============================================================================

class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ['id', 'name', 'phone', 'cpf', 'email', 'created_at']
        read_only_fields = ['id', 'created_at']
        extra_kwargs = {
            # Uniqueness is checked in validate_cpf so blank values are allowed
            'cpf': {'validators': []},
        }

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Customer name is required')
        return value

    def validate_cpf(self, value):
        value = (value or '').strip()
        if not value:
            return None
        queryset = Customer.objects.filter(cpf=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError('A customer with this CPF already exists')
        return value


class CustomerFilterSerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True, max_length=100)


# =============================================================================
# Payment settings
# =============================================================================

class PaymentMethodSettingSerializer(serializers.ModelSerializer):
    method_display = serializers.CharField(source='get_method_display', read_only=True)
    account_name = serializers.CharField(source='account.name', read_only=True, default=None)

    class Meta:
        model = PaymentMethodSetting
        fields = [
            'id',
            'store',
            'method',
            'method_display',
            'account',
            'account_name',
            'fee_percentage',
            'updated_at',
        ]
        read_only_fields = fields


class PaymentSettingEntrySerializer(serializers.Serializer):
    method = serializers.ChoiceField(choices=PaymentMethod.choices)
    account = serializers.PrimaryKeyRelatedField(
        queryset=BankAccount.objects.all(),
        required=False,
        allow_null=True,
    )
    fee_percentage = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=0,
        max_value=100,
        default=0,
    )

    def validate(self, attrs):
        if attrs['method'] == PaymentMethod.CASH and attrs.get('account'):
            raise serializers.ValidationError({'account': 'Cash goes to the register, not to an account'})
        return attrs


class BulkPaymentSettingsSerializer(serializers.Serializer):
    """Replace a store's configuration for the listed methods."""

    store = serializers.PrimaryKeyRelatedField(queryset=Store.objects.all())
    settings = PaymentSettingEntrySerializer(many=True, allow_empty=False)


# =============================================================================
# Cash register
# =============================================================================

class CashMovementSerializer(serializers.ModelSerializer):
    created_by_name = serializers.CharField(source='created_by.get_display_name', read_only=True)

    class Meta:
        model = CashMovement
        fields = ['id', 'kind', 'amount', 'description', 'created_by', 'created_by_name', 'created_at']
        read_only_fields = fields


class CashRegisterSessionSerializer(serializers.ModelSerializer):
    store_name = serializers.CharField(source='store.name', read_only=True)
    movements = CashMovementSerializer(many=True, read_only=True)

    class Meta:
        model = CashRegisterSession
        fields = [
            'id',
            'store',
            'store_name',
            'status',
            'opened_by',
            'opened_at',
            'opening_balance',
            'current_cash_count',
            'closed_by',
            'closed_at',
            'closing_balance',
            'cash_count_difference',
            'total_sales',
            'cash_total',
            'credit_total',
            'debit_total',
            'pix_total',
            'movements',
        ]
        read_only_fields = fields


class RegisterFilterSerializer(serializers.Serializer):
    store = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=['open', 'closed'], required=False)


class OpenRegisterSerializer(serializers.Serializer):
    store = serializers.PrimaryKeyRelatedField(queryset=Store.objects.all(), required=False)
    opening_balance = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class CashMovementInputSerializer(serializers.Serializer):
    kind = serializers.ChoiceField(choices=CashMovementKind.choices)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    description = serializers.CharField(max_length=255)


class CloseRegisterSerializer(serializers.Serializer):
    closing_balance = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


# =============================================================================
# Sales
# =============================================================================

class SaleItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = SaleItem
        fields = [
            'id',
            'product',
            'product_name',
            'product_code',
            'color',
            'size',
            'quantity',
            'unit_price',
            'unit_cost',
            'subtotal',
            'returned_quantity',
        ]
        read_only_fields = fields


class SalePaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = SalePayment
        fields = ['id', 'method', 'amount', 'fee_amount', 'net_amount', 'account']
        read_only_fields = fields


class SaleReturnSerializer(serializers.ModelSerializer):
    product_code = serializers.CharField(source='item.product_code', read_only=True)

    class Meta:
        model = SaleReturn
        fields = ['id', 'item', 'product_code', 'quantity', 'reason', 'processed_by', 'created_at']
        read_only_fields = fields


class SaleListSerializer(serializers.ModelSerializer):
    """Lightweight sale for list views."""

    reference = serializers.CharField(read_only=True)
    store_name = serializers.CharField(source='store.name', read_only=True)
    seller_name = serializers.CharField(source='seller.get_display_name', read_only=True)
    customer_name = serializers.CharField(source='customer.name', read_only=True)

    class Meta:
        model = Sale
        fields = [
            'id',
            'reference',
            'store',
            'store_name',
            'seller',
            'seller_name',
            'customer',
            'customer_name',
            'subtotal',
            'discount_amount',
            'total_amount',
            'status',
            'created_at',
        ]
        read_only_fields = fields


class SaleSerializer(SaleListSerializer):
    items = SaleItemSerializer(many=True, read_only=True)
    payments = SalePaymentSerializer(many=True, read_only=True)
    returns = SaleReturnSerializer(many=True, read_only=True)

    class Meta(SaleListSerializer.Meta):
        fields = SaleListSerializer.Meta.fields + [
            'session',
            'discount_type',
            'discount_value',
            'items',
            'payments',
            'returns',
        ]
        read_only_fields = fields


class CartItemSerializer(serializers.Serializer):
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.filter(is_active=True))
    color = serializers.CharField(max_length=60)
    size = serializers.CharField(max_length=20)
    quantity = serializers.IntegerField(min_value=1)


class PaymentInputSerializer(serializers.Serializer):
    method = serializers.ChoiceField(choices=PaymentMethod.choices)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('Payment amount must be greater than zero')
        return value


class FinalizeSaleSerializer(serializers.Serializer):
    store = serializers.PrimaryKeyRelatedField(queryset=Store.objects.all(), required=False)
    seller = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(is_active=True))
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all())
    items = CartItemSerializer(many=True, allow_empty=False)
    payments = PaymentInputSerializer(many=True)
    discount_type = serializers.ChoiceField(choices=DiscountType.choices, default=DiscountType.PERCENTAGE)
    discount_value = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, default=0)


class SaleFilterSerializer(serializers.Serializer):
    """
    Query parameters for sale listing.

    Query Parameters:
        store (UUID), seller (UUID), customer (UUID), session (UUID)
        date_from (date), date_to (date)
    """

    store = serializers.UUIDField(required=False)
    seller = serializers.UUIDField(required=False)
    customer = serializers.UUIDField(required=False)
    session = serializers.UUIDField(required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, attrs):
        if attrs.get('date_from') and attrs.get('date_to') and attrs['date_from'] > attrs['date_to']:
            raise serializers.ValidationError({'date_to': 'End date must be after start date'})
        return attrs


class ReturnInputSerializer(serializers.Serializer):
    item = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    reason = serializers.CharField(max_length=255)


class CustomerHistorySerializer(serializers.Serializer):
    customer = CustomerSerializer()
    total_spent = serializers.DecimalField(max_digits=14, decimal_places=2)
    sale_count = serializers.IntegerField()
    sales = SaleSerializer(many=True)
