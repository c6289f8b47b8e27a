from rest_framework import serializers
from apps.stores.models import Store
from .models import (
    BankAccount,
    SubBalance,
    AccountTransaction,
    AccountType,
    TransactionType,
    RevenueCategory,
    ExpenseCategory,
    Revenue,
)


# =============================================================================
# Bank accounts
# =============================================================================

class SubBalanceSerializer(serializers.ModelSerializer):
    class Meta:
        model = SubBalance
        fields = ['id', 'name', 'amount']
        read_only_fields = ['id']


class SubBalanceInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=120, allow_blank=True)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)


class BankAccountSerializer(serializers.ModelSerializer):
    sub_balances = SubBalanceSerializer(many=True, read_only=True)
    total_balance = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = BankAccount
        fields = [
            'id',
            'name',
            'account_type',
            'balance',
            'sub_balances',
            'total_balance',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class BankAccountInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=120)
    account_type = serializers.ChoiceField(choices=AccountType.choices, default=AccountType.CHECKING)
    balance = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    sub_balances = SubBalanceInputSerializer(many=True, required=False)

    def validate_name(self, value):
        value = value.strip()
        queryset = BankAccount.objects.filter(name__iexact=value)
        instance = self.context.get('instance')
        if instance is not None:
            queryset = queryset.exclude(pk=instance.pk)
        if queryset.exists():
            raise serializers.ValidationError('An account with this name already exists')
        return value


class AccountTransactionSerializer(serializers.ModelSerializer):
    account_name = serializers.CharField(source='account.name', read_only=True)
    performed_by_name = serializers.SerializerMethodField()

    class Meta:
        model = AccountTransaction
        fields = [
            'id',
            'account',
            'account_name',
            'transaction_type',
            'amount',
            'description',
            'metadata',
            'performed_by',
            'performed_by_name',
            'created_at',
        ]
        read_only_fields = fields

    def get_performed_by_name(self, obj):
        return obj.performed_by.get_display_name() if obj.performed_by else None


class TransactionFilterSerializer(serializers.Serializer):
    transaction_type = serializers.ChoiceField(choices=TransactionType.choices, required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)


class MovementInputSerializer(serializers.Serializer):
    """Manual deposit or withdrawal."""

    transaction_type = serializers.ChoiceField(choices=[
        TransactionType.DEPOSIT,
        TransactionType.WITHDRAWAL,
    ])
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    description = serializers.CharField(max_length=255)


class TransferInputSerializer(serializers.Serializer):
    from_account = serializers.PrimaryKeyRelatedField(queryset=BankAccount.objects.all())
    to_account = serializers.PrimaryKeyRelatedField(queryset=BankAccount.objects.all())
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    description = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')


class TransferResponseSerializer(serializers.Serializer):
    outgoing = AccountTransactionSerializer()
    incoming = AccountTransactionSerializer()


class GlobalBalanceSerializer(serializers.Serializer):
    global_balance = serializers.DecimalField(max_digits=16, decimal_places=2)
    accounts = BankAccountSerializer(many=True)


# =============================================================================
# Categories
# =============================================================================

class RevenueCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = RevenueCategory
        fields = ['id', 'name', 'created_at']
        read_only_fields = ['id', 'created_at']


class ExpenseCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = ExpenseCategory
        fields = ['id', 'name', 'created_at']
        read_only_fields = ['id', 'created_at']


# =============================================================================
# Revenues
# =============================================================================

class RevenueSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True)
    destination_account_name = serializers.CharField(source='destination_account.name', read_only=True)
    store_name = serializers.CharField(source='store.name', read_only=True)

    class Meta:
        model = Revenue
        fields = [
            'id',
            'category',
            'category_name',
            'description',
            'amount',
            'received_date',
            'destination_account',
            'destination_account_name',
            'store',
            'store_name',
            'transaction',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class RevenueInputSerializer(serializers.Serializer):
    category = serializers.PrimaryKeyRelatedField(queryset=RevenueCategory.objects.all())
    description = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    received_date = serializers.DateField()
    destination_account = serializers.PrimaryKeyRelatedField(queryset=BankAccount.objects.all())
    store = serializers.PrimaryKeyRelatedField(queryset=Store.objects.all(), required=False)

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('Amount must be greater than zero')
        return value


class RevenueFilterSerializer(serializers.Serializer):
    store = serializers.UUIDField(required=False)
    category = serializers.UUIDField(required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
