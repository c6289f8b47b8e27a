from django.contrib import admin
from .models import (
    Customer,
    PaymentMethodSetting,
    CashRegisterSession,
    CashMovement,
    Sale,
    SaleItem,
    SalePayment,
    SaleReturn,
)


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone', 'cpf', 'email', 'created_at']
    search_fields = ['name', 'phone', 'cpf', 'email']


@admin.register(PaymentMethodSetting)
class PaymentMethodSettingAdmin(admin.ModelAdmin):
    list_display = ['store', 'method', 'account', 'fee_percentage', 'updated_at']
    list_filter = ['store', 'method']


class CashMovementInline(admin.TabularInline):
    model = CashMovement
    extra = 0
    fields = ['kind', 'amount', 'description', 'created_by', 'created_at']
    readonly_fields = fields


@admin.register(CashRegisterSession)
class CashRegisterSessionAdmin(admin.ModelAdmin):
    list_display = [
        'store',
        'status',
        'opened_at',
        'opening_balance',
        'current_cash_count',
        'closing_balance',
        'cash_count_difference',
        'total_sales',
    ]
    list_filter = ['status', 'store']
    readonly_fields = [f.name for f in CashRegisterSession._meta.fields]
    inlines = [CashMovementInline]


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    fields = ['product_code', 'product_name', 'color', 'size', 'quantity', 'unit_price', 'subtotal', 'returned_quantity']
    readonly_fields = fields


class SalePaymentInline(admin.TabularInline):
    model = SalePayment
    extra = 0
    fields = ['method', 'amount', 'fee_amount', 'net_amount', 'account']
    readonly_fields = fields


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ['reference', 'store', 'seller', 'customer', 'total_amount', 'status', 'created_at']
    list_filter = ['status', 'store', 'created_at']
    search_fields = ['customer__name', 'seller__email', 'seller__username']
    date_hierarchy = 'created_at'
    readonly_fields = [f.name for f in Sale._meta.fields]
    inlines = [SaleItemInline, SalePaymentInline]

    def has_add_permission(self, request):
        """Sales are only created through the point of sale."""
        return False


@admin.register(SaleReturn)
class SaleReturnAdmin(admin.ModelAdmin):
    list_display = ['sale', 'item', 'quantity', 'reason', 'processed_by', 'created_at']
    readonly_fields = ['sale', 'item', 'quantity', 'processed_by', 'created_at']
