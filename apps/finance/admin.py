from django.contrib import admin
from .models import (
    BankAccount,
    SubBalance,
    AccountTransaction,
    RevenueCategory,
    ExpenseCategory,
    Revenue,
)


class SubBalanceInline(admin.TabularInline):
    model = SubBalance
    extra = 0


@admin.register(BankAccount)
class BankAccountAdmin(admin.ModelAdmin):
    list_display = ['name', 'account_type', 'balance', 'updated_at']
    list_filter = ['account_type']
    inlines = [SubBalanceInline]


@admin.register(AccountTransaction)
class AccountTransactionAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'account', 'transaction_type', 'amount', 'description', 'performed_by']
    list_filter = ['transaction_type', 'account']
    search_fields = ['description']
    date_hierarchy = 'created_at'

    def has_change_permission(self, request, obj=None):
        # Ledger entries are written by services only
        return False


@admin.register(Revenue)
class RevenueAdmin(admin.ModelAdmin):
    list_display = ['received_date', 'description', 'category', 'amount', 'destination_account', 'store']
    list_filter = ['category', 'store']
    search_fields = ['description']


admin.site.register(RevenueCategory)
admin.site.register(ExpenseCategory)
