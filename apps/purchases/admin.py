from django.contrib import admin
from django.utils.html import format_html
from .models import Purchase, PurchaseItem, AccountPayable


class PurchaseItemInline(admin.TabularInline):
    model = PurchaseItem
    extra = 0
    fields = ['product', 'product_code', 'color', 'size', 'quantity', 'unit_cost']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        """Items are created by the purchase service."""
        return False


class PayableInline(admin.TabularInline):
    model = AccountPayable
    extra = 0
    fields = ['description', 'amount', 'due_date', 'status', 'paid_at']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = ['description', 'supplier', 'store', 'total_amount', 'installment_count', 'issue_date']
    list_filter = ['store', 'supplier', 'issue_date']
    search_fields = ['description', 'supplier__name']
    readonly_fields = ['id', 'total_amount', 'created_by', 'created_at', 'updated_at']
    date_hierarchy = 'issue_date'
    inlines = [PurchaseItemInline, PayableInline]


@admin.register(AccountPayable)
class AccountPayableAdmin(admin.ModelAdmin):
    list_display = [
        'description',
        'payable_type',
        'store',
        'amount',
        'due_date',
        'status_badge',
        'paid_from_account',
    ]
    list_filter = ['status', 'payable_type', 'store', 'is_recurring', 'due_date']
    search_fields = ['description', 'supplier__name']
    readonly_fields = ['id', 'purchase', 'paid_at', 'paid_from_account', 'created_by', 'created_at', 'updated_at']
    date_hierarchy = 'due_date'

    def status_badge(self, obj):
        """Pending, paid or overdue as a colored badge."""
        colors = {
            'pending': ('#ffc107', '#333'),
            'paid': ('#28a745', 'white'),
            'overdue': ('#dc3545', 'white'),
        }
        status = obj.display_status
        bg, fg = colors.get(status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, status.title()
        )
    status_badge.short_description = 'Status'
