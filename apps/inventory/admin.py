from django.contrib import admin
from .models import InventoryLine, StockCount, StockCountItem


@admin.register(InventoryLine)
class InventoryLineAdmin(admin.ModelAdmin):
    list_display = ['product_code', 'product_name', 'store', 'color', 'size', 'quantity']
    list_filter = ['store']
    search_fields = ['product_code', 'product_name']
    readonly_fields = ['product_name', 'product_code', 'unit_price', 'created_at', 'updated_at']


class StockCountItemInline(admin.TabularInline):
    model = StockCountItem
    extra = 0
    fields = ['product_code', 'product_name', 'color', 'size', 'system_quantity', 'counted_quantity']
    readonly_fields = ['product_code', 'product_name', 'color', 'size', 'system_quantity']
    can_delete = False


@admin.register(StockCount)
class StockCountAdmin(admin.ModelAdmin):
    list_display = ['store', 'status', 'started_by', 'started_at', 'completed_at', 'total_unit_difference']
    list_filter = ['status', 'store']
    inlines = [StockCountItemInline]
