from django.contrib import admin
from .models import Category, Color, SizeGrade, Supplier, Product, ProductVariation


class ProductVariationInline(admin.TabularInline):
    model = ProductVariation
    extra = 0


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'category', 'supplier', 'price', 'cost_price', 'is_active']
    list_filter = ['category', 'supplier', 'gender', 'is_active']
    search_fields = ['code', 'name', 'barcode']
    inlines = [ProductVariationInline]


@admin.register(Category, Color)
class NamedAttributeAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


@admin.register(SizeGrade)
class SizeGradeAdmin(admin.ModelAdmin):
    list_display = ['name', 'sizes']
    search_fields = ['name']


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact', 'document']
    search_fields = ['name', 'document']
