"""
Serializers for the inventory app.

Input Serializers:
    InventoryFilterSerializer - Query parameters for inventory listings
    StockLevelEntrySerializer / SetStockLevelsSerializer - Bulk stock adjustment
    StartStockCountSerializer - Open a count
    SaveCountProgressSerializer - Counted quantities

Response Serializers:
    InventoryLineSerializer, StockCountSerializer, StockCountDetailSerializer,
    DiscrepancyReportSerializer
"""

from rest_framework import serializers
from apps.accounts.serializers import UserSummarySerializer
from apps.catalog.models import Product
from apps.stores.models import Store
from .models import InventoryLine, StockCount, StockCountItem, StockCountStatus


# =============================================================================
# Inventory lines
# =============================================================================

class InventoryLineSerializer(serializers.ModelSerializer):
    store_name = serializers.CharField(source='store.name', read_only=True)

    class Meta:
        model = InventoryLine
        fields = [
            'id',
            'product',
            'product_code',
            'product_name',
            'store',
            'store_name',
            'color',
            'size',
            'quantity',
            'unit_price',
            'updated_at',
        ]
        read_only_fields = fields


class InventoryFilterSerializer(serializers.Serializer):
    store = serializers.UUIDField(required=False)
    product = serializers.UUIDField(required=False)
    search = serializers.CharField(required=False, min_length=2)
    in_stock = serializers.BooleanField(required=False)


class LowStockQuerySerializer(serializers.Serializer):
    store = serializers.UUIDField(required=False)
    threshold = serializers.IntegerField(required=False, min_value=0)


class StockLevelEntrySerializer(serializers.Serializer):
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())
    color = serializers.CharField(max_length=60)
    size = serializers.CharField(max_length=20)
    quantity = serializers.IntegerField(min_value=0)


class SetStockLevelsSerializer(serializers.Serializer):
    store = serializers.PrimaryKeyRelatedField(queryset=Store.objects.all(), required=False)
    entries = StockLevelEntrySerializer(many=True, allow_empty=False)


class SetStockLevelsResponseSerializer(serializers.Serializer):
    updated = serializers.IntegerField()
    created = serializers.IntegerField()


# =============================================================================
# Stock counts
# =============================================================================

class StockCountItemSerializer(serializers.ModelSerializer):
    difference = serializers.IntegerField(read_only=True)

    class Meta:
        model = StockCountItem
        fields = [
            'id',
            'product',
            'product_code',
            'product_name',
            'color',
            'size',
            'system_quantity',
            'counted_quantity',
            'difference',
            'cost_price',
        ]
        read_only_fields = fields


class StockCountSerializer(serializers.ModelSerializer):
    store_name = serializers.CharField(source='store.name', read_only=True)
    started_by = UserSummarySerializer(read_only=True)
    completed_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = StockCount
        fields = [
            'id',
            'store',
            'store_name',
            'status',
            'started_by',
            'started_at',
            'last_saved_at',
            'completed_by',
            'completed_at',
            'total_unit_difference',
            'total_cost_difference',
        ]
        read_only_fields = fields


class StockCountDetailSerializer(StockCountSerializer):
    items = StockCountItemSerializer(many=True, read_only=True)

    class Meta(StockCountSerializer.Meta):
        fields = StockCountSerializer.Meta.fields + ['items']
        read_only_fields = fields


class StockCountFilterSerializer(serializers.Serializer):
    store = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=StockCountStatus.choices, required=False)


class StartStockCountSerializer(serializers.Serializer):
    store = serializers.PrimaryKeyRelatedField(queryset=Store.objects.all(), required=False)


class CountEntrySerializer(serializers.Serializer):
    item = serializers.UUIDField()
    counted_quantity = serializers.IntegerField(min_value=0, allow_null=True)


class SaveCountProgressSerializer(serializers.Serializer):
    counts = CountEntrySerializer(many=True, allow_empty=False)

    def to_mapping(self):
        return {
            entry['item']: entry['counted_quantity']
            for entry in self.validated_data['counts']
        }


class DiscrepancyRowSerializer(serializers.Serializer):
    item_id = serializers.UUIDField()
    product_code = serializers.CharField()
    product_name = serializers.CharField()
    color = serializers.CharField()
    size = serializers.CharField()
    system_quantity = serializers.IntegerField()
    counted_quantity = serializers.IntegerField()
    difference = serializers.IntegerField()
    cost_difference = serializers.DecimalField(max_digits=12, decimal_places=2)


class DiscrepancyReportSerializer(serializers.Serializer):
    stock_count_id = serializers.UUIDField()
    total_items = serializers.IntegerField()
    counted_items = serializers.IntegerField()
    items = DiscrepancyRowSerializer(many=True)
    total_unit_difference = serializers.IntegerField()
    total_cost_difference = serializers.DecimalField(max_digits=12, decimal_places=2)
