from rest_framework import serializers
from .models import Category, Color, SizeGrade, Supplier, Product, ProductVariation, Gender


# =============================================================================
# Attributes
# =============================================================================

class NamedAttributeSerializer(serializers.ModelSerializer):
    """Shared validation for attributes identified by a unique name."""

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required')
        queryset = self.Meta.model.objects.filter(name__iexact=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError(f"'{value}' already exists")
        return value


class CategorySerializer(NamedAttributeSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'created_at']
        read_only_fields = ['id', 'created_at']


class ColorSerializer(NamedAttributeSerializer):
    class Meta:
        model = Color
        fields = ['id', 'name', 'created_at']
        read_only_fields = ['id', 'created_at']


class SupplierSerializer(NamedAttributeSerializer):
    class Meta:
        model = Supplier
        fields = ['id', 'name', 'contact', 'document', 'created_at']
        read_only_fields = ['id', 'created_at']


class SizeGradeSerializer(NamedAttributeSerializer):
    sizes = serializers.ListField(
        child=serializers.CharField(max_length=20),
        allow_empty=False,
    )

    class Meta:
        model = SizeGrade
        fields = ['id', 'name', 'sizes', 'created_at']
        read_only_fields = ['id', 'created_at']

    def validate_sizes(self, value):
        sizes = [size.strip() for size in value if size.strip()]
        if not sizes:
            raise serializers.ValidationError('At least one size is required')
        if len({size.upper() for size in sizes}) != len(sizes):
            raise serializers.ValidationError('Sizes must be unique')
        return sizes


# =============================================================================
# Products
# =============================================================================

class ProductVariationSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductVariation
        fields = ['id', 'color', 'size']
        read_only_fields = ['id']


class VariationInputSerializer(serializers.Serializer):
    color = serializers.CharField(max_length=60, allow_blank=True)
    size = serializers.CharField(max_length=20, allow_blank=True)


class ProductSerializer(serializers.ModelSerializer):
    """Product with nested variations and attribute names."""

    category_name = serializers.CharField(source='category.name', read_only=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    variations = ProductVariationSerializer(many=True, read_only=True)
    margin = serializers.DecimalField(max_digits=7, decimal_places=2, read_only=True)

    class Meta:
        model = Product
        fields = [
            'id',
            'code',
            'name',
            'description',
            'price',
            'cost_price',
            'margin',
            'barcode',
            'category',
            'category_name',
            'supplier',
            'supplier_name',
            'gender',
            'is_active',
            'variations',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ProductInputSerializer(serializers.Serializer):
    """Input for creating or updating a product."""

    code = serializers.CharField(max_length=50)
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    cost_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    barcode = serializers.CharField(max_length=64, required=False, allow_blank=True, default='')
    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.all())
    supplier = serializers.PrimaryKeyRelatedField(queryset=Supplier.objects.all())
    gender = serializers.ChoiceField(choices=Gender.choices, required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)
    variations = VariationInputSerializer(many=True, required=False)


class ProductFilterSerializer(serializers.Serializer):
    category = serializers.UUIDField(required=False)
    supplier = serializers.UUIDField(required=False)
    gender = serializers.ChoiceField(choices=Gender.choices, required=False)
    include_inactive = serializers.BooleanField(required=False, default=False)


class ProductSearchSerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, default='')
    limit = serializers.IntegerField(required=False, default=20, min_value=1, max_value=100)
