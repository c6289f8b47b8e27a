from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.accounts.permissions import IsAdminOrReadOnly, IsInventoryStaff
from .models import Category, Color, SizeGrade, Supplier, Product
from .serializers import (
    CategorySerializer,
    ColorSerializer,
    SizeGradeSerializer,
    SupplierSerializer,
    ProductSerializer,
    ProductInputSerializer,
    ProductFilterSerializer,
    ProductSearchSerializer,
)
from .services import (
    create_product,
    update_product,
    delete_product,
    search_products,
    CatalogServiceError,
    ProductInUseError,
)


class CatalogPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


# =============================================================================
# Attributes (administrators manage, everyone reads)
# =============================================================================

class AttributeViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated, IsAdminOrReadOnly]


class CategoryViewSet(AttributeViewSet):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer


class ColorViewSet(AttributeViewSet):
    queryset = Color.objects.all()
    serializer_class = ColorSerializer


class SizeGradeViewSet(AttributeViewSet):
    queryset = SizeGrade.objects.all()
    serializer_class = SizeGradeSerializer


class SupplierViewSet(AttributeViewSet):
    queryset = Supplier.objects.all()
    serializer_class = SupplierSerializer


# =============================================================================
# Products
# =============================================================================

class ProductViewSet(viewsets.ModelViewSet):
    """
    Product catalog.

    Any authenticated user can browse and search (the point of sale needs
    it); administrators and managers maintain products.

    search: GET /api/catalog/products/search/?q=cam
    """

    serializer_class = ProductSerializer
    pagination_class = CatalogPagination
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_permissions(self):
        if self.action in ['create', 'partial_update', 'destroy']:
            return [IsAuthenticated(), IsInventoryStaff()]
        return [IsAuthenticated()]

    def get_queryset(self):
        queryset = Product.objects.select_related('category', 'supplier').prefetch_related('variations')

        if self.action != 'list':
            return queryset

        filter_serializer = ProductFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if not params.get('include_inactive'):
            queryset = queryset.filter(is_active=True)
        if params.get('category'):
            queryset = queryset.filter(category_id=params['category'])
        if params.get('supplier'):
            queryset = queryset.filter(supplier_id=params['supplier'])
        if params.get('gender'):
            queryset = queryset.filter(gender=params['gender'])
        return queryset

    @extend_schema(request=ProductInputSerializer, responses={201: ProductSerializer})
    def create(self, request):
        serializer = ProductInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            product = create_product(**serializer.validated_data)
        except CatalogServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ProductInputSerializer, responses={200: ProductSerializer})
    def partial_update(self, request, pk=None):
        product = self.get_object()
        serializer = ProductInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            product = update_product(product_id=product.id, **serializer.validated_data)
        except CatalogServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        product = self.get_queryset().get(id=product.id)
        return Response(ProductSerializer(product).data)

    def destroy(self, request, pk=None):
        product = self.get_object()
        try:
            delete_product(product_id=product.id)
        except ProductInUseError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        parameters=[
            OpenApiParameter('q', OpenApiTypes.STR, description='Name or code fragment (min. 2 characters)'),
            OpenApiParameter('limit', OpenApiTypes.INT, description='Maximum results (default 20)'),
        ],
        responses={200: ProductSerializer(many=True)},
    )
    @action(detail=False, methods=['get'])
    def search(self, request):
        """Search active products by name or code."""
        serializer = ProductSearchSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        products = search_products(
            serializer.validated_data['q'],
            limit=serializer.validated_data['limit'],
        )
        return Response(ProductSerializer(products, many=True).data)
