from django.db.models import Q
from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema
from apps.accounts.permissions import IsInventoryStaff, IsStoreMember, filter_by_store_access
from apps.stores.exceptions import StoreAccessError
from apps.stores.services import resolve_store
from .models import InventoryLine, StockCount
from .serializers import (
    InventoryLineSerializer,
    InventoryFilterSerializer,
    LowStockQuerySerializer,
    SetStockLevelsSerializer,
    SetStockLevelsResponseSerializer,
    StockCountSerializer,
    StockCountDetailSerializer,
    StockCountFilterSerializer,
    StartStockCountSerializer,
    SaveCountProgressSerializer,
    DiscrepancyReportSerializer,
)
from .services import (
    set_stock_levels,
    low_stock,
    start_stock_count,
    save_count_progress,
    discrepancy_report,
    finalize_stock_count,
    InventoryServiceError,
    StockCountInProgressError,
)


class InventoryPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class InventoryLineViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Stock per store and variation.

    list: GET /api/inventory/lines/
    low_stock: GET /api/inventory/lines/low-stock/
    set_levels: POST /api/inventory/lines/set-levels/ (admin, manager)
    """

    serializer_class = InventoryLineSerializer
    pagination_class = InventoryPagination
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.action == 'set_levels':
            return [IsAuthenticated(), IsInventoryStaff()]
        return super().get_permissions()

    def get_queryset(self):
        queryset = filter_by_store_access(
            InventoryLine.objects.select_related('store'),
            self.request.user,
        )
        if self.action != 'list':
            return queryset

        filter_serializer = InventoryFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if params.get('store'):
            queryset = queryset.filter(store_id=params['store'])
        if params.get('product'):
            queryset = queryset.filter(product_id=params['product'])
        if params.get('search'):
            term = params['search']
            queryset = queryset.filter(Q(product_name__icontains=term) | Q(product_code__icontains=term))
        if params.get('in_stock') is True:
            queryset = queryset.filter(quantity__gt=0)
        return queryset

    @extend_schema(parameters=[LowStockQuerySerializer], responses={200: InventoryLineSerializer(many=True)})
    @action(detail=False, methods=['get'], url_path='low-stock')
    def low_stock(self, request):
        """Lines at or below the low-stock threshold."""
        serializer = LowStockQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data

        lines = filter_by_store_access(
            low_stock(threshold=params.get('threshold')),
            request.user,
        )
        if params.get('store'):
            lines = lines.filter(store_id=params['store'])

        page = self.paginate_queryset(lines)
        return self.get_paginated_response(InventoryLineSerializer(page, many=True).data)

    @extend_schema(request=SetStockLevelsSerializer, responses={200: SetStockLevelsResponseSerializer})
    @action(detail=False, methods=['post'], url_path='set-levels')
    def set_levels(self, request):
        """Bulk set stock quantities for one store."""
        serializer = SetStockLevelsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            store = resolve_store(request.user, serializer.validated_data.get('store'))
            result = set_stock_levels(store=store, entries=serializer.validated_data['entries'])
        except StoreAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except InventoryServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(result)


class StockCountViewSet(mixins.ListModelMixin,
                        mixins.RetrieveModelMixin,
                        viewsets.GenericViewSet):
    """
    Physical inventory counts.

    create: POST /api/inventory/counts/ - start a count (snapshots stock)
    save_progress: POST /api/inventory/counts/{id}/save-progress/
    discrepancies: GET /api/inventory/counts/{id}/discrepancies/
    finalize: POST /api/inventory/counts/{id}/finalize/
    """

    permission_classes = [IsAuthenticated, IsInventoryStaff, IsStoreMember]
    pagination_class = InventoryPagination

    def get_queryset(self):
        queryset = filter_by_store_access(
            StockCount.objects.select_related('store', 'started_by', 'completed_by'),
            self.request.user,
        )
        if self.action == 'retrieve':
            return queryset.prefetch_related('items')
        if self.action != 'list':
            return queryset

        filter_serializer = StockCountFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data
        if params.get('store'):
            queryset = queryset.filter(store_id=params['store'])
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        return queryset

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return StockCountDetailSerializer
        return StockCountSerializer

    @extend_schema(request=StartStockCountSerializer, responses={201: StockCountDetailSerializer})
    def create(self, request):
        serializer = StartStockCountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            store = resolve_store(request.user, serializer.validated_data.get('store'))
            stock_count = start_stock_count(store=store, user=request.user)
        except StoreAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except StockCountInProgressError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(StockCountDetailSerializer(stock_count).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=SaveCountProgressSerializer, responses={200: StockCountDetailSerializer})
    @action(detail=True, methods=['post'], url_path='save-progress')
    def save_progress(self, request, pk=None):
        stock_count = self.get_object()
        serializer = SaveCountProgressSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            stock_count = save_count_progress(
                stock_count_id=stock_count.id,
                counts=serializer.to_mapping(),
                user=request.user,
            )
        except InventoryServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(StockCountDetailSerializer(stock_count).data)

    @extend_schema(responses={200: DiscrepancyReportSerializer})
    @action(detail=True, methods=['get'])
    def discrepancies(self, request, pk=None):
        stock_count = self.get_object()
        report = discrepancy_report(stock_count)
        return Response(DiscrepancyReportSerializer(report).data)

    @extend_schema(request=None, responses={200: StockCountSerializer})
    @action(detail=True, methods=['post'])
    def finalize(self, request, pk=None):
        stock_count = self.get_object()
        try:
            stock_count = finalize_stock_count(stock_count_id=stock_count.id, user=request.user)
        except InventoryServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(StockCountSerializer(stock_count).data)
