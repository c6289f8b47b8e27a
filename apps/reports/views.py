from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.accounts.models import User, UserRole
from apps.accounts.permissions import CanViewReports
from apps.stores.exceptions import StoreAccessError
from apps.stores.models import Store
from apps.stores.services import visible_store
from .exceptions import ReportsServiceError
from .queries import ReportQueries
from .serializers import (
    MonthQuerySerializer,
    StoreQuerySerializer,
    DateRangeQuerySerializer,
    SalesReportQuerySerializer,
    SellerPerformanceSerializer,
    DashboardSerializer,
    SalesReportSerializer,
    FinancialReportSerializer,
    ErrorSerializer,
)

FINANCIAL_ROLES = (UserRole.ADMIN, UserRole.FINANCE)

MONTH_PARAMETER = OpenApiParameter('month', OpenApiTypes.STR, description='Month (YYYY-MM)')
STORE_PARAMETER = OpenApiParameter('store', OpenApiTypes.UUID, description='Store ID')
DATE_RANGE_PARAMETERS = [
    OpenApiParameter('start_date', OpenApiTypes.DATE, description='Start date (YYYY-MM-DD)', required=True),
    OpenApiParameter('end_date', OpenApiTypes.DATE, description='End date (YYYY-MM-DD)', required=True),
    STORE_PARAMETER,
]


def _scoped_store(user, store_id):
    """Store instance the report is limited to (None for every store)."""
    store = get_object_or_404(Store, id=store_id) if store_id else None
    return visible_store(user, store)


def _performance_response(user, params):
    try:
        data = ReportQueries.seller_performance(user=user, month=params.get('month'))
    except ReportsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(SellerPerformanceSerializer(data).data)


@extend_schema(
    parameters=[MONTH_PARAMETER],
    responses={200: SellerPerformanceSerializer, 400: ErrorSerializer},
    description="Current user's monthly sales, target and commission.",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_performance(request):
    query_serializer = MonthQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    return _performance_response(request.user, query_serializer.validated_data)


@extend_schema(
    parameters=[MONTH_PARAMETER],
    responses={200: SellerPerformanceSerializer, 403: ErrorSerializer},
    description="A seller's monthly sales, target and commission.",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewReports])
def seller_performance(request, user_id):
    seller = get_object_or_404(User, id=user_id)
    if not request.user.can_access_store(seller.store_id):
        return Response(
            {'error': 'You can only view sellers of your own store'},
            status=status.HTTP_403_FORBIDDEN,
        )

    query_serializer = MonthQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    return _performance_response(seller, query_serializer.validated_data)


@extend_schema(
    parameters=[STORE_PARAMETER],
    responses={200: DashboardSerializer, 403: ErrorSerializer},
    description=(
        "Sales overview for today, this month and this year. The financial "
        "block is only filled for administrators and finance staff."
    ),
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    query_serializer = StoreQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    try:
        store = _scoped_store(request.user, query_serializer.validated_data.get('store'))
    except StoreAccessError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    data = ReportQueries.dashboard(
        store=store,
        include_financial=request.user.role in FINANCIAL_ROLES,
    )
    return Response(DashboardSerializer(data).data)


@extend_schema(
    parameters=DATE_RANGE_PARAMETERS + [
        OpenApiParameter('seller', OpenApiTypes.UUID, description='Seller ID'),
        OpenApiParameter(
            'product_sort',
            OpenApiTypes.STR,
            description="'quantity_desc', 'quantity_asc' or 'revenue_desc'",
            default='quantity_desc',
        ),
        OpenApiParameter('product_limit', OpenApiTypes.INT, default=20),
    ],
    responses={200: SalesReportSerializer, 400: ErrorSerializer, 403: ErrorSerializer},
    description='Sales, cost of goods and gross profit with breakdowns for a period.',
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewReports])
def sales_report(request):
    query_serializer = SalesReportQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        store = _scoped_store(request.user, params.get('store'))
    except StoreAccessError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    seller = get_object_or_404(User, id=params['seller']) if params.get('seller') else None

    try:
        data = ReportQueries.sales_report(
            start_date=params['start_date'],
            end_date=params['end_date'],
            store=store,
            seller=seller,
            product_sort=params['product_sort'],
            product_limit=params['product_limit'],
        )
    except ReportsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(SalesReportSerializer(data).data)


@extend_schema(
    parameters=DATE_RANGE_PARAMETERS,
    responses={200: FinancialReportSerializer, 400: ErrorSerializer, 403: ErrorSerializer},
    description='Result statement (sales, cost of goods, other revenues, expenses) for a period.',
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewReports])
def financial_report(request):
    query_serializer = DateRangeQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        store = _scoped_store(request.user, params.get('store'))
        data = ReportQueries.financial_report(
            start_date=params['start_date'],
            end_date=params['end_date'],
            store=store,
        )
    except StoreAccessError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except ReportsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(FinancialReportSerializer(data).data)
