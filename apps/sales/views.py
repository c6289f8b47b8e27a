from decimal import Decimal
from django.db.models import Q, Sum, ProtectedError
from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.accounts.permissions import (
    IsSalesStaff,
    IsFinanceStaff,
    IsStoreMember,
    filter_by_store_access,
)
from apps.inventory.services import InventoryServiceError
from apps.stores.exceptions import StoreAccessError
from apps.stores.models import Store
from apps.stores.services import resolve_store
from .models import Customer, PaymentMethodSetting, CashRegisterSession, Sale
from .serializers import (
    CustomerSerializer,
    CustomerFilterSerializer,
    CustomerHistorySerializer,
    PaymentMethodSettingSerializer,
    BulkPaymentSettingsSerializer,
    CashRegisterSessionSerializer,
    RegisterFilterSerializer,
    OpenRegisterSerializer,
    CashMovementInputSerializer,
    CashMovementSerializer,
    CloseRegisterSerializer,
    SaleSerializer,
    SaleListSerializer,
    SaleFilterSerializer,
    FinalizeSaleSerializer,
    ReturnInputSerializer,
    SaleReturnSerializer,
)
from .services import (
    current_session,
    open_register,
    add_cash_movement,
    close_register,
    finalize_sale,
    register_return,
    configure_payment_methods,
    SalesServiceError,
    RegisterAlreadyOpenError,
)


class SalesPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


# =============================================================================
# Customers
# =============================================================================

class CustomerViewSet(viewsets.ModelViewSet):
    """
    Customers (shared by every store).

    history: GET /api/sales/customers/{id}/history/
    """

    serializer_class = CustomerSerializer
    permission_classes = [IsAuthenticated, IsSalesStaff]
    pagination_class = SalesPagination
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        queryset = Customer.objects.all()
        if self.action != 'list':
            return queryset

        filter_serializer = CustomerFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        term = filter_serializer.validated_data.get('search', '').strip()
        if term:
            queryset = queryset.filter(
                Q(name__icontains=term) | Q(phone__icontains=term) | Q(cpf__icontains=term)
            )
        return queryset

    def destroy(self, request, pk=None):
        customer = self.get_object()
        try:
            customer.delete()
        except ProtectedError:
            return Response(
                {'error': 'This customer has sales and cannot be deleted'},
                status=status.HTTP_409_CONFLICT,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: CustomerHistorySerializer})
    @action(detail=True, methods=['get'])
    def history(self, request, pk=None):
        """Purchase history of the customer in the stores the user can see."""
        customer = self.get_object()
        sales = filter_by_store_access(
            customer.sales.select_related('store', 'seller').prefetch_related('items', 'payments', 'returns'),
            request.user,
        )
        total = sales.aggregate(total=Sum('total_amount'))['total'] or Decimal('0.00')

        return Response(CustomerHistorySerializer({
            'customer': customer,
            'total_spent': total,
            'sale_count': sales.count(),
            'sales': sales,
        }).data)


# =============================================================================
# Payment settings
# =============================================================================

class PaymentMethodSettingViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Destination account and fee per payment method and store.

    list: GET /api/sales/payment-settings/?store=<id>
    create: POST /api/sales/payment-settings/ - upsert a store's methods
    """

    serializer_class = PaymentMethodSettingSerializer
    permission_classes = [IsAuthenticated, IsFinanceStaff]

    def get_queryset(self):
        queryset = filter_by_store_access(
            PaymentMethodSetting.objects.select_related('account'),
            self.request.user,
        )
        filter_serializer = RegisterFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        if filter_serializer.validated_data.get('store'):
            queryset = queryset.filter(store_id=filter_serializer.validated_data['store'])
        return queryset

    @extend_schema(
        parameters=[OpenApiParameter('store', OpenApiTypes.UUID)],
        responses={200: PaymentMethodSettingSerializer(many=True)},
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(request=BulkPaymentSettingsSerializer, responses={200: PaymentMethodSettingSerializer(many=True)})
    def create(self, request):
        serializer = BulkPaymentSettingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            store = resolve_store(request.user, serializer.validated_data['store'])
        except StoreAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        configured = configure_payment_methods(store=store, entries=serializer.validated_data['settings'])
        return Response(PaymentMethodSettingSerializer(configured, many=True).data)


# =============================================================================
# Cash register
# =============================================================================

class CashRegisterViewSet(mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          viewsets.GenericViewSet):
    """
    Cash register sessions.

    create: POST /api/sales/registers/ - open the register
    current: GET /api/sales/registers/current/?store=<id>
    movements: POST /api/sales/registers/{id}/movements/ - supply or outflow
    close: POST /api/sales/registers/{id}/close/
    """

    serializer_class = CashRegisterSessionSerializer
    permission_classes = [IsAuthenticated, IsSalesStaff, IsStoreMember]
    pagination_class = SalesPagination

    def get_queryset(self):
        queryset = filter_by_store_access(
            CashRegisterSession.objects.select_related('store').prefetch_related('movements'),
            self.request.user,
        )
        if self.action != 'list':
            return queryset

        filter_serializer = RegisterFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data
        if params.get('store'):
            queryset = queryset.filter(store_id=params['store'])
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        return queryset

    @extend_schema(request=OpenRegisterSerializer, responses={201: CashRegisterSessionSerializer})
    def create(self, request):
        serializer = OpenRegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            store = resolve_store(request.user, serializer.validated_data.get('store'))
            session = open_register(
                store=store,
                opening_balance=serializer.validated_data['opening_balance'],
                user=request.user,
            )
        except StoreAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except RegisterAlreadyOpenError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except SalesServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CashRegisterSessionSerializer(session).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        parameters=[OpenApiParameter('store', OpenApiTypes.UUID)],
        responses={200: CashRegisterSessionSerializer},
    )
    @action(detail=False, methods=['get'])
    def current(self, request):
        """Open session of a store (the user's own store by default)."""
        filter_serializer = RegisterFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        store_id = filter_serializer.validated_data.get('store')
        store = Store.objects.filter(id=store_id).first() if store_id else None
        try:
            store = resolve_store(request.user, store)
        except StoreAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        session = current_session(store)
        if session is None:
            return Response({'error': 'The register is closed'}, status=status.HTTP_404_NOT_FOUND)
        return Response(CashRegisterSessionSerializer(session).data)

    @extend_schema(request=CashMovementInputSerializer, responses={201: CashMovementSerializer})
    @action(detail=True, methods=['post'])
    def movements(self, request, pk=None):
        session = self.get_object()
        serializer = CashMovementInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            movement = add_cash_movement(session_id=session.id, user=request.user, **serializer.validated_data)
        except SalesServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CashMovementSerializer(movement).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=CloseRegisterSerializer, responses={200: CashRegisterSessionSerializer})
    @action(detail=True, methods=['post'])
    def close(self, request, pk=None):
        session = self.get_object()
        serializer = CloseRegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            session = close_register(
                session_id=session.id,
                closing_balance=serializer.validated_data['closing_balance'],
                user=request.user,
            )
        except SalesServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CashRegisterSessionSerializer(session).data)


# =============================================================================
# Sales
# =============================================================================

class SaleViewSet(mixins.ListModelMixin,
                  mixins.RetrieveModelMixin,
                  viewsets.GenericViewSet):
    """
    Sales.

    create: POST /api/sales/sales/ - finalize a sale
    returns: POST /api/sales/sales/{id}/returns/ - return items to stock
    """

    permission_classes = [IsAuthenticated, IsSalesStaff, IsStoreMember]
    pagination_class = SalesPagination

    def get_queryset(self):
        queryset = filter_by_store_access(
            Sale.objects.select_related('store', 'seller', 'customer'),
            self.request.user,
        )
        if self.action == 'retrieve':
            return queryset.prefetch_related('items', 'payments', 'returns__item')
        if self.action != 'list':
            return queryset

        filter_serializer = SaleFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        for field in ('store', 'seller', 'customer', 'session'):
            if params.get(field):
                queryset = queryset.filter(**{f'{field}_id': params[field]})
        if params.get('date_from'):
            queryset = queryset.filter(created_at__date__gte=params['date_from'])
        if params.get('date_to'):
            queryset = queryset.filter(created_at__date__lte=params['date_to'])
        return queryset

    def get_serializer_class(self):
        if self.action == 'list':
            return SaleListSerializer
        return SaleSerializer

    @extend_schema(request=FinalizeSaleSerializer, responses={201: SaleSerializer})
    def create(self, request):
        serializer = FinalizeSaleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        try:
            data['store'] = resolve_store(request.user, data.get('store'))
            sale = finalize_sale(user=request.user, **data)
        except StoreAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except (SalesServiceError, InventoryServiceError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        sale = self.get_queryset().prefetch_related('items', 'payments', 'returns').get(id=sale.id)
        return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ReturnInputSerializer, responses={201: SaleReturnSerializer})
    @action(detail=True, methods=['post'])
    def returns(self, request, pk=None):
        sale = self.get_object()
        serializer = ReturnInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            sale_return = register_return(
                sale_id=sale.id,
                item_id=serializer.validated_data['item'],
                quantity=serializer.validated_data['quantity'],
                reason=serializer.validated_data['reason'],
                user=request.user,
            )
        except SalesServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(SaleReturnSerializer(sale_return).data, status=status.HTTP_201_CREATED)
