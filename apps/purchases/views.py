from decimal import Decimal
from django.db.models import Count, Sum, Q
from django.utils import timezone
from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema
from apps.accounts.permissions import IsFinanceStaff, IsStoreMember, filter_by_store_access
from apps.stores.exceptions import StoreAccessError
from apps.stores.services import resolve_store
from .exceptions import PurchaseServiceError
from .models import Purchase, AccountPayable, PayableStatus
from .serializers import (
    PurchaseSerializer,
    PurchaseListSerializer,
    PurchaseFilterSerializer,
    MerchandisePurchaseInputSerializer,
    ExpenseInputSerializer,
    AccountPayableSerializer,
    PayableFilterSerializer,
    PayPayableInputSerializer,
    PayableUpdateSerializer,
    PayablesSummarySerializer,
)
from .services import PurchaseService, PayableService


class PurchasePagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class PurchaseViewSet(mixins.ListModelMixin,
                      mixins.RetrieveModelMixin,
                      viewsets.GenericViewSet):
    """
    Merchandise purchases.

    list: GET /api/purchases/purchases/
    create: POST /api/purchases/purchases/ (receives stock, creates installments)
    retrieve: GET /api/purchases/purchases/{id}/
    destroy: DELETE /api/purchases/purchases/{id}/ (stock is kept)
    """

    permission_classes = [IsAuthenticated, IsFinanceStaff, IsStoreMember]
    pagination_class = PurchasePagination

    def get_queryset(self):
        queryset = filter_by_store_access(
            Purchase.objects.select_related('supplier', 'store'),
            self.request.user,
        )
        if self.action == 'retrieve':
            return queryset.prefetch_related('items', 'payables')
        if self.action != 'list':
            return queryset

        filter_serializer = PurchaseFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if params.get('store'):
            queryset = queryset.filter(store_id=params['store'])
        if params.get('supplier'):
            queryset = queryset.filter(supplier_id=params['supplier'])
        if 'date_from' in params:
            queryset = queryset.filter(issue_date__gte=params['date_from'])
        if 'date_to' in params:
            queryset = queryset.filter(issue_date__lte=params['date_to'])
        return queryset

    def get_serializer_class(self):
        if self.action == 'list':
            return PurchaseListSerializer
        return PurchaseSerializer

    @extend_schema(request=MerchandisePurchaseInputSerializer, responses={201: PurchaseSerializer})
    def create(self, request):
        serializer = MerchandisePurchaseInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        try:
            data['store'] = resolve_store(request.user, data.get('store'))
            purchase = PurchaseService.create_merchandise_purchase(user=request.user, **data)
        except StoreAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except PurchaseServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        purchase = self.get_queryset().prefetch_related('items', 'payables').get(id=purchase.id)
        return Response(PurchaseSerializer(purchase).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, pk=None):
        purchase = self.get_object()
        PurchaseService.delete_purchase(purchase_id=purchase.id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AccountPayableViewSet(mixins.ListModelMixin,
                            mixins.RetrieveModelMixin,
                            viewsets.GenericViewSet):
    """
    Accounts payable.

    expenses: POST /api/purchases/payables/expenses/
    pay: POST /api/purchases/payables/{id}/pay/
    summary: GET /api/purchases/payables/summary/
    """

    serializer_class = AccountPayableSerializer
    permission_classes = [IsAuthenticated, IsFinanceStaff, IsStoreMember]
    pagination_class = PurchasePagination
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        queryset = filter_by_store_access(
            AccountPayable.objects.select_related(
                'store',
                'supplier',
                'expense_category',
                'employee',
                'paid_from_account',
            ),
            self.request.user,
        )
        if self.action != 'list':
            return queryset

        filter_serializer = PayableFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data
        today = timezone.localdate()

        payable_status = params.get('status')
        if payable_status == 'overdue':
            queryset = queryset.filter(status=PayableStatus.PENDING, due_date__lt=today)
        elif payable_status:
            queryset = queryset.filter(status=payable_status)
        if params.get('payable_type'):
            queryset = queryset.filter(payable_type=params['payable_type'])
        if params.get('store'):
            queryset = queryset.filter(store_id=params['store'])
        if params.get('supplier'):
            queryset = queryset.filter(supplier_id=params['supplier'])
        if 'due_from' in params:
            queryset = queryset.filter(due_date__gte=params['due_from'])
        if 'due_to' in params:
            queryset = queryset.filter(due_date__lte=params['due_to'])
        return queryset

    @extend_schema(request=PayableUpdateSerializer, responses={200: AccountPayableSerializer})
    def partial_update(self, request, pk=None):
        payable = self.get_object()
        serializer = PayableUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        payable = PayableService.update_payable(payable_id=payable.id, **serializer.validated_data)
        return Response(AccountPayableSerializer(payable).data)

    def destroy(self, request, pk=None):
        payable = self.get_object()
        PayableService.delete_payable(payable_id=payable.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=ExpenseInputSerializer, responses={201: AccountPayableSerializer(many=True)})
    @action(detail=False, methods=['post'])
    def expenses(self, request):
        """Launch an expense as one or more payables."""
        serializer = ExpenseInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        try:
            data['store'] = resolve_store(request.user, data.get('store'))
            payables = PayableService.create_expense(user=request.user, **data)
        except StoreAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except PurchaseServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            AccountPayableSerializer(payables, many=True).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=PayPayableInputSerializer, responses={200: AccountPayableSerializer})
    @action(detail=True, methods=['post'])
    def pay(self, request, pk=None):
        """Pay a pending payable from a bank account."""
        payable = self.get_object()
        serializer = PayPayableInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payable = PayableService.pay_payable(
            payable_id=payable.id,
            account_id=serializer.validated_data['account'].id,
            user=request.user,
        )
        return Response(AccountPayableSerializer(payable).data)

    @extend_schema(responses={200: PayablesSummarySerializer})
    @action(detail=False, methods=['get'])
    def summary(self, request):
        """Pending and overdue totals for the payables visible to the user."""
        today = timezone.localdate()
        overdue = Q(due_date__lt=today)
        totals = self.get_queryset().filter(status=PayableStatus.PENDING).aggregate(
            pending_count=Count('id'),
            pending_amount=Sum('amount'),
            overdue_count=Count('id', filter=overdue),
            overdue_amount=Sum('amount', filter=overdue),
        )
        return Response(PayablesSummarySerializer({
            'pending_count': totals['pending_count'],
            'pending_amount': totals['pending_amount'] or Decimal('0.00'),
            'overdue_count': totals['overdue_count'],
            'overdue_amount': totals['overdue_amount'] or Decimal('0.00'),
        }).data)
