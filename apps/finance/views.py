from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema
from apps.accounts.permissions import IsFinanceStaff, IsStoreMember, filter_by_store_access
from apps.stores.exceptions import StoreAccessError
from apps.stores.services import resolve_store
from .models import (
    BankAccount,
    TransactionType,
    RevenueCategory,
    ExpenseCategory,
    Revenue,
)
from .serializers import (
    BankAccountSerializer,
    BankAccountInputSerializer,
    AccountTransactionSerializer,
    TransactionFilterSerializer,
    MovementInputSerializer,
    TransferInputSerializer,
    TransferResponseSerializer,
    GlobalBalanceSerializer,
    RevenueCategorySerializer,
    ExpenseCategorySerializer,
    RevenueSerializer,
    RevenueInputSerializer,
    RevenueFilterSerializer,
)
from .services import AccountService, RevenueService


class FinancePagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class BankAccountViewSet(viewsets.ModelViewSet):
    """
    Bank accounts (administrators and finance staff).

    transactions: GET /api/finance/accounts/{id}/transactions/
    movement: POST /api/finance/accounts/{id}/movement/
    transfer: POST /api/finance/accounts/transfer/
    global_balance: GET /api/finance/accounts/global-balance/
    """

    queryset = BankAccount.objects.prefetch_related('sub_balances')
    serializer_class = BankAccountSerializer
    permission_classes = [IsAuthenticated, IsFinanceStaff]
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    @extend_schema(request=BankAccountInputSerializer, responses={201: BankAccountSerializer})
    def create(self, request):
        serializer = BankAccountInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        account = AccountService.create_account(**serializer.validated_data)
        return Response(BankAccountSerializer(account).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=BankAccountInputSerializer, responses={200: BankAccountSerializer})
    def partial_update(self, request, pk=None):
        account = self.get_object()
        serializer = BankAccountInputSerializer(
            data=request.data,
            partial=True,
            context={'instance': account},
        )
        serializer.is_valid(raise_exception=True)
        account = AccountService.update_account(account_id=account.id, **serializer.validated_data)
        return Response(BankAccountSerializer(account).data)

    def destroy(self, request, pk=None):
        account = self.get_object()
        AccountService.delete_account(account_id=account.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(parameters=[TransactionFilterSerializer], responses={200: AccountTransactionSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def transactions(self, request, pk=None):
        """Ledger of one account, newest first."""
        account = self.get_object()
        filter_serializer = TransactionFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        queryset = account.transactions.select_related('performed_by')
        if params.get('transaction_type'):
            queryset = queryset.filter(transaction_type=params['transaction_type'])
        if params.get('date_from'):
            queryset = queryset.filter(created_at__date__gte=params['date_from'])
        if params.get('date_to'):
            queryset = queryset.filter(created_at__date__lte=params['date_to'])

        paginator = FinancePagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        return paginator.get_paginated_response(AccountTransactionSerializer(page, many=True).data)

    @extend_schema(request=MovementInputSerializer, responses={201: AccountTransactionSerializer})
    @action(detail=True, methods=['post'])
    def movement(self, request, pk=None):
        """Manual deposit or withdrawal."""
        account = self.get_object()
        serializer = MovementInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        operation = (
            AccountService.deposit
            if data['transaction_type'] == TransactionType.DEPOSIT
            else AccountService.withdraw
        )
        entry = operation(
            account_id=account.id,
            amount=data['amount'],
            description=data['description'],
            user=request.user,
        )
        return Response(AccountTransactionSerializer(entry).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=TransferInputSerializer, responses={201: TransferResponseSerializer})
    @action(detail=False, methods=['post'])
    def transfer(self, request):
        serializer = TransferInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        outgoing, incoming = AccountService.transfer(
            from_account_id=data['from_account'].id,
            to_account_id=data['to_account'].id,
            amount=data['amount'],
            description=data['description'],
            user=request.user,
        )
        return Response({
            'outgoing': AccountTransactionSerializer(outgoing).data,
            'incoming': AccountTransactionSerializer(incoming).data,
        }, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: GlobalBalanceSerializer})
    @action(detail=False, methods=['get'], url_path='global-balance')
    def global_balance(self, request):
        return Response(GlobalBalanceSerializer({
            'global_balance': AccountService.global_balance(),
            'accounts': self.get_queryset(),
        }).data)


class RevenueCategoryViewSet(viewsets.ModelViewSet):
    queryset = RevenueCategory.objects.all()
    serializer_class = RevenueCategorySerializer
    permission_classes = [IsAuthenticated, IsFinanceStaff]


class ExpenseCategoryViewSet(viewsets.ModelViewSet):
    queryset = ExpenseCategory.objects.all()
    serializer_class = ExpenseCategorySerializer
    permission_classes = [IsAuthenticated, IsFinanceStaff]


class RevenueViewSet(viewsets.ModelViewSet):
    """Revenues; creating, editing and deleting keep account balances in step."""

    serializer_class = RevenueSerializer
    permission_classes = [IsAuthenticated, IsFinanceStaff, IsStoreMember]
    pagination_class = FinancePagination
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        queryset = filter_by_store_access(
            Revenue.objects.select_related('category', 'destination_account', 'store'),
            self.request.user,
        )
        if self.action != 'list':
            return queryset

        filter_serializer = RevenueFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if params.get('store'):
            queryset = queryset.filter(store_id=params['store'])
        if params.get('category'):
            queryset = queryset.filter(category_id=params['category'])
        if params.get('date_from'):
            queryset = queryset.filter(received_date__gte=params['date_from'])
        if params.get('date_to'):
            queryset = queryset.filter(received_date__lte=params['date_to'])
        return queryset

    @extend_schema(request=RevenueInputSerializer, responses={201: RevenueSerializer})
    def create(self, request):
        serializer = RevenueInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        try:
            data['store'] = resolve_store(request.user, data.get('store'))
        except StoreAccessError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        revenue = RevenueService.record_revenue(user=request.user, **data)
        return Response(RevenueSerializer(revenue).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=RevenueInputSerializer, responses={200: RevenueSerializer})
    def partial_update(self, request, pk=None):
        revenue = self.get_object()
        serializer = RevenueInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        if 'store' in data:
            try:
                data['store'] = resolve_store(request.user, data['store'])
            except StoreAccessError as e:
                return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        revenue = RevenueService.update_revenue(revenue_id=revenue.id, **data)
        return Response(RevenueSerializer(revenue).data)

    def destroy(self, request, pk=None):
        revenue = self.get_object()
        RevenueService.delete_revenue(revenue_id=revenue.id)
        return Response(status=status.HTTP_204_NO_CONTENT)
