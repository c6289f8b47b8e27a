"""
Serializers for reports app.

Input serializers validate query parameters; response serializers shape
the dictionaries built by ``ReportQueries`` and document them in the schema.
"""

from rest_framework import serializers
from .queries import PRODUCT_SORTS


def _money(**kwargs):
    return serializers.DecimalField(max_digits=14, decimal_places=2, **kwargs)


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class MonthQuerySerializer(serializers.Serializer):
    """
    Query Parameters:
        month (str): Month in YYYY-MM format, current month by default
    """

    month = serializers.RegexField(
        regex=r'^\d{4}-(0[1-9]|1[0-2])$',
        required=False,
        help_text='Month in YYYY-MM format',
    )


class StoreQuerySerializer(serializers.Serializer):
    store = serializers.UUIDField(required=False)


class DateRangeQuerySerializer(StoreQuerySerializer):
    """
    Query Parameters:
        start_date (date): First day of the report (required)
        end_date (date): Last day of the report (required)
        store (UUID): Limit to one store
    """

    start_date = serializers.DateField()
    end_date = serializers.DateField()

    def validate(self, attrs):
        if attrs['start_date'] > attrs['end_date']:
            raise serializers.ValidationError({'end_date': 'End date must be after start date'})
        return attrs


class SalesReportQuerySerializer(DateRangeQuerySerializer):
    seller = serializers.UUIDField(required=False)
    product_sort = serializers.ChoiceField(choices=list(PRODUCT_SORTS), default='quantity_desc')
    product_limit = serializers.IntegerField(min_value=1, max_value=100, default=20)


# =============================================================================
# Response Serializers
# =============================================================================

class SellerPerformanceSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    seller_name = serializers.CharField()
    month = serializers.CharField()
    has_target = serializers.BooleanField()
    total_sales = _money()
    sale_count = serializers.IntegerField()
    monthly_goal = _money()
    commission_rate = serializers.DecimalField(max_digits=5, decimal_places=2)
    bonus_commission_rate = serializers.DecimalField(max_digits=5, decimal_places=2)
    applied_rate = serializers.DecimalField(max_digits=5, decimal_places=2)
    goal_reached = serializers.BooleanField()
    commission = _money()
    progress_percentage = _money(allow_null=True)
    remaining_to_goal = _money()


class SellerTotalSerializer(serializers.Serializer):
    seller_id = serializers.UUIDField()
    seller_name = serializers.CharField()
    total = _money()
    count = serializers.IntegerField()


class DashboardSalesSerializer(serializers.Serializer):
    today_total = _money()
    today_count = serializers.IntegerField()
    month_total = _money()
    month_count = serializers.IntegerField()
    year_total = _money()
    year_count = serializers.IntegerField()
    products_sold_month = serializers.IntegerField()


class DashboardFinancialSerializer(serializers.Serializer):
    global_balance = _money()
    pending_payables_count = serializers.IntegerField()
    pending_payables_amount = _money()
    overdue_payables_count = serializers.IntegerField()
    paid_payables_month = _money()
    paid_payables_year = _money()


class DashboardSerializer(serializers.Serializer):
    store_id = serializers.UUIDField(allow_null=True)
    sales = DashboardSalesSerializer()
    low_stock_count = serializers.IntegerField()
    sales_by_seller = SellerTotalSerializer(many=True)
    financial = DashboardFinancialSerializer(allow_null=True)


class PaymentMethodTotalSerializer(serializers.Serializer):
    method = serializers.CharField()
    label = serializers.CharField()
    amount = _money()
    fees = _money()
    net = _money()
    count = serializers.IntegerField()


class ProductPerformanceSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    product_code = serializers.CharField()
    product_name = serializers.CharField()
    variation = serializers.CharField()
    quantity = serializers.IntegerField()
    revenue = _money()


class SalesReportSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    sale_count = serializers.IntegerField()
    total_sales = _money()
    total_discounts = _money()
    cost_of_goods = _money()
    gross_profit = _money()
    gross_margin = serializers.DecimalField(max_digits=7, decimal_places=2)
    by_payment_method = PaymentMethodTotalSerializer(many=True)
    by_seller = SellerTotalSerializer(many=True)
    products = ProductPerformanceSerializer(many=True)


class ExpenseCategoryTotalSerializer(serializers.Serializer):
    category = serializers.CharField()
    total = _money()


class FinancialReportSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    sales_revenue = _money()
    cost_of_goods = _money()
    gross_profit = _money()
    other_revenues = _money()
    operational_expenses = _money()
    net_result = _money()
    expenses_by_category = ExpenseCategoryTotalSerializer(many=True)


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
