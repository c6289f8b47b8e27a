import pytest
from decimal import Decimal
from datetime import date, timedelta
from django.utils import timezone
from apps.accounts.services import set_sales_target
from apps.reports.exceptions import InvalidPeriodError, InvalidDateRangeError
from apps.reports.queries import ReportQueries, month_bounds


def _this_month():
    return timezone.localdate().strftime('%Y-%m')


class TestMonthBounds:

    def test_regular_month(self):
        assert month_bounds('2025-02') == (date(2025, 2, 1), date(2025, 2, 28))

    def test_december(self):
        assert month_bounds('2024-12') == (date(2024, 12, 1), date(2024, 12, 31))

    def test_invalid_month(self):
        with pytest.raises(InvalidPeriodError):
            month_bounds('2025-13')


# =============================================================================
# Seller performance
# =============================================================================

@pytest.mark.django_db
class TestSellerPerformance:

    def _target(self, seller, goal):
        set_sales_target(
            user=seller,
            month=_this_month(),
            monthly_goal=Decimal(goal),
            commission_rate=Decimal('2.00'),
            bonus_commission_rate=Decimal('5.00'),
        )

    def test_bonus_rate_once_goal_is_reached(self, employee_user, sales):
        self._target(employee_user, '150.00')

        data = ReportQueries.seller_performance(employee_user)

        assert data['total_sales'] == Decimal('200.00')
        assert data['goal_reached'] is True
        assert data['applied_rate'] == Decimal('5.00')
        assert data['commission'] == Decimal('10.00')
        assert data['progress_percentage'] == Decimal('133.33')
        assert data['remaining_to_goal'] == Decimal('0.00')

    def test_base_rate_below_goal(self, employee_user, sales):
        self._target(employee_user, '500.00')

        data = ReportQueries.seller_performance(employee_user)

        assert data['goal_reached'] is False
        assert data['commission'] == Decimal('4.00')
        assert data['progress_percentage'] == Decimal('40.00')
        assert data['remaining_to_goal'] == Decimal('300.00')

    def test_without_target(self, employee_user, sales):
        data = ReportQueries.seller_performance(employee_user)

        assert data['has_target'] is False
        assert data['commission'] == Decimal('0.00')
        assert data['progress_percentage'] is None

    def test_other_month_is_empty(self, employee_user, sales):
        data = ReportQueries.seller_performance(employee_user, month='2001-01')

        assert data['total_sales'] == Decimal('0.00')
        assert data['sale_count'] == 0


# =============================================================================
# Dashboard
# =============================================================================

@pytest.mark.django_db
class TestDashboard:

    def test_store_dashboard(self, store, sales):
        data = ReportQueries.dashboard(store=store)

        assert data['sales']['today_total'] == Decimal('200.00')
        assert data['sales']['month_count'] == 1
        assert data['sales']['products_sold_month'] == 2
        assert data['low_stock_count'] == 1
        assert [row['seller_name'] for row in data['sales_by_seller']] == ['Seller']
        assert data['financial'] is None

    def test_network_dashboard_with_financial_block(self, sales, bank_account, paid_expense, overdue_payable):
        data = ReportQueries.dashboard(include_financial=True)

        assert data['sales']['year_total'] == Decimal('300.00')
        assert data['low_stock_count'] == 2
        assert [row['seller_name'] for row in data['sales_by_seller']] == ['Seller', 'Vendedor Norte']

        financial = data['financial']
        assert financial['global_balance'] == Decimal('1000.00')
        assert financial['pending_payables_count'] == 1
        assert financial['pending_payables_amount'] == Decimal('80.00')
        assert financial['overdue_payables_count'] == 1
        assert financial['paid_payables_month'] == Decimal('50.00')
        assert financial['paid_payables_year'] == Decimal('50.00')


# =============================================================================
# Sales report
# =============================================================================

@pytest.mark.django_db
class TestSalesReport:

    def test_totals_and_breakdowns(self, sales):
        today = timezone.localdate()
        data = ReportQueries.sales_report(start_date=today, end_date=today)

        assert data['total_sales'] == Decimal('300.00')
        assert data['cost_of_goods'] == Decimal('120.00')
        assert data['gross_profit'] == Decimal('180.00')
        assert data['gross_margin'] == Decimal('60.00')
        assert data['by_payment_method'] == [{
            'method': 'cash',
            'label': 'Cash',
            'amount': Decimal('300.00'),
            'fees': Decimal('0.00'),
            'net': Decimal('300.00'),
            'count': 2,
        }]
        assert len(data['by_seller']) == 2
        assert data['products'][0]['quantity'] == 3
        assert data['products'][0]['variation'] == 'Preto / M'

    def test_store_filter(self, store, sales):
        today = timezone.localdate()
        data = ReportQueries.sales_report(start_date=today, end_date=today, store=store)

        assert data['total_sales'] == Decimal('200.00')
        assert data['cost_of_goods'] == Decimal('80.00')

    def test_seller_filter(self, norte_seller, sales):
        today = timezone.localdate()
        data = ReportQueries.sales_report(start_date=today, end_date=today, seller=norte_seller)

        assert data['sale_count'] == 1
        assert data['total_sales'] == Decimal('100.00')

    def test_period_without_sales(self, sales):
        yesterday = timezone.localdate() - timedelta(days=1)
        data = ReportQueries.sales_report(start_date=yesterday, end_date=yesterday)

        assert data['total_sales'] == Decimal('0.00')
        assert data['gross_margin'] == Decimal('0.00')
        assert data['products'] == []

    def test_inverted_range(self, db):
        today = timezone.localdate()
        with pytest.raises(InvalidDateRangeError):
            ReportQueries.sales_report(start_date=today, end_date=today - timedelta(days=1))


# =============================================================================
# Financial report
# =============================================================================

@pytest.mark.django_db
class TestFinancialReport:

    def test_result_statement(self, sales, paid_expense, overdue_payable, revenue):
        today = timezone.localdate()
        data = ReportQueries.financial_report(start_date=today, end_date=today)

        assert data['sales_revenue'] == Decimal('300.00')
        assert data['cost_of_goods'] == Decimal('120.00')
        assert data['gross_profit'] == Decimal('180.00')
        assert data['other_revenues'] == Decimal('30.00')
        assert data['operational_expenses'] == Decimal('50.00')
        assert data['net_result'] == Decimal('160.00')
        assert data['expenses_by_category'] == [{'category': 'Energia', 'total': Decimal('50.00')}]

    def test_store_without_expenses(self, other_store, sales, paid_expense, revenue):
        today = timezone.localdate()
        data = ReportQueries.financial_report(start_date=today, end_date=today, store=other_store)

        assert data['sales_revenue'] == Decimal('100.00')
        assert data['other_revenues'] == Decimal('0.00')
        assert data['operational_expenses'] == Decimal('0.00')
        assert data['net_result'] == Decimal('60.00')
