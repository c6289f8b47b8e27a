"""
Reports Module
==============

Aggregations over sales, payables, revenues and bank accounts that power the
dashboard, seller performance and the sales/financial reports.

Classes:
    ReportQueries: Static methods for each report.

Example:
    Commission of a seller for the current month::

        from apps.reports.queries import ReportQueries

        performance = ReportQueries.seller_performance(user=seller)
        print(performance['commission'])

Note:
    This module is read-only. Every method returns plain dictionaries and
    lists; store scoping is decided by the caller and passed as ``store``
    (None means every store).
"""

from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Sum, Count, F, Q, DecimalField
from django.db.models.functions import Coalesce
from django.utils import timezone

from apps.accounts.models import SalesTarget
from apps.finance.models import Revenue
from apps.finance.services import AccountService
from apps.inventory.services import low_stock
from apps.purchases.models import AccountPayable, PayableStatus, PayableType
from apps.sales.models import Sale, SaleItem, SalePayment, PaymentMethod
from .exceptions import InvalidPeriodError, InvalidDateRangeError

ZERO = Decimal('0.00')
CENT = Decimal('0.01')

PRODUCT_SORTS = {
    'quantity_desc': ('-sold', '-revenue'),
    'quantity_asc': ('sold', 'revenue'),
    'revenue_desc': ('-revenue', '-sold'),
}


def _money(value):
    return (value or ZERO).quantize(CENT, rounding=ROUND_HALF_UP)


def _percentage(part, whole):
    if not whole:
        return ZERO
    return _money(part * 100 / whole)


def month_bounds(month):
    """Return the first and last day of a ``YYYY-MM`` month."""
    try:
        year, month_number = (int(part) for part in month.split('-'))
        first = date(year, month_number, 1)
    except (ValueError, AttributeError):
        raise InvalidPeriodError(f"Invalid month '{month}'. Use YYYY-MM")
    next_month = date(year + month_number // 12, month_number % 12 + 1, 1)
    return first, next_month - timedelta(days=1)


def _sales_in(start_date, end_date, store=None, seller=None):
    sales = Sale.objects.filter(
        created_at__date__gte=start_date,
        created_at__date__lte=end_date,
    )
    if store is not None:
        sales = sales.filter(store=store)
    if seller is not None:
        sales = sales.filter(seller=seller)
    return sales


def _cost_of_goods(sales):
    total = SaleItem.objects.filter(sale__in=sales).aggregate(
        total=Sum(
            F('unit_cost') * F('quantity'),
            output_field=DecimalField(max_digits=14, decimal_places=2),
        )
    )['total']
    return _money(total)


def _sales_by_seller(sales):
    rows = (
        sales.values('seller_id', 'seller__username', 'seller__email')
        .annotate(total=Sum('total_amount'), count=Count('id'))
        .order_by('-total')
    )
    return [
        {
            'seller_id': row['seller_id'],
            'seller_name': row['seller__username'] or row['seller__email'].split('@')[0],
            'total': _money(row['total']),
            'count': row['count'],
        }
        for row in rows
    ]


class ReportQueries:
    """
    Report queries.

    Methods:
        seller_performance: Monthly total, target and commission of a seller.
        dashboard: Today/month/year overview of a store or of the network.
        sales_report: Sales, cost of goods and breakdowns for a date range.
        financial_report: Result statement for a date range.
    """

    @staticmethod
    def seller_performance(user, month=None):
        """
        Compute a seller's monthly totals and commission.

        The bonus rate applies once the month's sales reach the goal,
        otherwise the base rate applies. A seller without a target for the
        month has a goal and rates of zero.

        Args:
            user (User): The seller.
            month (str, optional): ``YYYY-MM``; defaults to the current month.

        Returns:
            dict: total_sales, sale_count, monthly_goal, the two rates,
            applied_rate, goal_reached, commission, progress_percentage
            (None without a goal) and remaining_to_goal.
        """
        month = month or timezone.localdate().strftime('%Y-%m')
        start_date, end_date = month_bounds(month)

        totals = _sales_in(start_date, end_date, seller=user).aggregate(
            total=Coalesce(Sum('total_amount'), ZERO, output_field=DecimalField()),
            count=Count('id'),
        )
        total_sales = _money(totals['total'])

        target = SalesTarget.objects.filter(user=user, month=month).first()
        goal = target.monthly_goal if target else ZERO
        base_rate = target.commission_rate if target else ZERO
        bonus_rate = target.bonus_commission_rate if target else ZERO

        goal_reached = total_sales >= goal
        applied_rate = bonus_rate if goal_reached else base_rate

        return {
            'user_id': user.id,
            'seller_name': user.get_display_name(),
            'month': month,
            'has_target': target is not None,
            'total_sales': total_sales,
            'sale_count': totals['count'],
            'monthly_goal': _money(goal),
            'commission_rate': base_rate,
            'bonus_commission_rate': bonus_rate,
            'applied_rate': applied_rate,
            'goal_reached': goal_reached,
            'commission': _money(total_sales * applied_rate / 100),
            'progress_percentage': _percentage(total_sales, goal) if goal > 0 else None,
            'remaining_to_goal': _money(max(goal - total_sales, ZERO)),
        }

    @staticmethod
    def dashboard(store=None, include_financial=False):
        """
        Overview for the home screen.

        Sales figures cover today, the current month and the current year.
        The ``financial`` block (global balance and payables) is only
        computed when ``include_financial`` is set; otherwise it is None.
        """
        today = timezone.localdate()
        month_start = today.replace(day=1)
        year_start = today.replace(month=1, day=1)

        year_sales = _sales_in(year_start, today, store=store)
        month_sales = year_sales.filter(created_at__date__gte=month_start)

        on_today = Q(created_at__date=today)
        in_month = Q(created_at__date__gte=month_start)
        totals = year_sales.aggregate(
            today_total=Sum('total_amount', filter=on_today),
            today_count=Count('id', filter=on_today),
            month_total=Sum('total_amount', filter=in_month),
            month_count=Count('id', filter=in_month),
            year_total=Sum('total_amount'),
            year_count=Count('id'),
        )
        products_sold = SaleItem.objects.filter(sale__in=month_sales).aggregate(
            total=Sum('quantity')
        )['total'] or 0

        data = {
            'store_id': store.id if store is not None else None,
            'sales': {
                'today_total': _money(totals['today_total']),
                'today_count': totals['today_count'],
                'month_total': _money(totals['month_total']),
                'month_count': totals['month_count'],
                'year_total': _money(totals['year_total']),
                'year_count': totals['year_count'],
                'products_sold_month': products_sold,
            },
            'low_stock_count': low_stock(store=store).count(),
            'sales_by_seller': _sales_by_seller(month_sales),
            'financial': None,
        }

        if include_financial:
            payables = AccountPayable.objects.all()
            if store is not None:
                payables = payables.filter(store=store)

            pending = payables.filter(status=PayableStatus.PENDING).aggregate(
                count=Count('id'),
                total_amount=Sum('amount'),
                overdue_count=Count('id', filter=Q(due_date__lt=today)),
            )
            paid = payables.filter(
                status=PayableStatus.PAID,
                paid_at__date__gte=year_start,
            ).aggregate(
                month=Sum('amount', filter=Q(paid_at__date__gte=month_start)),
                year=Sum('amount'),
            )
            data['financial'] = {
                'global_balance': _money(AccountService.global_balance()),
                'pending_payables_count': pending['count'],
                'pending_payables_amount': _money(pending['total_amount']),
                'overdue_payables_count': pending['overdue_count'],
                'paid_payables_month': _money(paid['month']),
                'paid_payables_year': _money(paid['year']),
            }

        return data

    @staticmethod
    def sales_report(start_date, end_date, store=None, seller=None,
                     product_sort='quantity_desc', product_limit=20):
        """
        Sales between two dates (inclusive).

        Returns totals, cost of goods, gross profit and margin, plus
        breakdowns by payment method, by seller and by product variation.
        """
        if start_date > end_date:
            raise InvalidDateRangeError("Start date must be before end date")

        sales = _sales_in(start_date, end_date, store=store, seller=seller)
        totals = sales.aggregate(
            total=Sum('total_amount'),
            discounts=Sum('discount_amount'),
            count=Count('id'),
        )
        total_sales = _money(totals['total'])
        cost_of_goods = _cost_of_goods(sales)
        gross_profit = total_sales - cost_of_goods

        by_method = (
            SalePayment.objects.filter(sale__in=sales)
            .values('method')
            .annotate(
                gross=Sum('amount'),
                fees=Sum('fee_amount'),
                net=Sum('net_amount'),
                count=Count('id'),
            )
            .order_by('method')
        )

        products = (
            SaleItem.objects.filter(sale__in=sales)
            .values('product_id', 'product_code', 'product_name', 'color', 'size')
            .annotate(sold=Sum('quantity'), revenue=Sum('subtotal'))
            .order_by(*PRODUCT_SORTS[product_sort])[:product_limit]
        )

        return {
            'start_date': start_date,
            'end_date': end_date,
            'sale_count': totals['count'],
            'total_sales': total_sales,
            'total_discounts': _money(totals['discounts']),
            'cost_of_goods': cost_of_goods,
            'gross_profit': gross_profit,
            'gross_margin': _percentage(gross_profit, total_sales),
            'by_payment_method': [
                {
                    'method': row['method'],
                    'label': PaymentMethod(row['method']).label,
                    'amount': _money(row['gross']),
                    'fees': _money(row['fees']),
                    'net': _money(row['net']),
                    'count': row['count'],
                }
                for row in by_method
            ],
            'by_seller': _sales_by_seller(sales),
            'products': [
                {
                    'product_id': row['product_id'],
                    'product_code': row['product_code'],
                    'product_name': row['product_name'],
                    'variation': f"{row['color']} / {row['size']}",
                    'quantity': row['sold'],
                    'revenue': _money(row['revenue']),
                }
                for row in products
            ],
        }

    @staticmethod
    def financial_report(start_date, end_date, store=None):
        """
        Result statement between two dates (inclusive).

        Operational expenses are expense payables paid in the period;
        merchandise payables are already counted through the cost of goods.
        """
        if start_date > end_date:
            raise InvalidDateRangeError("Start date must be before end date")

        sales = _sales_in(start_date, end_date, store=store)
        sales_revenue = _money(sales.aggregate(total=Sum('total_amount'))['total'])
        cost_of_goods = _cost_of_goods(sales)
        gross_profit = sales_revenue - cost_of_goods

        revenues = Revenue.objects.filter(received_date__gte=start_date, received_date__lte=end_date)
        expenses = AccountPayable.objects.filter(
            payable_type=PayableType.EXPENSE,
            status=PayableStatus.PAID,
            paid_at__date__gte=start_date,
            paid_at__date__lte=end_date,
        )
        if store is not None:
            revenues = revenues.filter(store=store)
            expenses = expenses.filter(store=store)

        other_revenues = _money(revenues.aggregate(total=Sum('amount'))['total'])
        operational_expenses = _money(expenses.aggregate(total=Sum('amount'))['total'])

        expenses_by_category = (
            expenses.values('expense_category__name')
            .annotate(total=Sum('amount'))
            .order_by('-total')
        )

        return {
            'start_date': start_date,
            'end_date': end_date,
            'sales_revenue': sales_revenue,
            'cost_of_goods': cost_of_goods,
            'gross_profit': gross_profit,
            'other_revenues': other_revenues,
            'operational_expenses': operational_expenses,
            'net_result': gross_profit + other_revenues - operational_expenses,
            'expenses_by_category': [
                {
                    'category': row['expense_category__name'] or 'Uncategorized',
                    'total': _money(row['total']),
                }
                for row in expenses_by_category
            ],
        }
