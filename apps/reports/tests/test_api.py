import pytest
from datetime import timedelta
from django.urls import reverse
from django.utils import timezone
from rest_framework import status


def _today_range(**extra):
    today = timezone.localdate().isoformat()
    return {'start_date': today, 'end_date': today, **extra}


# =============================================================================
# Performance
# =============================================================================

@pytest.mark.django_db
class TestPerformance:

    def test_my_performance(self, employee_client, sales):
        response = employee_client.get(reverse('reports:my-performance'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_sales'] == '200.00'
        assert response.data['progress_percentage'] is None

    def test_invalid_month(self, employee_client):
        response = employee_client.get(reverse('reports:my-performance'), {'month': '2025-13'})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_manager_views_own_seller(self, manager_client, employee_user, sales):
        response = manager_client.get(reverse('reports:seller-performance', args=[employee_user.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['seller_name'] == 'Seller'

    def test_manager_cannot_view_other_store_seller(self, manager_client, norte_seller):
        response = manager_client.get(reverse('reports:seller-performance', args=[norte_seller.id]))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_employee_cannot_view_others(self, employee_client, norte_seller):
        response = employee_client.get(reverse('reports:seller-performance', args=[norte_seller.id]))
        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Dashboard
# =============================================================================

@pytest.mark.django_db
class TestDashboardApi:

    def test_employee_sees_own_store_without_financial(self, employee_client, sales):
        response = employee_client.get(reverse('reports:dashboard'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['sales']['month_total'] == '200.00'
        assert response.data['financial'] is None

    def test_finance_sees_network(self, finance_client, sales, bank_account):
        response = finance_client.get(reverse('reports:dashboard'))

        assert response.data['sales']['month_total'] == '300.00'
        assert response.data['financial']['global_balance'] == '1000.00'

    def test_admin_filters_by_store(self, admin_client, other_store, sales):
        response = admin_client.get(reverse('reports:dashboard'), {'store': str(other_store.id)})
        assert response.data['sales']['month_total'] == '100.00'

    def test_manager_cannot_pick_other_store(self, manager_client, other_store):
        response = manager_client.get(reverse('reports:dashboard'), {'store': str(other_store.id)})
        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Period reports
# =============================================================================

@pytest.mark.django_db
class TestSalesReportApi:

    def test_dates_required(self, finance_client):
        response = finance_client.get(reverse('reports:sales-report'))
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_finance_sees_all_stores(self, finance_client, sales):
        response = finance_client.get(reverse('reports:sales-report'), _today_range())

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_sales'] == '300.00'
        assert response.data['gross_margin'] == '60.00'

    def test_manager_limited_to_store(self, manager_client, sales):
        response = manager_client.get(reverse('reports:sales-report'), _today_range())
        assert response.data['total_sales'] == '200.00'

    def test_revenue_sort(self, finance_client, sales):
        response = finance_client.get(
            reverse('reports:sales-report'),
            _today_range(product_sort='revenue_desc', product_limit=1),
        )
        assert len(response.data['products']) == 1

    def test_employee_forbidden(self, employee_client):
        response = employee_client.get(reverse('reports:sales-report'), _today_range())
        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestFinancialReportApi:

    def test_net_result(self, admin_client, sales, paid_expense, revenue):
        response = admin_client.get(reverse('reports:financial-report'), _today_range())

        assert response.status_code == status.HTTP_200_OK
        assert response.data['net_result'] == '160.00'
        assert response.data['expenses_by_category'][0]['category'] == 'Energia'

    def test_inverted_range(self, admin_client):
        today = timezone.localdate()
        response = admin_client.get(reverse('reports:financial-report'), {
            'start_date': today.isoformat(),
            'end_date': (today - timedelta(days=1)).isoformat(),
        })
        assert response.status_code == status.HTTP_400_BAD_REQUEST
