from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'purchases'

router = DefaultRouter()
router.register(r'purchases', views.PurchaseViewSet, basename='purchase')
router.register(r'payables', views.AccountPayableViewSet, basename='payable')

urlpatterns = [
    # GET/POST /api/purchases/purchases/          - List / record merchandise purchases
    # POST     /api/purchases/payables/expenses/  - Launch an expense
    # POST     /api/purchases/payables/{id}/pay/  - Pay an installment
    # GET      /api/purchases/payables/summary/   - Pending and overdue totals
    path('', include(router.urls)),
]
