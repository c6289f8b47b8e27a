from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'sales'

router = DefaultRouter()
router.register(r'customers', views.CustomerViewSet, basename='customer')
router.register(r'payment-settings', views.PaymentMethodSettingViewSet, basename='payment-setting')
router.register(r'registers', views.CashRegisterViewSet, basename='register')
router.register(r'sales', views.SaleViewSet, basename='sale')

urlpatterns = [
    path('', include(router.urls)),
]
