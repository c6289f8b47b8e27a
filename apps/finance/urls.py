from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'finance'

router = DefaultRouter()
router.register(r'accounts', views.BankAccountViewSet, basename='account')
router.register(r'revenues', views.RevenueViewSet, basename='revenue')
router.register(r'revenue-categories', views.RevenueCategoryViewSet, basename='revenue-category')
router.register(r'expense-categories', views.ExpenseCategoryViewSet, basename='expense-category')

urlpatterns = [
    path('', include(router.urls)),
]
