from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'inventory'

router = DefaultRouter()
router.register(r'lines', views.InventoryLineViewSet, basename='line')
router.register(r'counts', views.StockCountViewSet, basename='count')

urlpatterns = [
    path('', include(router.urls)),
]
