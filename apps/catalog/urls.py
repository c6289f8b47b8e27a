from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'catalog'

router = DefaultRouter()
router.register(r'products', views.ProductViewSet, basename='product')
router.register(r'categories', views.CategoryViewSet, basename='category')
router.register(r'colors', views.ColorViewSet, basename='color')
router.register(r'size-grades', views.SizeGradeViewSet, basename='size-grade')
router.register(r'suppliers', views.SupplierViewSet, basename='supplier')

urlpatterns = [
    # GET    /api/catalog/products/             - List products
    # POST   /api/catalog/products/             - Create product with variations
    # PATCH  /api/catalog/products/{id}/        - Update (variations replace the set)
    # DELETE /api/catalog/products/{id}/        - Delete product without stock
    # GET    /api/catalog/products/search/?q=   - Search by name or code
    path('', include(router.urls)),
]
