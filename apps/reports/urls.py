from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    # Seller performance
    path('performance/', views.my_performance, name='my-performance'),
    path('performance/<uuid:user_id>/', views.seller_performance, name='seller-performance'),

    path('dashboard/', views.dashboard, name='dashboard'),

    # Period reports
    path('sales/', views.sales_report, name='sales-report'),
    path('financial/', views.financial_report, name='financial-report'),
]
