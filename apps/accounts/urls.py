from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'users'

router = DefaultRouter()
router.register(r'users', views.UserViewSet, basename='user')

urlpatterns = [
    # Authentication
    path('login/', views.login, name='login'),
    path('logout/', views.logout, name='logout'),

    # Current user
    path('user/', views.get_current_user, name='current-user'),

    # Password reset
    path('password-reset/', views.request_password_reset, name='password-reset'),
    path('password-reset/confirm/', views.confirm_password_reset, name='password-reset-confirm'),

    # User administration
    path('', include(router.urls)),
]
