"""
Dashboard URL Configuration
"""

from django.urls import path
from .views import (
    # Admin Dashboard
    AdminStatsView,
    AdminDailyStatsView,

    # Seller Dashboard
    SellerStatsView,
    SellerDailyStatsView,

    # Supplier Dashboard
    SupplierStatsView,
    SupplierDailyStatsView,
)

app_name = 'dashboards'

urlpatterns = [
    # Admin Dashboard Endpoints
    path('admin/stats/', AdminStatsView.as_view(), name='admin-stats'),
    path('admin/stats/daily/', AdminDailyStatsView.as_view(), name='admin-stats-daily'),

    # Seller Dashboard Endpoints
    path('seller/stats/', SellerStatsView.as_view(), name='seller-stats'),
    path('seller/stats/daily/', SellerDailyStatsView.as_view(), name='seller-stats-daily'),

    # Supplier Dashboard Endpoints
    path('supplier/stats/', SupplierStatsView.as_view(), name='supplier-stats'),
    path('supplier/stats/daily/', SupplierDailyStatsView.as_view(), name='supplier-stats-daily'),
]
