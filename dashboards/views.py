"""
Dashboard API Views

Statistics endpoints for the admin, seller and supplier dashboards.
Each view validates the optional ``from``/``to`` query parameters, builds
the caller's viewpoint and returns the report from StatsDashboardService.
"""

import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import User
from .exceptions import StatsFetchError
from .permissions import IsPlatformAdmin, IsSeller, IsSupplier
from .serializers import StatsQuerySerializer
from .services import StatsDashboardService, viewpoint_for_user

logger = logging.getLogger(__name__)

SUCCESS_CODE = 'stats-fetch-success'


class BaseStatsView(APIView):
    """
    Shared flow for the statistics endpoints.
    Subclasses set ``role`` and the matching permission class.
    """
    role = None
    date_range = None
    permission_classes = [IsAuthenticated]

    def build_service(self, request):
        serializer = StatsQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        self.date_range = serializer.validated_data['date_range']
        viewpoint = viewpoint_for_user(request.user, self.role)
        return StatsDashboardService(viewpoint, self.date_range)

    def fetch(self, service):
        return service.get_report()

    def get(self, request):
        service = self.build_service(request)

        try:
            data = self.fetch(service)
        except StatsFetchError as exc:
            return Response(
                {'error': exc.default_code},
                status=exc.status_code
            )

        return Response(
            {'success': SUCCESS_CODE, 'data': data},
            status=status.HTTP_200_OK
        )


class DailyStatsMixin:
    """
    Daily series only. With a ``from``/``to`` range the series covers those
    days, otherwise the trailing daily window ending today.
    """

    def fetch(self, service):
        return service.get_daily_report(self.date_range)


class AdminStatsView(BaseStatsView):
    """
    Platform Statistics

    GET /api/dashboards/admin/stats/?from=YYYY-MM-DD&to=YYYY-MM-DD

    Returns platform-wide counts, sub-order breakdown, platform profit,
    monthly and daily series, top products and top sellers.

    Permission: Admin only
    """
    role = User.UserRole.ADMIN
    permission_classes = [IsAuthenticated, IsPlatformAdmin]


class SellerStatsView(BaseStatsView):
    """
    Seller Statistics

    GET /api/dashboards/seller/stats/?from=YYYY-MM-DD&to=YYYY-MM-DD

    Permission: Seller only
    """
    role = User.UserRole.SELLER
    permission_classes = [IsAuthenticated, IsSeller]


class SupplierStatsView(BaseStatsView):
    """
    Supplier Statistics

    GET /api/dashboards/supplier/stats/?from=YYYY-MM-DD&to=YYYY-MM-DD

    Only orders containing the supplier's products are counted.

    Permission: Supplier only
    """
    role = User.UserRole.SUPPLIER
    permission_classes = [IsAuthenticated, IsSupplier]


class AdminDailyStatsView(DailyStatsMixin, AdminStatsView):
    """
    GET /api/dashboards/admin/stats/daily/
    """


class SellerDailyStatsView(DailyStatsMixin, SellerStatsView):
    """
    GET /api/dashboards/seller/stats/daily/
    """


class SupplierDailyStatsView(DailyStatsMixin, SupplierStatsView):
    """
    GET /api/dashboards/supplier/stats/daily/
    """
