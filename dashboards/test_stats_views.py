"""
Tests for the dashboard statistics endpoints.
Tests permissions, query validation, response envelope and failure handling.
"""
import pytest
from datetime import timedelta
from unittest import mock

from django.db import DatabaseError
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from marketplace.models import SubOrderStatus
from dashboards.services import StatsDashboardService


@pytest.mark.django_db
class TestStatsPermissions:

    def test_unauthenticated_rejected(self, api_client):
        response = api_client.get(reverse('dashboards:seller-stats'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.parametrize('url_name', [
        'dashboards:admin-stats',
        'dashboards:admin-stats-daily',
        'dashboards:supplier-stats',
    ])
    def test_seller_cannot_open_other_dashboards(self, api_client, seller_user, url_name):
        api_client.force_authenticate(user=seller_user)

        response = api_client.get(reverse(url_name))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_cannot_open_seller_dashboard(self, api_client, admin_user):
        api_client.force_authenticate(user=admin_user)

        response = api_client.get(reverse('dashboards:seller-stats'))

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestStatsQueryValidation:

    @pytest.fixture(autouse=True)
    def authenticate(self, api_client, seller_user):
        api_client.force_authenticate(user=seller_user)

    def test_malformed_date(self, api_client):
        response = api_client.get(reverse('dashboards:seller-stats'), {'from': '2025-13-01'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'from' in response.data

    def test_reversed_range(self, api_client):
        response = api_client.get(
            reverse('dashboards:seller-stats'),
            {'from': '2025-04-03', 'to': '2025-04-01'}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'to' in response.data

    def test_range_too_long(self, api_client, settings):
        settings.STATS_MAX_RANGE_DAYS = 31

        response = api_client.get(
            reverse('dashboards:seller-stats'),
            {'from': '2025-01-01', 'to': '2025-03-01'}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_explicit_range_echoed(self, api_client):
        response = api_client.get(
            reverse('dashboards:seller-stats'),
            {'from': '2025-04-01', 'to': '2025-04-03'}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['range'] == {'from': '2025-04-01', 'to': '2025-04-03'}


@pytest.mark.django_db
class TestStatsResponses:

    def test_seller_report_envelope(self, api_client, seller_user, make_order, make_sub_order):
        make_sub_order(
            make_order(seller_user, created_at=timezone.now()),
            status=SubOrderStatus.PAID,
            seller_profit='3.00'
        )
        api_client.force_authenticate(user=seller_user)

        response = api_client.get(reverse('dashboards:seller-stats'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] == 'stats-fetch-success'

        data = response.data['data']
        assert data['profit'] == '3.0'
        assert data['paid_sub_orders'] == 1
        assert len(data['monthly_profit_and_sub_orders']) == 6
        assert len(data['daily_profit_and_sub_orders']) == 10
        assert 'top_sellers' not in data

    def test_admin_report_has_top_sellers(self, api_client, admin_user):
        api_client.force_authenticate(user=admin_user)

        response = api_client.get(reverse('dashboards:admin-stats'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['top_sellers'] == []

    def test_supplier_report(self, api_client, supplier_user):
        api_client.force_authenticate(user=supplier_user)

        response = api_client.get(reverse('dashboards:supplier-stats'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['profit'] == '0.0'

    def test_daily_series_for_requested_range(self, api_client, seller_user):
        api_client.force_authenticate(user=seller_user)

        response = api_client.get(
            reverse('dashboards:seller-stats-daily'),
            {'from': '2025-04-01', 'to': '2025-04-03'}
        )

        assert response.status_code == status.HTTP_200_OK
        assert [day['date'] for day in response.data['data']] == [
            '2025-04-01', '2025-04-02', '2025-04-03'
        ]

    def test_daily_series_defaults_to_trailing_window(self, api_client, supplier_user):
        api_client.force_authenticate(user=supplier_user)

        response = api_client.get(reverse('dashboards:supplier-stats-daily'))

        today = timezone.now().date()
        dates = [day['date'] for day in response.data['data']]
        assert len(dates) == 10
        assert dates[0] == (today - timedelta(days=9)).isoformat()
        assert dates[-1] == today.isoformat()

    def test_query_failure_returns_error_code(self, api_client, admin_user):
        api_client.force_authenticate(user=admin_user)

        with mock.patch.object(
            StatsDashboardService, 'get_sub_order_breakdown', side_effect=DatabaseError('gone')
        ):
            response = api_client.get(reverse('dashboards:admin-stats'))

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {'error': 'stats-fetch-error'}
