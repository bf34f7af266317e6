"""
End-to-end tests for dashboard statistics

Tests cover:
1. JWT login followed by a statistics request with the bearer token
2. Role claim carried in the token and enforced by the endpoints
3. The stats_report management command (full and daily reports, errors)

Run with: pytest tests/integration/test_dashboard_stats_flow.py -v
"""

import json
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from marketplace.models import Order, OrderProduct, Product, SubOrder, SubOrderStatus

User = get_user_model()


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def seller(db):
    """Create a seller user."""
    return User.objects.create_user(
        username='flow_seller',
        email='flow_seller@example.com',
        password='testpass123',
        role='SELLER',
        full_name='Flow Seller'
    )


@pytest.fixture
def supplier(db):
    """Create a supplier user."""
    return User.objects.create_user(
        username='flow_supplier',
        email='flow_supplier@example.com',
        password='testpass123',
        role='SUPPLIER'
    )


@pytest.fixture
def paid_order(seller, supplier):
    """One order on 2 April 2025 with a single paid sub-order."""
    product = Product.objects.create(
        supplier=supplier,
        name='Shea Butter',
        wholesale_price=Decimal('15.00')
    )
    product.sellers.add(seller)

    order = Order.objects.create(
        seller=seller,
        total=Decimal('80.00'),
        created_at=datetime(2025, 4, 2, 9, 30, tzinfo=dt_timezone.utc)
    )
    sub_order = SubOrder.objects.create(
        order=order,
        status=SubOrderStatus.PAID,
        platform_profit=Decimal('4.000'),
        seller_profit=Decimal('12.345')
    )
    OrderProduct.objects.create(
        sub_order=sub_order,
        product=product,
        quantity='2',
        supplier_profit=Decimal('6.500')
    )
    return order


# =============================================================================
# JWT FLOW
# =============================================================================

@pytest.mark.django_db
class TestTokenThenStats:

    def login(self, api_client, username):
        response = api_client.post(
            '/api/auth/token/',
            {'username': username, 'password': 'testpass123'},
            format='json'
        )
        assert response.status_code == status.HTTP_200_OK
        return response.data

    def test_token_carries_role(self, api_client, seller):
        data = self.login(api_client, 'flow_seller')

        assert AccessToken(data['access'])['role'] == 'SELLER'
        assert data['user']['role'] == 'SELLER'
        assert data['user']['full_name'] == 'Flow Seller'

    def test_bearer_token_opens_own_dashboard(self, api_client, seller, paid_order):
        data = self.login(api_client, 'flow_seller')
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {data['access']}")

        response = api_client.get(
            '/api/dashboards/seller/stats/',
            {'from': '2025-04-02', 'to': '2025-04-02'}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['profit'] == '12.3'
        assert response.data['data']['top_products'][0]['total_quantity'] == 2

    def test_bearer_token_cannot_open_other_dashboard(self, api_client, supplier):
        data = self.login(api_client, 'flow_supplier')
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {data['access']}")

        response = api_client.get('/api/dashboards/seller/stats/')

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# MANAGEMENT COMMAND
# =============================================================================

@pytest.mark.django_db
class TestStatsReportCommand:

    def run(self, *args):
        out = StringIO()
        call_command('stats_report', *args, stdout=out)
        return json.loads(out.getvalue())

    def test_supplier_report(self, supplier, paid_order):
        report = self.run('flow_supplier', '--from', '2025-04-01', '--to', '2025-04-03')

        assert report['range'] == {'from': '2025-04-01', 'to': '2025-04-03'}
        assert report['profit'] == '6.5'
        assert report['order_amount'] == '30.00'
        assert report['paid_sub_orders'] == 1

    def test_daily_series(self, seller, paid_order):
        series = self.run('flow_seller', '--from', '2025-04-02', '--to', '2025-04-03', '--daily')

        assert series == [
            {'date': '2025-04-02', 'sub_orders': 1, 'profit': 12.3},
            {'date': '2025-04-03', 'sub_orders': 0, 'profit': 0.0},
        ]

    def test_unknown_user(self):
        with pytest.raises(CommandError, match='does not exist'):
            call_command('stats_report', 'nobody', stdout=StringIO())

    def test_invalid_range(self, seller):
        with pytest.raises(CommandError):
            call_command(
                'stats_report', 'flow_seller', '--from', '2025-04-03', '--to', '2025-04-01',
                stdout=StringIO()
            )
