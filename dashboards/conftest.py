"""
Shared pytest fixtures for dashboards tests.
"""
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from marketplace.models import (
    Order, OrderProduct, Product, ProductMedia, SubOrder, SubOrderStatus, SubOrderStatusHistory
)

User = get_user_model()

# Fixed clock for the statistics tests: Saturday 5 April 2025, noon UTC
NOW = datetime(2025, 4, 5, 12, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()


@pytest.fixture
def admin_user(db):
    """Create platform admin user."""
    return User.objects.create_user(
        username='admin1',
        email='admin@test.com',
        password='testpass123',
        full_name='Platform Admin',
        role=User.UserRole.ADMIN
    )


@pytest.fixture
def seller_user(db):
    """Create seller user."""
    return User.objects.create_user(
        username='seller1',
        email='seller@test.com',
        password='testpass123',
        full_name='Ama Seller',
        image='avatars/ama.png',
        role=User.UserRole.SELLER
    )


@pytest.fixture
def other_seller(db):
    """Create another seller for cross-seller scoping."""
    return User.objects.create_user(
        username='seller2',
        email='seller2@test.com',
        password='testpass123',
        first_name='Kofi',
        last_name='Mensah',
        role=User.UserRole.SELLER
    )


@pytest.fixture
def supplier_user(db):
    """Create supplier user."""
    return User.objects.create_user(
        username='supplier1',
        email='supplier@test.com',
        password='testpass123',
        full_name='Accra Wholesale',
        role=User.UserRole.SUPPLIER
    )


@pytest.fixture
def other_supplier(db):
    """Create another supplier for cross-supplier scoping."""
    return User.objects.create_user(
        username='supplier2',
        email='supplier2@test.com',
        password='testpass123',
        full_name='Kumasi Goods',
        role=User.UserRole.SUPPLIER
    )


@pytest.fixture
def make_product(db):
    """Factory: catalogue product, optionally linked to sellers and with media keys."""
    def _make(supplier, name, wholesale_price='10.00', sellers=(), media=()):
        product = Product.objects.create(
            supplier=supplier,
            name=name,
            wholesale_price=Decimal(wholesale_price)
        )
        if sellers:
            product.sellers.add(*sellers)
        for position, key in enumerate(media):
            ProductMedia.objects.create(product=product, key=key, position=position)
        return product
    return _make


@pytest.fixture
def make_order(db):
    """Factory: order placed by ``seller`` at ``created_at``."""
    def _make(seller, created_at=NOW, total='100.00'):
        return Order.objects.create(
            seller=seller,
            total=Decimal(total),
            created_at=created_at
        )
    return _make


@pytest.fixture
def make_sub_order(db):
    """
    Factory: sub-order with status history and line items.

    ``lines`` is a list of ``(product, quantity)`` or
    ``(product, quantity, supplier_profit)`` tuples.
    """
    def _make(order, status=SubOrderStatus.PENDING, platform_profit=None,
              seller_profit=None, total=None, history=(), lines=()):
        sub_order = SubOrder.objects.create(
            order=order,
            status=status,
            platform_profit=Decimal(platform_profit) if platform_profit is not None else None,
            seller_profit=Decimal(seller_profit) if seller_profit is not None else None,
            total=Decimal(total) if total is not None else None,
        )
        for entry in history:
            SubOrderStatusHistory.objects.create(sub_order=sub_order, status=entry)
        for line in lines:
            product, quantity = line[0], line[1]
            supplier_profit = line[2] if len(line) > 2 else None
            OrderProduct.objects.create(
                sub_order=sub_order,
                product=product,
                quantity=quantity,
                supplier_profit=Decimal(supplier_profit) if supplier_profit is not None else None
            )
        return sub_order
    return _make
