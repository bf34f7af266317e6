"""
Statistics viewpoints.

A viewpoint decides which rows a dashboard may see and which profit field it
reads. The admin, seller and supplier dashboards share one aggregation
service and only differ by the viewpoint they pass in.

Scope predicates are ``Q`` objects relative to the model they filter:
- ``order_scope()``          -> marketplace.Order
- ``sub_order_scope()``      -> marketplace.SubOrder
- ``order_product_scope()``  -> marketplace.OrderProduct
"""

import re
from decimal import Decimal

from django.db.models import Prefetch, Q

from accounts.models import User
from marketplace.models import (
    Lead, Order, OrderProduct, Pickup, Product, SubOrder, Transaction
)
from ..exceptions import StatsAuthorizationError

ZERO = Decimal('0')

_LEADING_INT = re.compile(r'\s*([+-]?\d+)')


def parse_quantity(value) -> int:
    """
    Parse a line-item quantity stored as text.
    Reads the leading integer ("3", " 4 pcs" -> 4) and falls back to 0.
    """
    if value is None:
        return 0
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def as_decimal(value) -> Decimal:
    """Nullable money field to Decimal; ``None`` counts as zero."""
    if value is None:
        return ZERO
    return value if isinstance(value, Decimal) else Decimal(str(value))


def line_wholesale_price(line) -> Decimal:
    """Wholesale price frozen on the line, else the catalogue price."""
    if line.wholesale_price is not None:
        return line.wholesale_price
    if line.product is not None:
        return as_decimal(line.product.wholesale_price)
    return ZERO


def lines_prefetch():
    return Prefetch('products', queryset=OrderProduct.objects.select_related('product'))


class BaseViewpoint:
    """
    Scope and profit attribution for one dashboard role.
    """
    role = None
    includes_top_sellers = False
    reports_loss = False

    def __init__(self, user=None):
        self.user = user

    def __repr__(self):
        return f"{self.__class__.__name__}({getattr(self.user, 'pk', None)})"

    # ------------------------------------------------------------------
    # Scope predicates
    # ------------------------------------------------------------------

    def order_scope(self) -> Q:
        return Q()

    def sub_order_scope(self) -> Q:
        return Q()

    def order_product_scope(self) -> Q:
        return Q(product__isnull=False)

    # ------------------------------------------------------------------
    # Profit and amount selectors
    # ------------------------------------------------------------------

    def sub_order_prefetches(self, with_lines=False):
        """
        Relations the selectors read from each sub-order.
        ``with_lines`` loads the line items for amount and loss figures.
        """
        return [lines_prefetch()] if with_lines else []

    def sub_order_profit(self, sub_order) -> Decimal:
        raise NotImplementedError

    def order_amount(self, order) -> Decimal:
        """Gross amount of an order as seen from this viewpoint."""
        return as_decimal(order.total)

    def sub_order_amount(self, sub_order) -> Decimal:
        """Gross amount of one sub-order as seen from this viewpoint."""
        return as_decimal(sub_order.total)

    def sub_order_loss(self, sub_order) -> Decimal:
        """Retail margin of the lines: (detail - wholesale) * quantity."""
        loss = ZERO
        for line in sub_order.products.all():
            margin = as_decimal(line.detail_price) - line_wholesale_price(line)
            loss += margin * parse_quantity(line.quantity)
        return loss

    # ------------------------------------------------------------------
    # Counts
    # ------------------------------------------------------------------

    def get_basic_counts(self, date_range) -> dict:
        raise NotImplementedError

    def _transactions_in_range(self, date_range):
        return Transaction.objects.filter(
            created_at__gte=date_range.start_at,
            created_at__lte=date_range.end_at
        )


class AdminViewpoint(BaseViewpoint):
    """Platform-wide view; profit is the platform's share."""
    role = User.UserRole.ADMIN
    includes_top_sellers = True

    def sub_order_profit(self, sub_order) -> Decimal:
        return as_decimal(sub_order.platform_profit)

    def get_basic_counts(self, date_range) -> dict:
        return {
            'leads': Lead.objects.count(),
            'transactions': self._transactions_in_range(date_range).count(),
            'products': Product.objects.count(),
            'suppliers': User.objects.filter(role=User.UserRole.SUPPLIER).count(),
            'sellers': User.objects.filter(role=User.UserRole.SELLER).count(),
        }


class SellerViewpoint(BaseViewpoint):
    """Orders placed by one seller; profit is the seller's share."""
    role = User.UserRole.SELLER
    reports_loss = True

    def order_scope(self) -> Q:
        return Q(seller=self.user)

    def sub_order_scope(self) -> Q:
        return Q(order__seller=self.user)

    def order_product_scope(self) -> Q:
        return Q(
            product__isnull=False,
            product__sellers=self.user,
            sub_order__order__seller=self.user,
        )

    def sub_order_profit(self, sub_order) -> Decimal:
        return as_decimal(sub_order.seller_profit)

    def sub_order_amount(self, sub_order) -> Decimal:
        """Retail value of the lines: detail price * quantity."""
        return sum(
            (as_decimal(line.detail_price) * parse_quantity(line.quantity)
             for line in sub_order.products.all()),
            ZERO
        )

    def get_basic_counts(self, date_range) -> dict:
        return {
            'transactions': self._transactions_in_range(date_range).filter(user=self.user).count(),
            'products': Product.objects.filter(sellers=self.user).count(),
            'pickups': Pickup.objects.filter(
                sub_orders__order__seller=self.user
            ).distinct().count(),
        }


class SupplierViewpoint(BaseViewpoint):
    """
    Orders containing at least one of the supplier's products.
    Profit is the ``supplier_profit`` of the supplier's own line items.
    """
    role = User.UserRole.SUPPLIER

    def _supplied_sub_order_ids(self):
        return SubOrder.objects.filter(
            products__product__supplier=self.user
        ).values('pk')

    def order_scope(self) -> Q:
        return Q(pk__in=Order.objects.filter(
            sub_orders__products__product__supplier=self.user
        ).values('pk'))

    def sub_order_scope(self) -> Q:
        return Q(pk__in=self._supplied_sub_order_ids())

    def order_product_scope(self) -> Q:
        return Q(product__supplier=self.user)

    def sub_order_prefetches(self, with_lines=False):
        return [lines_prefetch()]

    def _own_lines(self, sub_order):
        return [
            line for line in sub_order.products.all()
            if line.product is not None and line.product.supplier_id == self.user.pk
        ]

    def sub_order_profit(self, sub_order) -> Decimal:
        return sum(
            (as_decimal(line.supplier_profit) for line in self._own_lines(sub_order)),
            ZERO
        )

    def sub_order_amount(self, sub_order) -> Decimal:
        return sum(
            (line_wholesale_price(line) * parse_quantity(line.quantity)
             for line in self._own_lines(sub_order)),
            ZERO
        )

    def order_amount(self, order) -> Decimal:
        return sum(
            (self.sub_order_amount(sub_order) for sub_order in order.sub_orders.all()),
            ZERO
        )

    def get_basic_counts(self, date_range) -> dict:
        return {
            'transactions': self._transactions_in_range(date_range).filter(user=self.user).count(),
            'products': Product.objects.filter(supplier=self.user).count(),
            'pickups': Pickup.objects.filter(
                sub_orders__products__product__supplier=self.user
            ).distinct().count(),
        }


VIEWPOINTS = {
    viewpoint.role.value: viewpoint
    for viewpoint in (AdminViewpoint, SellerViewpoint, SupplierViewpoint)
}


def viewpoint_for_user(user, role=None) -> BaseViewpoint:
    """
    Role guard: build the viewpoint for ``user``.

    Args:
        user: Requesting user
        role: Dashboard being requested; defaults to the user's own role

    Raises:
        StatsAuthorizationError: the user is anonymous or holds another role
    """
    if user is None or not user.is_authenticated:
        raise StatsAuthorizationError()

    role = role or user.role
    if user.role != role or role not in VIEWPOINTS:
        raise StatsAuthorizationError()

    return VIEWPOINTS[role](user)
