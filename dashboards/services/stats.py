"""
Dashboard Statistics Service

Computes the statistics shown on the admin, seller and supplier dashboards:
- Basic counts (leads, transactions, products, users, pickups)
- Trailing monthly profit / sub-order series
- Trailing daily profit / order series (zero-filled)
- Top products by quantity sold, top sellers by sub-order volume
- Sub-order state breakdown and profit totals for the requested range

The role-specific rules (row scope, profit field) come from a viewpoint,
see ``dashboards.services.viewpoints``.
"""

import logging
import time
from collections import Counter, defaultdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db.models import Prefetch
from django.utils import timezone

from marketplace.models import Order, OrderProduct, Product, SubOrder, SubOrderStatus
from ..exceptions import StatsFetchError
from .concurrency import run_concurrently
from .date_ranges import DateRange, month_bounds, utc_date
from .viewpoints import ZERO, parse_quantity

logger = logging.getLogger(__name__)

User = get_user_model()

UNKNOWN_PRODUCT = 'Unknown Product'

# Share of a cancelled or returned sale's margin that is recovered
LOSS_RECOVERY_RATE = Decimal('0.1')

# Plain strings: status codes are matched against sets of history entries
PAID = SubOrderStatus.PAID.value
COMPLETED = SubOrderStatus.COMPLETED.value
RETURNED = SubOrderStatus.RETURNED.value
CANCELLED = SubOrderStatus.CANCELLED.value


def round_profit(value: Decimal) -> float:
    """Profit for chart series: one decimal, as a number."""
    return float(value.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


def format_profit(value: Decimal) -> str:
    """Profit for report totals: one decimal, as a string ("0.0")."""
    return str(value.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


def format_amount(value: Decimal) -> str:
    return str(value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def classify_sub_order(status: str, history_statuses) -> str:
    """
    Place a sub-order in exactly one state bucket.
    Precedence: completed, paid, returned, pending.
    """
    if status == COMPLETED:
        return 'completed'
    if status == PAID:
        return 'paid'
    if RETURNED in history_statuses:
        return 'returned'
    return 'pending'


class StatsDashboardService:
    """
    Statistics aggregation for one dashboard viewpoint.

    Usage:
        from dashboards.services import StatsDashboardService, viewpoint_for_user

        viewpoint = viewpoint_for_user(request.user, 'SELLER')
        service = StatsDashboardService(viewpoint, DateRange(start, end))

        report = service.get_report()
        daily = service.get_daily_profit_and_sub_orders()
    """

    def __init__(self, viewpoint, date_range: Optional[DateRange] = None, now=None):
        self.viewpoint = viewpoint
        self.now = now or timezone.now()
        self.today = utc_date(self.now)
        self.date_range = date_range or DateRange.single_day(self.today)

        self.top_limit = settings.STATS_TOP_LIMIT
        self.monthly_window = settings.STATS_MONTHLY_WINDOW
        self.daily_window = settings.STATS_DAILY_WINDOW_DAYS

    # =========================================================================
    # QUERY HELPERS
    # =========================================================================

    def _orders_in(self, date_range: DateRange):
        return Order.objects.filter(
            self.viewpoint.order_scope(),
            created_at__gte=date_range.start_at,
            created_at__lte=date_range.end_at
        )

    def _sub_orders_in(self, date_range: DateRange):
        return SubOrder.objects.filter(
            self.viewpoint.sub_order_scope(),
            order__created_at__gte=date_range.start_at,
            order__created_at__lte=date_range.end_at
        )

    def _sub_orders_prefetch(self, *extra, with_lines=False):
        """An order's sub-orders, limited to the ones the viewpoint may see."""
        return Prefetch(
            'sub_orders',
            queryset=SubOrder.objects.filter(
                self.viewpoint.sub_order_scope()
            ).prefetch_related(
                *extra, *self.viewpoint.sub_order_prefetches(with_lines)
            )
        )

    # =========================================================================
    # BASIC COUNTS
    # =========================================================================

    def get_basic_counts(self) -> Dict[str, int]:
        return self.viewpoint.get_basic_counts(self.date_range)

    # =========================================================================
    # TIME SERIES
    # =========================================================================

    def get_monthly_profit_and_sub_orders(self, months: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Profit and sub-order count for each of the trailing calendar months.

        An order counts for its month when at least one of its visible
        sub-orders is paid; its profit and sub-order count then include ALL
        its visible sub-orders, paid or not.

        Returns:
            list: ``{month, profit, sub_orders}`` oldest month first
        """
        months = months or self.monthly_window

        windows = [month_bounds(self.today, offset) for offset in range(months)]
        windows.reverse()

        paid_order_ids = SubOrder.objects.filter(
            self.viewpoint.sub_order_scope(),
            status=PAID
        ).values('order_id')

        series = []
        for start, end in windows:
            orders = Order.objects.filter(
                self.viewpoint.order_scope(),
                created_at__gte=start,
                created_at__lte=end,
                pk__in=paid_order_ids
            ).prefetch_related(self._sub_orders_prefetch())

            profit = ZERO
            sub_order_count = 0
            for order in orders:
                sub_orders = order.sub_orders.all()
                sub_order_count += len(sub_orders)
                for sub_order in sub_orders:
                    profit += self.viewpoint.sub_order_profit(sub_order)

            series.append({
                'month': start.strftime('%b'),
                'profit': round_profit(profit),
                'sub_orders': sub_order_count,
            })

        return series

    def get_daily_profit_and_sub_orders(self, date_range: Optional[DateRange] = None) -> List[Dict[str, Any]]:
        """
        Paid activity per UTC day, one entry per day of the range.

        ``sub_orders`` counts distinct orders (several paid sub-orders of one
        order count once). Days without activity report zeros.

        Args:
            date_range: Days to report; defaults to the trailing daily window
        """
        date_range = date_range or DateRange.trailing(self.today, self.daily_window)

        sub_orders = self._sub_orders_in(date_range).filter(
            status=PAID
        ).select_related('order').prefetch_related(
            *self.viewpoint.sub_order_prefetches()
        )

        order_ids_by_day = defaultdict(set)
        profit_by_day = defaultdict(lambda: ZERO)

        for sub_order in sub_orders:
            day = utc_date(sub_order.order.created_at)
            order_ids_by_day[day].add(sub_order.order_id)
            profit_by_day[day] += self.viewpoint.sub_order_profit(sub_order)

        return [
            {
                'date': day.isoformat(),
                'sub_orders': len(order_ids_by_day.get(day, ())),
                'profit': round_profit(profit_by_day.get(day, ZERO)),
            }
            for day in date_range.days()
        ]

    # =========================================================================
    # RANKINGS
    # =========================================================================

    def get_top_products(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Best-selling products of the range by total quantity.

        A product missing from the catalogue is still ranked, with its raw id,
        "Unknown Product" and no media.
        """
        limit = limit or self.top_limit

        lines = OrderProduct.objects.filter(
            self.viewpoint.order_product_scope(),
            sub_order__order__created_at__gte=self.date_range.start_at,
            sub_order__order__created_at__lte=self.date_range.end_at
        ).values_list('product_id', 'quantity')

        quantities = Counter()
        for product_id, quantity in lines:
            quantities[product_id] += parse_quantity(quantity)

        ranked = quantities.most_common(limit)
        products = Product.objects.prefetch_related('media').in_bulk(
            [product_id for product_id, _ in ranked]
        )

        top_products = []
        for product_id, total_quantity in ranked:
            product = products.get(product_id)
            media = list(product.media.all()) if product else []
            top_products.append({
                'id': str(product.id if product else product_id),
                'name': product.name if product else UNKNOWN_PRODUCT,
                'media': media[0].key if media else '',
                'total_quantity': total_quantity,
            })

        return top_products

    def get_top_sellers(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Sellers with the most sub-orders in the range (platform-wide).
        """
        limit = limit or self.top_limit

        seller_ids = SubOrder.objects.filter(
            order__created_at__gte=self.date_range.start_at,
            order__created_at__lte=self.date_range.end_at
        ).values_list('order__seller_id', flat=True)

        ranked = Counter(seller_ids).most_common(limit)
        sellers = User.objects.in_bulk([seller_id for seller_id, _ in ranked])

        top_sellers = []
        for seller_id, sub_order_count in ranked:
            seller = sellers.get(seller_id)
            top_sellers.append({
                'id': str(seller_id),
                'name': seller.get_full_name() if seller else None,
                'media': seller.image if seller else '',
                'sub_orders': sub_order_count,
            })

        return top_sellers

    # =========================================================================
    # RANGE TOTALS
    # =========================================================================

    def get_sub_order_breakdown(self) -> Dict[str, int]:
        """
        Sub-orders of the range by state.

        completed + paid + returned + pending == sub_orders. ``cancelled``
        (a cancellation in the status history) overlaps those buckets.
        """
        sub_orders = self._sub_orders_in(self.date_range).prefetch_related('status_history')

        states = Counter()
        cancelled = 0
        for sub_order in sub_orders:
            history = {entry.status for entry in sub_order.status_history.all()}
            states[classify_sub_order(sub_order.status, history)] += 1
            if CANCELLED in history:
                cancelled += 1

        return {
            'sub_orders': sum(states.values()),
            'completed_sub_orders': states['completed'],
            'paid_sub_orders': states['paid'],
            'returned_sub_orders': states['returned'],
            'pending_sub_orders': states['pending'],
            'cancelled_sub_orders': cancelled,
        }

    def get_profit_totals(self) -> Dict[str, Decimal]:
        """
        Profit and amounts over every order of the range, paid or not.

        Returns:
            dict:
            - ``profit`` (all sub-orders), ``paid_profit`` (status paid),
              ``delivered_not_paid_profit`` (status completed)
            - ``order_amount``, ``delivered_order_amount`` (orders with a
              completed sub-order)
            - ``pending_revenue`` (pending and not cancelled),
              ``cancelled_revenue``, ``returned_revenue`` (sub-order amounts)
            - ``loss``: retail margin of cancelled or returned sub-orders,
              less the recovered share
        """
        orders = self._orders_in(self.date_range).prefetch_related(
            self._sub_orders_prefetch('status_history', with_lines=True)
        )

        totals = {
            'profit': ZERO,
            'paid_profit': ZERO,
            'delivered_not_paid_profit': ZERO,
            'order_amount': ZERO,
            'delivered_order_amount': ZERO,
            'pending_revenue': ZERO,
            'cancelled_revenue': ZERO,
            'returned_revenue': ZERO,
            'loss': ZERO,
        }
        for order in orders:
            delivered = False
            for sub_order in order.sub_orders.all():
                history = {entry.status for entry in sub_order.status_history.all()}
                profit = self.viewpoint.sub_order_profit(sub_order)
                amount = self.viewpoint.sub_order_amount(sub_order)

                totals['profit'] += profit
                if sub_order.status == PAID:
                    totals['paid_profit'] += profit
                if sub_order.status == COMPLETED:
                    totals['delivered_not_paid_profit'] += profit
                if sub_order.status == COMPLETED or COMPLETED in history:
                    delivered = True

                if CANCELLED not in history and classify_sub_order(sub_order.status, history) == 'pending':
                    totals['pending_revenue'] += amount
                if CANCELLED in history:
                    totals['cancelled_revenue'] += amount
                if RETURNED in history:
                    totals['returned_revenue'] += amount
                if CANCELLED in history or RETURNED in history:
                    totals['loss'] += self.viewpoint.sub_order_loss(sub_order)

            amount = self.viewpoint.order_amount(order)
            totals['order_amount'] += amount
            if delivered:
                totals['delivered_order_amount'] += amount

        totals['loss'] -= totals['loss'] * LOSS_RECOVERY_RATE
        return totals

    # =========================================================================
    # REPORTS
    # =========================================================================

    def _collect(self, tasks):
        """Run report queries together; any failure fails the whole report."""
        started = time.monotonic()
        try:
            results = run_concurrently(tasks)
        except Exception as exc:
            logger.exception(
                "Statistics report failed for %r (%s)", self.viewpoint, self.date_range
            )
            raise StatsFetchError() from exc

        logger.info(
            "Statistics report for %r (%s) built in %.0f ms",
            self.viewpoint, self.date_range, (time.monotonic() - started) * 1000
        )
        return results

    def get_report(self) -> Dict[str, Any]:
        """
        Full dashboard report for the viewpoint and date range.

        Raises:
            StatsFetchError: any underlying query failed
        """
        tasks = {
            'counts': self.get_basic_counts,
            'monthly': self.get_monthly_profit_and_sub_orders,
            'daily': self.get_daily_profit_and_sub_orders,
            'top_products': self.get_top_products,
            'breakdown': self.get_sub_order_breakdown,
            'totals': self.get_profit_totals,
        }
        if self.viewpoint.includes_top_sellers:
            tasks['top_sellers'] = self.get_top_sellers

        results = self._collect(tasks)
        totals = results['totals']

        report = {
            **results['counts'],
            **results['breakdown'],
            'profit': format_profit(totals['profit']),
            'paid_profit': format_profit(totals['paid_profit']),
            'order_amount': format_amount(totals['order_amount']),
            'delivered_order_amount': format_amount(totals['delivered_order_amount']),
            'delivered_not_paid_profit': format_profit(totals['delivered_not_paid_profit']),
            'pending_revenue': format_amount(totals['pending_revenue']),
            'cancelled_revenue': format_amount(totals['cancelled_revenue']),
            'returned_revenue': format_amount(totals['returned_revenue']),
            'monthly_profit_and_sub_orders': results['monthly'],
            'daily_profit_and_sub_orders': results['daily'],
            'top_products': results['top_products'],
        }
        if self.viewpoint.reports_loss:
            report['loss'] = format_amount(totals['loss'])
        if 'top_sellers' in results:
            report['top_sellers'] = results['top_sellers']

        report['range'] = self.date_range.as_dict()
        report['generated_at'] = self.now.isoformat()
        return report

    def get_daily_report(self, date_range: Optional[DateRange] = None) -> List[Dict[str, Any]]:
        """
        Daily series alone, with the same failure handling as ``get_report``.
        """
        results = self._collect({
            'daily': lambda: self.get_daily_profit_and_sub_orders(date_range),
        })
        return results['daily']
