"""
Marketplace Models

Orders placed by sellers are split into sub-orders (one per shipment), each
carrying its own carrier status and profit split between the platform, the
seller and the suppliers of the line items.

These tables are written by the order-management flows and only read by
the dashboard statistics.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from decimal import Decimal
import uuid


class SubOrderStatus(models.TextChoices):
    """
    Carrier status codes that the statistics care about.
    Any other code counts as pending.
    """
    PENDING = 'PENDING', 'Pending'
    PAID = 'EC02', 'Paid'
    COMPLETED = '23', 'Completed'
    CANCELLED = 'EC01', 'Cancelled'
    RETURNED = '28', 'Returned'


class Lead(models.Model):
    """Prospective seller captured from the public landing pages."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    full_name = models.CharField(max_length=200)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=30, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    
    class Meta:
        db_table = 'marketplace_leads'
        ordering = ['-created_at']
    
    def __str__(self):
        return self.full_name


class Product(models.Model):
    """
    Catalogue product owned by a supplier.
    Sellers link products to their shop before ordering them.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    
    supplier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='supplied_products',
        help_text='Supplier who owns and ships this product'
    )
    sellers = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name='linked_products',
        help_text='Sellers who linked this product to their shop'
    )
    
    name = models.CharField(max_length=200)
    wholesale_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )
    
    created_at = models.DateTimeField(default=timezone.now)
    
    class Meta:
        db_table = 'marketplace_products'
        ordering = ['name']
    
    def __str__(self):
        return self.name


class ProductMedia(models.Model):
    """Product image; the lowest position is the thumbnail."""
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name='media'
    )
    key = models.CharField(max_length=500, help_text='Storage key of the file')
    position = models.PositiveIntegerField(default=0)
    
    class Meta:
        db_table = 'marketplace_product_media'
        ordering = ['position', 'id']
    
    def __str__(self):
        return self.key


class Pickup(models.Model):
    """Carrier pickup request grouping the sub-orders collected together."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    reference = models.CharField(max_length=50, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    
    class Meta:
        db_table = 'marketplace_pickups'
        ordering = ['-created_at']
    
    def __str__(self):
        return self.reference or str(self.id)


class Order(models.Model):
    """Customer order placed by a seller."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    
    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='orders'
    )
    total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )
    
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    
    class Meta:
        db_table = 'marketplace_orders'
        ordering = ['-created_at']
    
    def __str__(self):
        return f"Order {self.id}"


class SubOrder(models.Model):
    """
    Shipment-level partition of an order.
    
    Profit fields are nullable: the split is only known once the
    order-management flow prices the shipment.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    
    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='sub_orders'
    )
    pickup = models.ForeignKey(
        Pickup,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sub_orders'
    )
    
    status = models.CharField(
        max_length=20,
        default=SubOrderStatus.PENDING,
        db_index=True,
        help_text='Latest carrier status code'
    )
    
    platform_profit = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)
    seller_profit = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)
    total = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    
    created_at = models.DateTimeField(default=timezone.now)
    
    class Meta:
        db_table = 'marketplace_sub_orders'
        ordering = ['created_at']
    
    def __str__(self):
        return f"SubOrder {self.id} ({self.status})"


class SubOrderStatusHistory(models.Model):
    """One carrier status transition of a sub-order."""
    sub_order = models.ForeignKey(
        SubOrder,
        on_delete=models.CASCADE,
        related_name='status_history'
    )
    status = models.CharField(max_length=20)
    created_at = models.DateTimeField(default=timezone.now)
    
    class Meta:
        db_table = 'marketplace_sub_order_status_history'
        ordering = ['created_at', 'id']
        verbose_name_plural = 'Sub-order status history'
    
    def __str__(self):
        return f"{self.sub_order_id}: {self.status}"


class OrderProduct(models.Model):
    """
    Line item of a sub-order.
    
    ``quantity`` is kept as entered in the order form (a numeric string).
    ``product`` is nulled when the catalogue product is deleted.
    """
    sub_order = models.ForeignKey(
        SubOrder,
        on_delete=models.CASCADE,
        related_name='products'
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_lines'
    )
    quantity = models.CharField(max_length=20, default='1')
    detail_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    wholesale_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    supplier_profit = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)
    
    class Meta:
        db_table = 'marketplace_order_products'
    
    def __str__(self):
        return f"{self.quantity} x {self.product_id}"


class Transaction(models.Model):
    """Wallet movement (payout, withdrawal) of a seller or supplier."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='transactions'
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    
    class Meta:
        db_table = 'marketplace_transactions'
        ordering = ['-created_at']
    
    def __str__(self):
        return f"{self.user_id}: {self.amount}"
