from django.contrib import admin
from .models import (
    Lead, Product, ProductMedia, Pickup, Order, SubOrder,
    SubOrderStatusHistory, OrderProduct, Transaction
)


class ProductMediaInline(admin.TabularInline):
    model = ProductMedia
    extra = 0


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'supplier', 'wholesale_price', 'created_at']
    search_fields = ['name', 'supplier__username', 'supplier__full_name']
    filter_horizontal = ['sellers']
    inlines = [ProductMediaInline]


class SubOrderInline(admin.TabularInline):
    model = SubOrder
    extra = 0
    fields = ['status', 'platform_profit', 'seller_profit', 'total', 'pickup']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'seller', 'total', 'created_at']
    list_filter = ['created_at']
    search_fields = ['id', 'seller__username', 'seller__full_name']
    date_hierarchy = 'created_at'
    inlines = [SubOrderInline]


class OrderProductInline(admin.TabularInline):
    model = OrderProduct
    extra = 0


class SubOrderStatusHistoryInline(admin.TabularInline):
    model = SubOrderStatusHistory
    extra = 0


@admin.register(SubOrder)
class SubOrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'order', 'status', 'platform_profit', 'seller_profit', 'created_at']
    list_filter = ['status']
    inlines = [OrderProductInline, SubOrderStatusHistoryInline]


@admin.register(Pickup)
class PickupAdmin(admin.ModelAdmin):
    list_display = ['reference', 'created_at']


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ['user', 'amount', 'created_at']
    list_filter = ['created_at']


@admin.register(Lead)
class LeadAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'email', 'phone', 'created_at']
    search_fields = ['full_name', 'email', 'phone']
