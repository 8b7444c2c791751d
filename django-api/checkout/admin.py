from django.contrib import admin

from checkout.models import (
    BasketLine,
    Customer,
    DiscountCode,
    Order,
    OrderDiscountUsage,
    OrderLineItem,
    OrderStatus,
    Product,
    ShippingAddress,
)


class ShippingAddressInline(admin.TabularInline):
    model = ShippingAddress
    extra = 0


class BasketLineInline(admin.TabularInline):
    model = BasketLine
    extra = 0


class OrderLineItemInline(admin.TabularInline):
    model = OrderLineItem
    extra = 0
    readonly_fields = ["product", "quantity", "item_price_at_purchase"]


class OrderDiscountUsageInline(admin.TabularInline):
    model = OrderDiscountUsage
    extra = 0
    readonly_fields = ["discount_code"]


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ["user"]
    search_fields = ["user__username", "user__email"]
    inlines = [ShippingAddressInline, BasketLineInline]


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ["name", "price", "stock", "available"]
    list_filter = ["available"]
    search_fields = ["name"]


@admin.register(DiscountCode)
class DiscountCodeAdmin(admin.ModelAdmin):
    list_display = ["code", "percent", "stackable", "remaining_uses", "active"]
    list_filter = ["active", "stackable"]
    search_fields = ["code"]


@admin.register(OrderStatus)
class OrderStatusAdmin(admin.ModelAdmin):
    list_display = ["status"]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ["id", "customer", "status", "price_paid", "placed_on"]
    list_filter = ["status"]
    inlines = [OrderLineItemInline, OrderDiscountUsageInline]
