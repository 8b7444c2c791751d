from django.urls import path

from checkout.handlers import (
    CheckoutView,
    DiscountCodeDetailView,
    DiscountCodeListView,
    DiscountCodeValidateView,
    LastPurchaseView,
    OrderDetailView,
    OrderListView,
    OrderStatusListView,
    OrderStatusUpdateView,
)

urlpatterns = [
    path("orders", OrderListView.as_view(), name="order-list"),
    path("orders/checkout", CheckoutView.as_view(), name="order-checkout"),
    path("orders/status", OrderStatusListView.as_view(), name="order-status-list"),
    path(
        "orders/last-purchase/<str:product_id>",
        LastPurchaseView.as_view(),
        name="order-last-purchase",
    ),
    path("orders/<str:order_id>", OrderDetailView.as_view(), name="order-detail"),
    path(
        "orders/<str:order_id>/status",
        OrderStatusUpdateView.as_view(),
        name="order-status-update",
    ),
    path("discounts", DiscountCodeListView.as_view(), name="discount-list"),
    path(
        "discounts/validate",
        DiscountCodeValidateView.as_view(),
        name="discount-validate",
    ),
    path(
        "discounts/<str:discount_code_id>",
        DiscountCodeDetailView.as_view(),
        name="discount-detail",
    ),
]
