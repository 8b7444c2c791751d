from checkout.handlers.views import (
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

__all__ = [
    "CheckoutView",
    "DiscountCodeDetailView",
    "DiscountCodeListView",
    "DiscountCodeValidateView",
    "LastPurchaseView",
    "OrderDetailView",
    "OrderListView",
    "OrderStatusListView",
    "OrderStatusUpdateView",
]
