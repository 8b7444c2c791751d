from checkout.domain.models import (
    AvailabilitySnapshot,
    BasketLine,
    DiscountCode,
    Order,
    OrderDetails,
    OrderDraft,
    OrderLineItem,
    OrderStatus,
    OrderSummary,
    ShippingAddress,
)
from checkout.domain.results import (
    CheckoutState,
    DiscountResolution,
    OrderPlaceResult,
    OrderPlaceStatus,
    StatusUpdateResult,
)
from checkout.domain.value_objects import (
    AddressId,
    CustomerId,
    DiscountCodeId,
    Money,
    OrderId,
    OrderStatusId,
    Percent,
    ProductId,
    Quantity,
    RemainingUses,
)

__all__ = [
    "AvailabilitySnapshot",
    "BasketLine",
    "DiscountCode",
    "Order",
    "OrderDetails",
    "OrderDraft",
    "OrderLineItem",
    "OrderStatus",
    "OrderSummary",
    "ShippingAddress",
    "CheckoutState",
    "DiscountResolution",
    "OrderPlaceResult",
    "OrderPlaceStatus",
    "StatusUpdateResult",
    "AddressId",
    "CustomerId",
    "DiscountCodeId",
    "Money",
    "OrderId",
    "OrderStatusId",
    "Percent",
    "ProductId",
    "Quantity",
    "RemainingUses",
]
