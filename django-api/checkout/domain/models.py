"""Domain models representing persisted and computed checkout state.

These are pure domain objects with no API input rules.
Django ORM models are in checkout/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

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


@dataclass(frozen=True)
class BasketLine:
    """A product and quantity the customer intends to buy."""

    customer_id: CustomerId
    product_id: ProductId
    quantity: Quantity


@dataclass(frozen=True)
class AvailabilitySnapshot:
    """A basket line joined with live price and stock at read time.

    Never persisted; one is computed per line per checkout attempt.
    """

    product_id: ProductId
    quantity: Quantity
    available: bool
    price_per_item: Money


@dataclass(frozen=True)
class DiscountCode:
    """Domain representation of a DiscountCode."""

    id: DiscountCodeId
    code: str
    percent: Percent
    stackable: bool
    remaining_uses: RemainingUses
    active: bool
    created_on: datetime | None = None

    @property
    def valid(self) -> bool:
        return self.active and not self.remaining_uses.exhausted


@dataclass(frozen=True)
class OrderDraft:
    """Everything the commit transaction writes for one order."""

    customer_id: CustomerId
    shipping_address_id: AddressId
    price_paid: Money
    lines: tuple[AvailabilitySnapshot, ...]
    discount_code_ids: tuple[DiscountCodeId, ...] = ()


@dataclass(frozen=True)
class OrderStatus:
    """An administratively managed order status."""

    id: OrderStatusId
    status: str


@dataclass(frozen=True)
class OrderLineItem:
    """Permanent price snapshot of one product in an order."""

    order_id: OrderId
    product_id: ProductId
    product_name: str
    quantity: Quantity
    item_price_at_purchase: Money

    @property
    def line_total(self) -> Money:
        return Money(self.item_price_at_purchase.amount * self.quantity.value)


@dataclass(frozen=True)
class Order:
    """Domain representation of a placed Order."""

    id: OrderId
    customer_id: CustomerId
    shipping_address_id: AddressId
    price_paid: Money
    placed_on: datetime
    status: OrderStatus


@dataclass(frozen=True)
class OrderSummary:
    """One row of a customer's order history."""

    id: OrderId
    status: str
    product_count: int
    total: Money
    price_paid: Money
    placed_on: datetime


@dataclass(frozen=True)
class ShippingAddress:
    """Domain representation of a ShippingAddress."""

    id: AddressId
    customer_id: CustomerId
    first_address_line: str
    second_address_line: str
    area_code: str
    country_state: str
    country_name: str


@dataclass(frozen=True)
class OrderDetails:
    """An order with its line items, discounts and shipping address."""

    order: Order
    line_items: tuple[OrderLineItem, ...]
    discount_codes: tuple[str, ...]
    shipping_address: ShippingAddress
    customer_email: str = ""

    @property
    def total(self) -> Money:
        return Money(sum((item.line_total.amount for item in self.line_items), Decimal(0)))
