"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Every method may raise
StoreError for storage failures; mutating methods that run inside the commit
transaction may also raise the state-conflict and referential errors listed.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal

from checkout.domain import (
    AddressId,
    AvailabilitySnapshot,
    CustomerId,
    DiscountCode,
    DiscountCodeId,
    OrderDetails,
    OrderDraft,
    OrderId,
    OrderStatus,
    OrderStatusId,
    OrderSummary,
    ProductId,
)


class BasketStore(ABC):
    """Interface for reading and pruning a customer's basket."""

    @abstractmethod
    def get_basket_snapshot(self, customer_id: CustomerId) -> list[AvailabilitySnapshot]:
        """Return basket lines joined with live price and availability.

        A line is available when the requested quantity does not exceed stock
        and the product is flagged available. Deleted products have no row.
        """
        ...

    @abstractmethod
    def remove_basket_lines(
        self, customer_id: CustomerId, product_ids: list[ProductId]
    ) -> int:
        """Delete the given products from the basket; return rows deleted."""
        ...


class CheckoutStore(BasketStore):
    """Interface for everything the checkout coordinator touches."""

    @abstractmethod
    def address_belongs_to_customer(
        self, customer_id: CustomerId, address_id: AddressId
    ) -> bool:
        """Check if the shipping address is owned by the customer."""
        ...

    @abstractmethod
    def commit_order(self, draft: OrderDraft) -> OrderId:
        """Write the order and all its side effects in one transaction.

        Raises:
            BasketChangedError: If the basket lines differ from draft.lines.
            StockConflictError: If a product no longer has enough stock.
            DiscountExhaustedError: If a limited code ran out of uses.
            ReferentialIntegrityError: If a referenced row vanished.
            StoreError: For any other storage failure.
        """
        ...


class DiscountStore(ABC):
    """Interface for discount code persistence operations."""

    @abstractmethod
    def get_discount_code(self, code: str) -> DiscountCode | None:
        """Return a code by exact, case-sensitive match, or None."""
        ...

    @abstractmethod
    def list_discount_codes(self) -> list[DiscountCode]:
        """Return all codes ordered by created_on ascending."""
        ...

    @abstractmethod
    def create_discount_code(
        self,
        code: str,
        percent: Decimal,
        remaining_uses: int,
        active: bool,
        stackable: bool,
    ) -> DiscountCode:
        """Insert a new code.

        Raises:
            DiscountCodeConflictError: If the code already exists.
        """
        ...

    @abstractmethod
    def update_discount_code(
        self, discount_code_id: DiscountCodeId, **changes: object
    ) -> DiscountCode | None:
        """Apply a partial update; return the updated code or None if missing."""
        ...


class OrderStore(ABC):
    """Interface for order reads and status updates."""

    @abstractmethod
    def order_exists(self, order_id: OrderId) -> bool:
        """Check if an order exists."""
        ...

    @abstractmethod
    def status_exists(self, status_id: OrderStatusId) -> bool:
        """Check if an order status exists."""
        ...

    @abstractmethod
    def set_order_status(self, order_id: OrderId, status_id: OrderStatusId) -> bool:
        """Point the order at a new status; return False if the order is missing."""
        ...

    @abstractmethod
    def list_statuses(self) -> list[OrderStatus]:
        """Return every order status ordered by id."""
        ...

    @abstractmethod
    def list_orders_for_customer(self, customer_id: CustomerId) -> list[OrderSummary]:
        """Return the customer's orders, newest first."""
        ...

    @abstractmethod
    def get_order_details(
        self, order_id: OrderId, customer_id: CustomerId | None = None
    ) -> OrderDetails | None:
        """Return an order with its lines, or None if missing.

        When customer_id is given, orders of other customers are treated as
        missing.
        """
        ...

    @abstractmethod
    def get_last_purchase_date(
        self, customer_id: CustomerId, product_id: ProductId
    ) -> datetime | None:
        """Return when the customer last ordered the product, or None."""
        ...
