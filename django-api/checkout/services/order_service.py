"""Order service - status workflow and customer order queries.

Statuses are an open, administratively managed list: any status may follow
any other, and the only precondition of a transition is that the target
status exists.
"""

from datetime import datetime

import structlog

from checkout.domain import (
    CustomerId,
    OrderDetails,
    OrderId,
    OrderStatus,
    OrderStatusId,
    OrderSummary,
    ProductId,
    StatusUpdateResult,
)
from checkout.domain.errors import (
    InvalidIdError,
    OrderNotFoundError,
    ReferentialIntegrityError,
)
from checkout.notifications.interfaces import OrderNotifier
from checkout.stores.interfaces import OrderStore

logger = structlog.get_logger(__name__)


class OrderStatusWorkflow:
    """Staff-driven status transitions for placed orders."""

    def __init__(self, store: OrderStore, notifier: OrderNotifier) -> None:
        self._store = store
        self._notifier = notifier

    def update_order_status(
        self, order_id: OrderId, status_id: OrderStatusId
    ) -> StatusUpdateResult:
        """Move an order to a new status and notify the customer.

        Storage failures propagate as StoreError. A notification failure never
        fails the update.
        """
        if not self._store.order_exists(order_id):
            return StatusUpdateResult.ORDER_NOT_FOUND
        if not self._store.status_exists(status_id):
            return StatusUpdateResult.STATUS_NOT_FOUND
        try:
            updated = self._store.set_order_status(order_id, status_id)
        except ReferentialIntegrityError:
            # status removed between the existence check and the update
            return StatusUpdateResult.STATUS_NOT_FOUND
        if not updated:
            return StatusUpdateResult.ORDER_NOT_FOUND

        logger.info(
            "Order status updated", order_id=order_id.value, status_id=status_id.value
        )
        try:
            self._notifier.notify_order_status_changed(order_id)
        except Exception:
            logger.exception("Order status notification failed", order_id=order_id.value)
        return StatusUpdateResult.OK

    def list_statuses(self) -> list[OrderStatus]:
        return self._store.list_statuses()


class OrderQueryService:
    """Read-only views of a customer's orders."""

    def __init__(self, store: OrderStore) -> None:
        self._store = store

    def list_orders(self, customer_id: CustomerId) -> list[OrderSummary]:
        """Return the customer's orders, newest first."""
        return self._store.list_orders_for_customer(customer_id)

    def get_order(self, customer_id: CustomerId, order_id: str) -> OrderDetails:
        """Return one of the customer's orders.

        Raises:
            InvalidIdError: If order_id is not a positive integer.
            OrderNotFoundError: If the order does not exist or is not theirs.
        """
        parsed_id = _parse(OrderId, order_id, "order id")
        details = self._store.get_order_details(parsed_id, customer_id=customer_id)
        if details is None:
            raise OrderNotFoundError(parsed_id.value)
        return details

    def get_last_purchase_date(
        self, customer_id: CustomerId, product_id: str
    ) -> datetime | None:
        """Return when the customer last bought the product, or None.

        Raises:
            InvalidIdError: If product_id is not a positive integer.
        """
        return self._store.get_last_purchase_date(
            customer_id, _parse(ProductId, product_id, "product id")
        )


def _parse(id_type, value: str, field: str):
    try:
        return id_type.from_string(value)
    except ValueError:
        raise InvalidIdError(field) from None
