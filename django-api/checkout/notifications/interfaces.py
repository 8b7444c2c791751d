"""Notifier interface consumed by the checkout and order status services."""

from abc import ABC, abstractmethod

from checkout.domain import OrderId


class OrderNotifier(ABC):
    """Tells the customer about changes to an order.

    Callers treat notifications as fire-and-forget: a failure to notify never
    fails the operation that triggered it.
    """

    @abstractmethod
    def notify_order_placed(self, order_id: OrderId) -> None:
        ...

    @abstractmethod
    def notify_order_status_changed(self, order_id: OrderId) -> None:
        ...
