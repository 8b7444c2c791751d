from checkout.notifications.dispatch import DeferredNotifier, build_notifier
from checkout.notifications.email import EmailOrderNotifier, OrderEmailType
from checkout.notifications.interfaces import OrderNotifier

__all__ = [
    "DeferredNotifier",
    "EmailOrderNotifier",
    "OrderEmailType",
    "OrderNotifier",
    "build_notifier",
]
