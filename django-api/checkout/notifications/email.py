"""Order e-mails sent through Django's e-mail framework."""

from enum import Enum

import structlog
from django.core.mail import send_mail
from django.template.loader import render_to_string

from checkout.domain import OrderId
from checkout.notifications.interfaces import OrderNotifier
from checkout.stores.interfaces import OrderStore

logger = structlog.get_logger(__name__)


class OrderEmailType(Enum):
    ORDER_PLACED = "Your order has been placed"
    STATUS_CHANGED = "Your order has been updated"


class EmailOrderNotifier(OrderNotifier):
    """Renders the order summary e-mail and sends it to the customer."""

    template_name = "checkout/email/order_update.txt"

    def __init__(self, store: OrderStore, from_email: str) -> None:
        self._store = store
        self._from_email = from_email

    def notify_order_placed(self, order_id: OrderId) -> None:
        self._send(order_id, OrderEmailType.ORDER_PLACED)

    def notify_order_status_changed(self, order_id: OrderId) -> None:
        self._send(order_id, OrderEmailType.STATUS_CHANGED)

    def _send(self, order_id: OrderId, email_type: OrderEmailType) -> None:
        details = self._store.get_order_details(order_id)
        if details is None:
            logger.error("Failed to get order details for email", order_id=order_id.value)
            return
        if not details.customer_email:
            logger.error("Failed to get customer email for order", order_id=order_id.value)
            return

        body = render_to_string(
            self.template_name,
            {
                "email_type": email_type.name,
                "order": details.order,
                "line_items": details.line_items,
                "discount_codes": details.discount_codes,
                "address": details.shipping_address,
                "total": details.total,
            },
        )
        send_mail(
            subject=email_type.value,
            message=body,
            from_email=self._from_email,
            recipient_list=[details.customer_email],
        )
        logger.info("Order email sent", order_id=order_id.value, email_type=email_type.name)
