"""Fire-and-forget delivery of order notifications."""

from collections.abc import Callable
from concurrent.futures import Executor, ThreadPoolExecutor

import structlog
from django.db import close_old_connections, transaction

from checkout.conf import checkout_setting
from checkout.domain import OrderId
from checkout.notifications.interfaces import OrderNotifier

logger = structlog.get_logger(__name__)


class DeferredNotifier(OrderNotifier):
    """Runs a notifier once the surrounding transaction commits.

    With an executor the notification runs on a worker thread; without one it
    runs inline. Either way, failures are logged and never reach the caller.
    """

    def __init__(
        self,
        notifier: OrderNotifier,
        executor: Executor | None = None,
        using: str = "default",
    ) -> None:
        self._notifier = notifier
        self._executor = executor
        self._using = using

    def notify_order_placed(self, order_id: OrderId) -> None:
        self._dispatch(self._notifier.notify_order_placed, order_id)

    def notify_order_status_changed(self, order_id: OrderId) -> None:
        self._dispatch(self._notifier.notify_order_status_changed, order_id)

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)

    def _dispatch(self, send: Callable[[OrderId], None], order_id: OrderId) -> None:
        transaction.on_commit(lambda: self._submit(send, order_id), using=self._using)

    def _submit(self, send: Callable[[OrderId], None], order_id: OrderId) -> None:
        if self._executor is None:
            _deliver(send, order_id)
            return
        try:
            self._executor.submit(_deliver_in_worker, send, order_id)
        except RuntimeError:
            logger.exception("Notification executor unavailable", order_id=order_id.value)


def _deliver(send: Callable[[OrderId], None], order_id: OrderId) -> None:
    try:
        send(order_id)
    except Exception:
        logger.exception(
            "Order notification failed",
            order_id=order_id.value,
            notification=getattr(send, "__name__", repr(send)),
        )


def _deliver_in_worker(send: Callable[[OrderId], None], order_id: OrderId) -> None:
    close_old_connections()
    try:
        _deliver(send, order_id)
    finally:
        close_old_connections()


def build_notifier() -> DeferredNotifier:
    """Build the default e-mail notifier from settings."""
    from checkout.notifications.email import EmailOrderNotifier
    from checkout.stores.django_store import DjangoOrderStore

    email = EmailOrderNotifier(
        store=DjangoOrderStore(),
        from_email=checkout_setting("ORDER_EMAIL_FROM"),
    )
    executor = None
    if checkout_setting("NOTIFY_ASYNC"):
        executor = ThreadPoolExecutor(
            max_workers=checkout_setting("NOTIFY_WORKERS"),
            thread_name_prefix="order-notify",
        )
    return DeferredNotifier(email, executor=executor)
