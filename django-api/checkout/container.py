"""Default wiring of services to Django stores for the request layer."""

from django.apps import apps

from checkout.notifications.interfaces import OrderNotifier
from checkout.services.checkout_service import CheckoutService
from checkout.services.discount_service import DiscountResolver, DiscountService
from checkout.services.order_service import OrderQueryService, OrderStatusWorkflow
from checkout.stores.django_store import (
    DjangoCheckoutStore,
    DjangoDiscountStore,
    DjangoOrderStore,
)


def notifier() -> OrderNotifier:
    return apps.get_app_config("checkout").notifier


def checkout_service() -> CheckoutService:
    return CheckoutService(
        store=DjangoCheckoutStore(),
        discount_store=DjangoDiscountStore(),
        notifier=notifier(),
    )


def order_status_workflow() -> OrderStatusWorkflow:
    return OrderStatusWorkflow(store=DjangoOrderStore(), notifier=notifier())


def order_query_service() -> OrderQueryService:
    return OrderQueryService(store=DjangoOrderStore())


def discount_resolver() -> DiscountResolver:
    return DiscountResolver(store=DjangoDiscountStore())


def discount_service() -> DiscountService:
    return DiscountService(store=DjangoDiscountStore())
