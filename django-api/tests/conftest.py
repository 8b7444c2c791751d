"""Pytest configuration and shared fixtures."""

from decimal import Decimal

import pytest
from django.apps import apps
from rest_framework.test import APIClient

from checkout.domain import OrderId
from checkout.models import (
    BasketLine,
    Customer,
    DiscountCode,
    OrderStatus,
    Product,
    ShippingAddress,
)
from checkout.notifications.interfaces import OrderNotifier


class RecordingNotifier(OrderNotifier):
    """Collects notified order ids instead of sending anything."""

    def __init__(self) -> None:
        self.placed: list[OrderId] = []
        self.status_changed: list[OrderId] = []

    def notify_order_placed(self, order_id: OrderId) -> None:
        self.placed.append(order_id)

    def notify_order_status_changed(self, order_id: OrderId) -> None:
        self.status_changed.append(order_id)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def notifier(monkeypatch) -> RecordingNotifier:
    """Replace the app-wide notifier so no e-mail is sent from tests."""
    recorder = RecordingNotifier()
    monkeypatch.setattr(apps.get_app_config("checkout"), "notifier", recorder)
    return recorder


@pytest.fixture
def make_customer(django_user_model):
    def make(username: str = "alice") -> Customer:
        user = django_user_model.objects.create_user(
            username=username, email=f"{username}@example.com", password="secret"
        )
        customer = Customer.objects.create(user=user)
        ShippingAddress.objects.create(
            customer=customer,
            first_address_line=f"1 {username.title()} Street",
            area_code="AB1 2CD",
            country_state="Kent",
            country_name="United Kingdom",
        )
        return customer

    return make


@pytest.fixture
def customer(make_customer) -> Customer:
    return make_customer("alice")


@pytest.fixture
def address(customer) -> ShippingAddress:
    return customer.shipping_addresses.get()


@pytest.fixture
def make_product():
    def make(
        name: str = "Tea",
        price: str = "10.00",
        stock: int = 10,
        available: bool = True,
    ) -> Product:
        return Product.objects.create(
            name=name, price=Decimal(price), stock=stock, available=available
        )

    return make


@pytest.fixture
def product(make_product) -> Product:
    return make_product()


@pytest.fixture
def add_to_basket():
    def add(customer: Customer, product: Product, quantity: int = 1) -> BasketLine:
        return BasketLine.objects.create(
            customer=customer, product=product, quantity=quantity
        )

    return add


@pytest.fixture
def make_discount():
    def make(
        code: str = "SAVE10",
        percent: str = "10",
        stackable: bool = False,
        remaining_uses: int = -1,
        active: bool = True,
    ) -> DiscountCode:
        return DiscountCode.objects.create(
            code=code,
            percent=Decimal(percent),
            stackable=stackable,
            remaining_uses=remaining_uses,
            active=active,
        )

    return make


@pytest.fixture
def processing_status() -> OrderStatus:
    return OrderStatus.objects.create(status="Processing")


@pytest.fixture
def customer_client(customer) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=customer.user)
    return client


@pytest.fixture
def staff_client(django_user_model) -> APIClient:
    staff = django_user_model.objects.create_user(
        username="staff", email="staff@example.com", password="secret", is_staff=True
    )
    client = APIClient()
    client.force_authenticate(user=staff)
    return client
