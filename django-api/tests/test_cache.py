"""Tests for cache behavior.

Invalidation runs after commit, so writes are wrapped in
django_capture_on_commit_callbacks(execute=True).
Run with: pytest tests/test_cache.py -v
"""

import pytest
from django.core.cache import cache

from checkout.cache import ORDER_STATUSES_KEY, customer_orders_key
from checkout.models import Order, OrderStatus


@pytest.mark.django_db
class TestStatusCache:
    """Tests for the cached status list."""

    def test_status_list_is_served_from_cache(self, api_client, processing_status):
        api_client.get("/api/orders/status")
        OrderStatus.objects.filter(pk=processing_status.pk).update(status="Renamed")

        response = api_client.get("/api/orders/status")

        assert response.data[0]["status"] == "Processing"

    def test_status_save_invalidates_list_cache(
        self, api_client, processing_status, django_capture_on_commit_callbacks
    ):
        api_client.get("/api/orders/status")
        assert cache.get(ORDER_STATUSES_KEY) is not None

        with django_capture_on_commit_callbacks(execute=True):
            OrderStatus.objects.create(status="Shipped")

        assert cache.get(ORDER_STATUSES_KEY) is None
        response = api_client.get("/api/orders/status")
        assert [row["status"] for row in response.data] == ["Processing", "Shipped"]

    def test_status_delete_invalidates_list_cache(
        self, api_client, processing_status, django_capture_on_commit_callbacks
    ):
        shipped = OrderStatus.objects.create(status="Shipped")
        api_client.get("/api/orders/status")

        with django_capture_on_commit_callbacks(execute=True):
            shipped.delete()

        assert cache.get(ORDER_STATUSES_KEY) is None

    def test_invalidation_waits_for_commit(
        self, api_client, processing_status, django_capture_on_commit_callbacks
    ):
        api_client.get("/api/orders/status")

        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            OrderStatus.objects.create(status="Shipped")

        assert callbacks
        assert cache.get(ORDER_STATUSES_KEY) is not None


@pytest.mark.django_db
class TestCustomerOrderCache:
    """Tests for the cached per-customer order list."""

    def test_checkout_invalidates_order_list(
        self,
        customer_client,
        customer,
        address,
        product,
        add_to_basket,
        django_capture_on_commit_callbacks,
    ):
        assert customer_client.get("/api/orders").data == []
        assert cache.get(customer_orders_key(customer.pk)) == []
        add_to_basket(customer, product)

        with django_capture_on_commit_callbacks(execute=True):
            customer_client.post(
                "/api/orders/checkout", {"shippingId": address.pk}, format="json"
            )

        assert cache.get(customer_orders_key(customer.pk)) is None
        assert len(customer_client.get("/api/orders").data) == 1

    def test_status_update_invalidates_order_list(
        self,
        customer_client,
        staff_client,
        customer,
        address,
        processing_status,
        django_capture_on_commit_callbacks,
    ):
        order = Order.objects.create(
            customer=customer,
            shipping_address=address,
            price_paid="10.00",
            status=processing_status,
        )
        shipped = OrderStatus.objects.create(status="Shipped")
        assert customer_client.get("/api/orders").data[0]["status"] == "Processing"

        with django_capture_on_commit_callbacks(execute=True):
            staff_client.put(
                f"/api/orders/{order.pk}/status", {"statusId": shipped.pk}, format="json"
            )

        assert customer_client.get("/api/orders").data[0]["status"] == "Shipped"

    def test_status_rename_invalidates_order_lists(
        self,
        customer_client,
        make_customer,
        customer,
        address,
        processing_status,
        django_capture_on_commit_callbacks,
    ):
        other = make_customer("bob")
        for owner, shipping in ((customer, address), (other, other.shipping_addresses.get())):
            Order.objects.create(
                customer=owner,
                shipping_address=shipping,
                price_paid="10.00",
                status=processing_status,
            )
        assert customer_client.get("/api/orders").data[0]["status"] == "Processing"

        with django_capture_on_commit_callbacks(execute=True):
            processing_status.status = "Being packed"
            processing_status.save()

        assert cache.get(customer_orders_key(customer.pk)) is None
        assert cache.get(customer_orders_key(other.pk)) is None
        assert customer_client.get("/api/orders").data[0]["status"] == "Being packed"
