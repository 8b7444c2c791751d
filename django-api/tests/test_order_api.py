"""Integration tests for the order endpoints.

Run with: pytest tests/test_order_api.py -v
"""

import pytest
from rest_framework.test import APIClient

from checkout.models import BasketLine, Order, OrderStatus


def checkout(client: APIClient, address, codes=None):
    body = {"shippingId": address.pk}
    if codes is not None:
        body["discountCodes"] = codes
    return client.post("/api/orders/checkout", body, format="json")


@pytest.mark.django_db
class TestCheckout:
    """Tests for POST /api/orders/checkout"""

    def test_checkout_creates_order(
        self, customer_client, customer, address, product, add_to_basket, make_discount, notifier
    ):
        add_to_basket(customer, product, quantity=2)
        make_discount("SAVE10", percent="10")

        response = checkout(customer_client, address, ["SAVE10"])

        assert response.status_code == 201
        assert response.data["status"] == "OK"
        order = Order.objects.get(pk=response.data["orderId"])
        assert str(order.price_paid) == "18.00"
        assert [order_id.value for order_id in notifier.placed] == [order.pk]

    def test_foreign_address_is_forbidden(
        self, customer_client, customer, make_customer, product, add_to_basket
    ):
        add_to_basket(customer, product)
        other_address = make_customer("bob").shipping_addresses.get()

        response = checkout(customer_client, other_address)

        assert response.status_code == 403
        assert response.data["status"] == "SHIPPING_ADDRESS_INVALID"

    def test_unavailable_product_is_conflict(
        self, customer_client, customer, address, make_product, add_to_basket
    ):
        withdrawn = make_product("Mug", available=False)
        add_to_basket(customer, withdrawn)

        response = checkout(customer_client, address)

        assert response.status_code == 409
        assert response.data["status"] == "BASKET_INVALID"
        assert response.data["removedProductIds"] == [withdrawn.pk]
        assert not BasketLine.objects.filter(customer=customer).exists()

    def test_empty_basket_is_conflict(self, customer_client, address):
        response = checkout(customer_client, address)

        assert response.status_code == 409
        assert response.data["status"] == "BASKET_INVALID"

    def test_invalid_discount_is_bad_request(
        self, customer_client, customer, address, product, add_to_basket
    ):
        add_to_basket(customer, product)

        response = checkout(customer_client, address, ["NOPE"])

        assert response.status_code == 400
        assert response.data["status"] == "DISCOUNT_INVALID"
        assert response.data["unresolvedCodes"] == ["NOPE"]
        assert BasketLine.objects.filter(customer=customer).count() == 1

    def test_missing_shipping_id_is_bad_request(self, customer_client):
        response = customer_client.post("/api/orders/checkout", {}, format="json")

        assert response.status_code == 400

    def test_requires_customer_account(self, staff_client, address):
        assert checkout(staff_client, address).status_code == 403

    def test_requires_authentication(self, api_client: APIClient, address):
        assert checkout(api_client, address).status_code == 403


@pytest.mark.django_db
class TestOrderQueries:
    """Tests for GET /api/orders, /api/orders/{id} and last-purchase"""

    @pytest.fixture
    def placed_order(self, customer_client, customer, address, make_product, add_to_basket):
        add_to_basket(customer, make_product("Tea", price="10.00"), quantity=2)
        add_to_basket(customer, make_product("Mug", price="5.00"), quantity=1)
        response = checkout(customer_client, address)
        return Order.objects.get(pk=response.data["orderId"])

    def test_list_orders(self, customer_client, placed_order):
        response = customer_client.get("/api/orders")

        assert response.status_code == 200
        assert len(response.data) == 1
        row = response.data[0]
        assert row["id"] == placed_order.pk
        assert row["status"] == "Processing"
        assert row["productCount"] == 2
        assert row["total"] == "25.00"
        assert row["pricePaid"] == "25.00"

    def test_list_orders_only_shows_own_orders(self, make_customer, placed_order):
        client = APIClient()
        client.force_authenticate(user=make_customer("bob").user)

        response = client.get("/api/orders")

        assert response.status_code == 200
        assert response.data == []

    def test_order_details(self, customer_client, placed_order, address):
        response = customer_client.get(f"/api/orders/{placed_order.pk}")

        assert response.status_code == 200
        assert response.data["id"] == placed_order.pk
        assert response.data["total"] == "25.00"
        assert response.data["discountsUsed"] == []
        assert response.data["shippingAddress"]["id"] == address.pk
        assert {item["name"]: item["quantity"] for item in response.data["products"]} == {
            "Tea": 2,
            "Mug": 1,
        }

    def test_order_details_hides_other_customers_orders(self, make_customer, placed_order):
        client = APIClient()
        client.force_authenticate(user=make_customer("bob").user)

        response = client.get(f"/api/orders/{placed_order.pk}")

        assert response.status_code == 404
        assert response.data["code"] == "ORDER_NOT_FOUND"

    def test_order_details_invalid_id_format(self, customer_client):
        response = customer_client.get("/api/orders/abc")

        assert response.status_code == 400
        assert response.data["code"] == "INVALID_ID"

    def test_last_purchase_date(self, customer_client, placed_order):
        product_id = placed_order.line_items.first().product_id

        response = customer_client.get(f"/api/orders/last-purchase/{product_id}")

        assert response.status_code == 200
        assert response.data["lastPurchased"] is not None

    def test_last_purchase_date_never_bought(self, customer_client, product):
        response = customer_client.get(f"/api/orders/last-purchase/{product.pk}")

        assert response.status_code == 200
        assert response.data["lastPurchased"] is None


@pytest.mark.django_db
class TestOrderStatuses:
    """Tests for GET /api/orders/status and PUT /api/orders/{id}/status"""

    @pytest.fixture
    def order(self, customer, address, processing_status):
        return Order.objects.create(
            customer=customer,
            shipping_address=address,
            price_paid="10.00",
            status=processing_status,
        )

    def test_list_statuses_is_public(self, api_client: APIClient, processing_status):
        response = api_client.get("/api/orders/status")

        assert response.status_code == 200
        assert response.data == [{"id": processing_status.pk, "status": "Processing"}]

    def test_update_status(self, staff_client, order, notifier):
        shipped = OrderStatus.objects.create(status="Shipped")

        response = staff_client.put(
            f"/api/orders/{order.pk}/status", {"statusId": shipped.pk}, format="json"
        )

        assert response.status_code == 200
        assert response.data["status"] == "OK"
        order.refresh_from_db()
        assert order.status_id == shipped.pk
        assert [order_id.value for order_id in notifier.status_changed] == [order.pk]

    def test_update_status_unknown_order(self, staff_client, processing_status):
        response = staff_client.put(
            "/api/orders/9999/status", {"statusId": processing_status.pk}, format="json"
        )

        assert response.status_code == 404
        assert response.data["status"] == "ORDER_NOT_FOUND"

    def test_update_status_unknown_status(self, staff_client, order):
        response = staff_client.put(
            f"/api/orders/{order.pk}/status", {"statusId": 9999}, format="json"
        )

        assert response.status_code == 400
        assert response.data["status"] == "STATUS_NOT_FOUND"
        order.refresh_from_db()
        assert order.status.status == "Processing"

    def test_update_status_invalid_order_id(self, staff_client, processing_status):
        response = staff_client.put(
            "/api/orders/abc/status", {"statusId": processing_status.pk}, format="json"
        )

        assert response.status_code == 400
        assert response.data["code"] == "INVALID_ID"

    def test_update_status_requires_staff(self, customer_client, order, processing_status):
        response = customer_client.put(
            f"/api/orders/{order.pk}/status", {"statusId": processing_status.pk}, format="json"
        )

        assert response.status_code == 403
