"""Serializers for request bodies and for transforming domain models to API responses.

Field names are camelCase on the wire.
"""

from decimal import Decimal

from rest_framework import serializers


class CheckoutRequestSerializer(serializers.Serializer):
    shippingId = serializers.IntegerField(min_value=1)
    discountCodes = serializers.ListField(
        child=serializers.CharField(max_length=64),
        required=False,
        default=list,
    )


class OrderStatusUpdateSerializer(serializers.Serializer):
    statusId = serializers.IntegerField(min_value=1)


class DiscountCodeCreateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=64)
    percent = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0"),
        max_value=Decimal("100"),
    )
    uses = serializers.IntegerField(min_value=-1)
    active = serializers.BooleanField()
    stackable = serializers.BooleanField()


class DiscountCodeUpdateSerializer(serializers.Serializer):
    percent = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0"),
        max_value=Decimal("100"),
        required=False,
    )
    remainingUses = serializers.IntegerField(min_value=-1, required=False)
    active = serializers.BooleanField(required=False)
    stackable = serializers.BooleanField(required=False)


class DiscountCodeSerializer(serializers.Serializer):
    """Serializer for DiscountCode domain model."""

    id = serializers.IntegerField(source="id.value")
    code = serializers.CharField()
    percent = serializers.DecimalField(
        max_digits=5, decimal_places=2, source="percent.value"
    )
    stackable = serializers.BooleanField()
    remainingUses = serializers.IntegerField(source="remaining_uses.value")
    active = serializers.BooleanField()
    createdOn = serializers.DateTimeField(source="created_on")


class DiscountValidationSerializer(serializers.Serializer):
    """What a customer may learn about a code before checking out."""

    code = serializers.CharField()
    valid = serializers.BooleanField()
    percent = serializers.DecimalField(
        max_digits=5, decimal_places=2, source="percent.value"
    )
    stackable = serializers.BooleanField()


class OrderStatusSerializer(serializers.Serializer):
    id = serializers.IntegerField(source="id.value")
    status = serializers.CharField()


class OrderSummarySerializer(serializers.Serializer):
    """Serializer for one row of a customer's order history."""

    id = serializers.IntegerField(source="id.value")
    status = serializers.CharField()
    productCount = serializers.IntegerField(source="product_count")
    total = serializers.DecimalField(
        max_digits=12, decimal_places=2, source="total.amount"
    )
    pricePaid = serializers.DecimalField(
        max_digits=12, decimal_places=2, source="price_paid.amount"
    )
    placedOn = serializers.DateTimeField(source="placed_on")


class OrderLineItemSerializer(serializers.Serializer):
    productId = serializers.IntegerField(source="product_id.value")
    name = serializers.CharField(source="product_name")
    quantity = serializers.IntegerField(source="quantity.value")
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, source="item_price_at_purchase.amount"
    )


class ShippingAddressSerializer(serializers.Serializer):
    id = serializers.IntegerField(source="id.value")
    firstAddressLine = serializers.CharField(source="first_address_line")
    secondAddressLine = serializers.CharField(source="second_address_line")
    areaCode = serializers.CharField(source="area_code")
    countryState = serializers.CharField(source="country_state")
    countryName = serializers.CharField(source="country_name")


class OrderDetailsSerializer(serializers.Serializer):
    """Serializer for an order with its items, discounts and address."""

    id = serializers.IntegerField(source="order.id.value")
    status = serializers.CharField(source="order.status.status")
    placedOn = serializers.DateTimeField(source="order.placed_on")
    total = serializers.DecimalField(
        max_digits=12, decimal_places=2, source="total.amount"
    )
    pricePaid = serializers.DecimalField(
        max_digits=12, decimal_places=2, source="order.price_paid.amount"
    )
    products = OrderLineItemSerializer(source="line_items", many=True)
    discountsUsed = serializers.ListField(
        child=serializers.CharField(), source="discount_codes"
    )
    shippingAddress = ShippingAddressSerializer(source="shipping_address")
