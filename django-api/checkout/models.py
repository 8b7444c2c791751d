"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from checkout.domain.value_objects import UNLIMITED_USES


class Customer(models.Model):
    """Persistence model linking an auth user to a shopping profile."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="customer"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return str(self.user)


class Product(models.Model):
    """Persistence model for the purchasable side of a catalog product."""

    name = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    stock = models.PositiveIntegerField(default=0)
    available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class ShippingAddress(models.Model):
    """Persistence model for a customer's address book entry."""

    customer = models.ForeignKey(
        Customer, on_delete=models.CASCADE, related_name="shipping_addresses"
    )
    first_address_line = models.CharField(max_length=255)
    second_address_line = models.CharField(max_length=255, blank=True)
    area_code = models.CharField(max_length=32)
    country_state = models.CharField(max_length=100)
    country_name = models.CharField(max_length=100, blank=True)

    def __str__(self) -> str:
        return f"{self.first_address_line}, {self.area_code}"


class BasketLine(models.Model):
    """Persistence model for a product in a customer's basket."""

    customer = models.ForeignKey(
        Customer, on_delete=models.CASCADE, related_name="basket_lines"
    )
    product = models.ForeignKey(
        Product, on_delete=models.CASCADE, related_name="basket_lines"
    )
    quantity = models.PositiveIntegerField(default=1)
    added_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["customer", "product"], name="unique_product_per_basket"
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1), name="basket_quantity_positive"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product_id} x {self.quantity}"


class DiscountCode(models.Model):
    """Persistence model for percentage discount codes."""

    code = models.CharField(max_length=64, unique=True)
    percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    stackable = models.BooleanField(default=False)
    remaining_uses = models.IntegerField(
        default=UNLIMITED_USES, validators=[MinValueValidator(UNLIMITED_USES)]
    )
    active = models.BooleanField(default=True)
    created_on = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_on"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(remaining_uses__gte=UNLIMITED_USES),
                name="discount_remaining_uses_valid",
            ),
            models.CheckConstraint(
                condition=models.Q(percent__gte=0) & models.Q(percent__lte=100),
                name="discount_percent_range",
            ),
        ]

    def __str__(self) -> str:
        return self.code


class OrderStatus(models.Model):
    """Persistence model for the open list of order statuses."""

    status = models.CharField(max_length=64, unique=True)

    class Meta:
        ordering = ["id"]
        verbose_name_plural = "order statuses"

    def __str__(self) -> str:
        return self.status


class Order(models.Model):
    """Persistence model for placed orders. Never deleted."""

    customer = models.ForeignKey(
        Customer, on_delete=models.PROTECT, related_name="orders"
    )
    shipping_address = models.ForeignKey(
        ShippingAddress, on_delete=models.PROTECT, related_name="orders"
    )
    price_paid = models.DecimalField(max_digits=12, decimal_places=2)
    placed_on = models.DateTimeField(auto_now_add=True)
    status = models.ForeignKey(
        OrderStatus, on_delete=models.PROTECT, related_name="orders"
    )

    class Meta:
        ordering = ["-placed_on"]
        indexes = [
            models.Index(fields=["customer", "-placed_on"]),
        ]

    def __str__(self) -> str:
        return f"Order {self.pk}"


class OrderLineItem(models.Model):
    """Persistence model for the price snapshot of a product in an order."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="line_items")
    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="order_line_items"
    )
    quantity = models.PositiveIntegerField()
    item_price_at_purchase = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["order", "product"], name="unique_product_per_order"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product_id} x {self.quantity} @ {self.item_price_at_purchase}"


class OrderDiscountUsage(models.Model):
    """Audit row recording a discount code applied to an order."""

    order = models.ForeignKey(
        Order, on_delete=models.CASCADE, related_name="discount_usages"
    )
    discount_code = models.ForeignKey(
        DiscountCode, on_delete=models.PROTECT, related_name="usages"
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["order", "discount_code"], name="unique_discount_per_order"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} used {self.discount_code_id}"
