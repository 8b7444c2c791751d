"""Django ORM implementations of the checkout stores.

Shared counters (product stock, discount uses) are only ever changed with
guarded ``UPDATE ... SET x = x - n`` statements evaluated by the database,
never by reading a value and writing a computed one back.
"""

import functools
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from typing import ParamSpec, TypeVar

from django.db import DatabaseError, IntegrityError, connections, transaction
from django.db.models import (
    BooleanField,
    Count,
    DecimalField,
    ExpressionWrapper,
    F,
    Max,
    Q,
    Sum,
)

from checkout import models
from checkout.conf import checkout_setting
from checkout.domain import (
    AddressId,
    AvailabilitySnapshot,
    CustomerId,
    DiscountCode,
    DiscountCodeId,
    Money,
    Order,
    OrderDetails,
    OrderDraft,
    OrderId,
    OrderLineItem,
    OrderStatus,
    OrderStatusId,
    OrderSummary,
    Percent,
    ProductId,
    Quantity,
    RemainingUses,
    ShippingAddress,
)
from checkout.domain.errors import (
    BasketChangedError,
    DiscountCodeConflictError,
    DiscountExhaustedError,
    ReferentialIntegrityError,
    StockConflictError,
    StoreError,
)
from checkout.domain.value_objects import UNLIMITED_USES
from checkout.stores.interfaces import CheckoutStore, DiscountStore, OrderStore

P = ParamSpec("P")
R = TypeVar("R")

_DISCOUNT_FIELDS = {"percent", "stackable", "active", "remaining_uses"}


def translate_errors(method: Callable[P, R]) -> Callable[P, R]:
    """Convert driver exceptions into domain errors."""

    @functools.wraps(method)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return method(*args, **kwargs)
        except IntegrityError as exc:
            raise ReferentialIntegrityError(str(exc)) from exc
        except DatabaseError as exc:
            raise StoreError(str(exc)) from exc

    return wrapper


def _to_discount_code(row: models.DiscountCode) -> DiscountCode:
    return DiscountCode(
        id=DiscountCodeId(row.pk),
        code=row.code,
        percent=Percent(Decimal(row.percent)),
        stackable=row.stackable,
        remaining_uses=RemainingUses(row.remaining_uses),
        active=row.active,
        created_on=row.created_on,
    )


def _to_status(row: models.OrderStatus) -> OrderStatus:
    return OrderStatus(id=OrderStatusId(row.pk), status=row.status)


def _to_address(row: models.ShippingAddress) -> ShippingAddress:
    return ShippingAddress(
        id=AddressId(row.pk),
        customer_id=CustomerId(row.customer_id),
        first_address_line=row.first_address_line,
        second_address_line=row.second_address_line,
        area_code=row.area_code,
        country_state=row.country_state,
        country_name=row.country_name,
    )


def _to_order(row: models.Order) -> Order:
    return Order(
        id=OrderId(row.pk),
        customer_id=CustomerId(row.customer_id),
        shipping_address_id=AddressId(row.shipping_address_id),
        price_paid=Money(row.price_paid),
        placed_on=row.placed_on,
        status=_to_status(row.status),
    )


class _DjangoStore:
    """Base for stores bound to one Django database alias."""

    def __init__(self, using: str = "default") -> None:
        self._using = using

    def close(self) -> None:
        """Release the connection held for this alias in the current thread."""
        connections[self._using].close()


class DjangoCheckoutStore(_DjangoStore, CheckoutStore):
    """Relational checkout store using Django ORM."""

    def __init__(self, using: str = "default", initial_status: str | None = None) -> None:
        super().__init__(using)
        self._initial_status = initial_status or checkout_setting("INITIAL_ORDER_STATUS")

    @translate_errors
    def get_basket_snapshot(self, customer_id: CustomerId) -> list[AvailabilitySnapshot]:
        rows = (
            models.BasketLine.objects.using(self._using)
            .filter(customer_id=customer_id.value)
            .annotate(
                price_per_item=F("product__price"),
                in_stock=ExpressionWrapper(
                    Q(quantity__lte=F("product__stock")) & Q(product__available=True),
                    output_field=BooleanField(),
                ),
            )
            .order_by("product_id")
            .values("product_id", "quantity", "price_per_item", "in_stock")
        )
        return [
            AvailabilitySnapshot(
                product_id=ProductId(row["product_id"]),
                quantity=Quantity(row["quantity"]),
                available=bool(row["in_stock"]),
                price_per_item=Money(Decimal(str(row["price_per_item"]))),
            )
            for row in rows
        ]

    @translate_errors
    def remove_basket_lines(
        self, customer_id: CustomerId, product_ids: list[ProductId]
    ) -> int:
        deleted, _ = (
            models.BasketLine.objects.using(self._using)
            .filter(
                customer_id=customer_id.value,
                product_id__in=[product_id.value for product_id in product_ids],
            )
            .delete()
        )
        return deleted

    @translate_errors
    def address_belongs_to_customer(
        self, customer_id: CustomerId, address_id: AddressId
    ) -> bool:
        return (
            models.ShippingAddress.objects.using(self._using)
            .filter(pk=address_id.value, customer_id=customer_id.value)
            .exists()
        )

    @translate_errors
    def commit_order(self, draft: OrderDraft) -> OrderId:
        with transaction.atomic(using=self._using):
            self._claim_basket_lines(draft)
            status, _ = models.OrderStatus.objects.using(self._using).get_or_create(
                status=self._initial_status
            )
            order = models.Order.objects.using(self._using).create(
                customer_id=draft.customer_id.value,
                shipping_address_id=draft.shipping_address_id.value,
                price_paid=draft.price_paid.rounded().amount,
                status=status,
            )
            for discount_code_id in draft.discount_code_ids:
                self._spend_discount_use(discount_code_id)
                models.OrderDiscountUsage.objects.using(self._using).create(
                    order=order, discount_code_id=discount_code_id.value
                )
            models.OrderLineItem.objects.using(self._using).bulk_create(
                [
                    models.OrderLineItem(
                        order=order,
                        product_id=line.product_id.value,
                        quantity=line.quantity.value,
                        item_price_at_purchase=line.price_per_item.amount,
                    )
                    for line in draft.lines
                ]
            )
            for line in draft.lines:
                self._decrement_stock(line.product_id, line.quantity)
            models.BasketLine.objects.using(self._using).filter(
                customer_id=draft.customer_id.value
            ).delete()
        return OrderId(order.pk)

    def _claim_basket_lines(self, draft: OrderDraft) -> None:
        """Delete exactly the priced basket lines, or fail if any of them changed.

        The delete takes the row locks first, so a concurrent commit for the
        same basket waits here and then finds nothing left to claim.
        """
        priced = Q()
        for line in draft.lines:
            priced |= Q(product_id=line.product_id.value, quantity=line.quantity.value)
        deleted, _ = (
            models.BasketLine.objects.using(self._using)
            .filter(priced, customer_id=draft.customer_id.value)
            .delete()
        )
        if deleted != len(draft.lines):
            raise BasketChangedError()

    def _spend_discount_use(self, discount_code_id: DiscountCodeId) -> None:
        codes = models.DiscountCode.objects.using(self._using).filter(
            pk=discount_code_id.value
        )
        if codes.filter(remaining_uses__gt=0).update(
            remaining_uses=F("remaining_uses") - 1
        ):
            return
        if codes.filter(remaining_uses=UNLIMITED_USES).exists():
            return
        if not codes.exists():
            raise ReferentialIntegrityError(f"discount code {discount_code_id.value}")
        raise DiscountExhaustedError(discount_code_id.value)

    def _decrement_stock(self, product_id: ProductId, quantity: Quantity) -> None:
        products = models.Product.objects.using(self._using).filter(pk=product_id.value)
        if products.filter(stock__gte=quantity.value).update(
            stock=F("stock") - quantity.value
        ):
            return
        if not products.exists():
            raise ReferentialIntegrityError(f"product {product_id.value}")
        raise StockConflictError(product_id.value)


class DjangoDiscountStore(_DjangoStore, DiscountStore):
    """Discount code store using Django ORM."""

    @translate_errors
    def get_discount_code(self, code: str) -> DiscountCode | None:
        row = models.DiscountCode.objects.using(self._using).filter(code=code).first()
        return _to_discount_code(row) if row is not None else None

    @translate_errors
    def list_discount_codes(self) -> list[DiscountCode]:
        rows = models.DiscountCode.objects.using(self._using).order_by("created_on", "pk")
        return [_to_discount_code(row) for row in rows]

    @translate_errors
    def create_discount_code(
        self,
        code: str,
        percent: Decimal,
        remaining_uses: int,
        active: bool,
        stackable: bool,
    ) -> DiscountCode:
        try:
            with transaction.atomic(using=self._using):
                row = models.DiscountCode.objects.using(self._using).create(
                    code=code,
                    percent=percent,
                    remaining_uses=remaining_uses,
                    active=active,
                    stackable=stackable,
                )
        except IntegrityError as exc:
            raise DiscountCodeConflictError(code) from exc
        return _to_discount_code(row)

    @translate_errors
    def update_discount_code(
        self, discount_code_id: DiscountCodeId, **changes: object
    ) -> DiscountCode | None:
        unknown = set(changes) - _DISCOUNT_FIELDS
        if unknown:
            raise ValueError(f"Cannot update discount code fields: {sorted(unknown)}")
        with transaction.atomic(using=self._using):
            row = (
                models.DiscountCode.objects.using(self._using)
                .select_for_update()
                .filter(pk=discount_code_id.value)
                .first()
            )
            if row is None:
                return None
            for name, value in changes.items():
                setattr(row, name, value)
            if changes:
                row.save(update_fields=list(changes))
        return _to_discount_code(row)


class DjangoOrderStore(_DjangoStore, OrderStore):
    """Order store using Django ORM."""

    @translate_errors
    def order_exists(self, order_id: OrderId) -> bool:
        return models.Order.objects.using(self._using).filter(pk=order_id.value).exists()

    @translate_errors
    def status_exists(self, status_id: OrderStatusId) -> bool:
        return (
            models.OrderStatus.objects.using(self._using)
            .filter(pk=status_id.value)
            .exists()
        )

    @translate_errors
    def set_order_status(self, order_id: OrderId, status_id: OrderStatusId) -> bool:
        with transaction.atomic(using=self._using):
            order = models.Order.objects.using(self._using).filter(pk=order_id.value).first()
            if order is None:
                return False
            order.status_id = status_id.value
            # save() rather than update() so post_save cache invalidation runs
            order.save(update_fields=["status"])
        return True

    @translate_errors
    def list_statuses(self) -> list[OrderStatus]:
        rows = models.OrderStatus.objects.using(self._using).order_by("pk")
        return [_to_status(row) for row in rows]

    @translate_errors
    def list_orders_for_customer(self, customer_id: CustomerId) -> list[OrderSummary]:
        rows = (
            models.Order.objects.using(self._using)
            .filter(customer_id=customer_id.value)
            .select_related("status")
            .annotate(
                product_count=Count("line_items"),
                total=Sum(
                    F("line_items__item_price_at_purchase") * F("line_items__quantity"),
                    output_field=DecimalField(max_digits=12, decimal_places=2),
                ),
            )
            .order_by("-placed_on", "-pk")
        )
        return [
            OrderSummary(
                id=OrderId(row.pk),
                status=row.status.status,
                product_count=row.product_count,
                total=Money(Decimal(row.total or 0)),
                price_paid=Money(row.price_paid),
                placed_on=row.placed_on,
            )
            for row in rows
        ]

    @translate_errors
    def get_order_details(
        self, order_id: OrderId, customer_id: CustomerId | None = None
    ) -> OrderDetails | None:
        orders = models.Order.objects.using(self._using).select_related(
            "status", "shipping_address", "customer__user"
        )
        if customer_id is not None:
            orders = orders.filter(customer_id=customer_id.value)
        row = orders.filter(pk=order_id.value).first()
        if row is None:
            return None

        line_items = tuple(
            OrderLineItem(
                order_id=OrderId(row.pk),
                product_id=ProductId(item.product_id),
                product_name=item.product.name,
                quantity=Quantity(item.quantity),
                item_price_at_purchase=Money(item.item_price_at_purchase),
            )
            for item in row.line_items.select_related("product").order_by("pk")
        )
        discount_codes = tuple(
            usage.discount_code.code
            for usage in row.discount_usages.select_related("discount_code").order_by("pk")
        )
        return OrderDetails(
            order=_to_order(row),
            line_items=line_items,
            discount_codes=discount_codes,
            shipping_address=_to_address(row.shipping_address),
            customer_email=row.customer.user.email or "",
        )

    @translate_errors
    def get_last_purchase_date(
        self, customer_id: CustomerId, product_id: ProductId
    ) -> datetime | None:
        return (
            models.OrderLineItem.objects.using(self._using)
            .filter(order__customer_id=customer_id.value, product_id=product_id.value)
            .aggregate(last=Max("order__placed_on"))["last"]
        )
