"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from checkout.domain import (
    AddressId,
    CustomerId,
    DiscountCode,
    DiscountCodeId,
    DiscountResolution,
    Money,
    Order,
    OrderDetails,
    OrderId,
    OrderLineItem,
    OrderPlaceStatus,
    OrderStatus,
    OrderStatusId,
    Percent,
    ProductId,
    Quantity,
    RemainingUses,
    ShippingAddress,
)
from checkout.domain.errors import (
    BasketChangedError,
    DomainError,
    ErrorCode,
    ErrorKind,
    InvalidIdError,
    StockConflictError,
    StoreError,
)


def _discount(code="SAVE10", stackable=False, remaining_uses=-1, active=True):
    return DiscountCode(
        id=DiscountCodeId(1),
        code=code,
        percent=Percent(Decimal("10")),
        stackable=stackable,
        remaining_uses=RemainingUses(remaining_uses),
        active=active,
    )


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_positive_amount(self):
        assert Money(Decimal("12.50")).amount == Decimal("12.50")

    def test_money_accepts_zero(self):
        assert Money(Decimal("0")).amount == Decimal("0")

    def test_money_rejects_negative_amount(self):
        with pytest.raises(ValueError):
            Money(Decimal("-0.01"))

    def test_money_str_format(self):
        assert str(Money(Decimal("18"))) == "18.00"

    def test_rounded_uses_half_up(self):
        assert Money(Decimal("0.225")).rounded() == Money(Decimal("0.23"))
        assert Money(Decimal("0.224")).rounded() == Money(Decimal("0.22"))


class TestQuantityAndPercent:
    def test_quantity_rejects_zero(self):
        with pytest.raises(ValueError):
            Quantity(0)

    @pytest.mark.parametrize("value", ["0", "100", "12.5"])
    def test_percent_accepts_range(self, value):
        assert Percent(Decimal(value)).value == Decimal(value)

    @pytest.mark.parametrize("value", ["-1", "100.01"])
    def test_percent_rejects_out_of_range(self, value):
        with pytest.raises(ValueError):
            Percent(Decimal(value))


class TestRemainingUses:
    def test_minus_one_is_unlimited(self):
        uses = RemainingUses(-1)
        assert uses.unlimited
        assert not uses.exhausted

    def test_zero_is_exhausted(self):
        assert RemainingUses(0).exhausted

    def test_rejects_below_minus_one(self):
        with pytest.raises(ValueError):
            RemainingUses(-2)


class TestIdentifiers:
    @pytest.mark.parametrize("id_type", [CustomerId, ProductId, AddressId, OrderId, OrderStatusId])
    def test_from_string_parses_positive_integer(self, id_type):
        assert id_type.from_string("42").value == 42

    @pytest.mark.parametrize("value", ["abc", "0", "-3", "1.5", ""])
    def test_from_string_rejects_invalid(self, value):
        with pytest.raises(ValueError):
            OrderId.from_string(value)


class TestDiscountCode:
    def test_active_code_with_uses_is_valid(self):
        assert _discount(remaining_uses=3).valid

    def test_exhausted_code_is_invalid(self):
        assert not _discount(remaining_uses=0).valid

    def test_inactive_code_is_invalid(self):
        assert not _discount(active=False).valid


class TestDiscountResolution:
    def test_no_codes_is_accepted(self):
        assert DiscountResolution().accepted

    def test_single_non_stackable_code_is_accepted(self):
        resolution = DiscountResolution(requested=("SAVE10",), found=(_discount(),))
        assert resolution.accepted
        assert resolution.applied == (_discount(),)

    def test_multiple_codes_require_every_code_stackable(self):
        resolution = DiscountResolution(
            requested=("A", "B"),
            found=(_discount("A", stackable=True), _discount("B", stackable=False)),
        )
        assert not resolution.stacking_permitted
        assert not resolution.accepted

    def test_unresolved_code_rejects_set(self):
        resolution = DiscountResolution(
            requested=("A", "NOPE"),
            found=(_discount("A", stackable=True),),
            unresolved=("NOPE",),
        )
        assert not resolution.resolved_cleanly
        assert not resolution.accepted

    def test_invalid_code_is_not_applied(self):
        exhausted = _discount("A", remaining_uses=0)
        resolution = DiscountResolution(requested=("A",), found=(exhausted,), invalid=("A",))
        assert resolution.applied == ()
        assert not resolution.accepted


class TestOrderDetails:
    def test_total_sums_line_items_before_discounts(self):
        status = OrderStatus(id=OrderStatusId(1), status="Processing")
        order = Order(
            id=OrderId(1),
            customer_id=CustomerId(1),
            shipping_address_id=AddressId(1),
            price_paid=Money(Decimal("18.00")),
            placed_on=datetime(2026, 1, 1, tzinfo=timezone.utc),
            status=status,
        )
        items = (
            OrderLineItem(OrderId(1), ProductId(1), "Tea", Quantity(2), Money(Decimal("7.50"))),
            OrderLineItem(OrderId(1), ProductId(2), "Mug", Quantity(1), Money(Decimal("5.00"))),
        )
        address = ShippingAddress(AddressId(1), CustomerId(1), "1 High St", "", "AB1", "Kent", "UK")
        details = OrderDetails(order, items, (), address)

        assert details.total == Money(Decimal("20.00"))


class TestErrors:
    def test_domain_error_str_includes_code(self):
        assert str(InvalidIdError("order id")) == "INVALID_ID: Invalid order id format"

    def test_error_kinds(self):
        assert InvalidIdError().kind is ErrorKind.VALIDATION
        assert StockConflictError(1).kind is ErrorKind.STATE_CONFLICT
        assert BasketChangedError().kind is ErrorKind.STATE_CONFLICT
        assert StoreError("boom").kind is ErrorKind.STORAGE

    def test_store_error_is_domain_error(self):
        error = StoreError("connection reset")
        assert isinstance(error, DomainError)
        assert error.code is ErrorCode.STORAGE_FAILURE
        assert error.detail == "connection reset"

    def test_place_status_kinds(self):
        assert OrderPlaceStatus.OK.kind is None
        assert OrderPlaceStatus.BASKET_INVALID.kind is ErrorKind.STATE_CONFLICT
        assert OrderPlaceStatus.REFERENCE_INVALID.kind is ErrorKind.REFERENTIAL
