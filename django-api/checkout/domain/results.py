"""Result types returned across the service boundary.

Checkout and status updates report expected outcomes as values; exceptions are
reserved for programming errors and are translated before reaching callers.
"""

from dataclasses import dataclass, field
from enum import Enum

from checkout.domain.errors import ErrorKind
from checkout.domain.models import DiscountCode
from checkout.domain.value_objects import OrderId, ProductId


class CheckoutState(Enum):
    """States of one checkout attempt, in the order they are reached."""

    STARTED = "STARTED"
    ADDRESS_CHECKED = "ADDRESS_CHECKED"
    BASKET_VALIDATED = "BASKET_VALIDATED"
    PRICED = "PRICED"
    COMMITTED = "COMMITTED"
    ADDRESS_INVALID = "ADDRESS_INVALID"
    BASKET_INVALID = "BASKET_INVALID"
    DISCOUNT_INVALID = "DISCOUNT_INVALID"
    REFERENCE_INVALID = "REFERENCE_INVALID"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class OrderPlaceStatus(Enum):
    OK = "OK"
    BASKET_INVALID = "BASKET_INVALID"
    SHIPPING_ADDRESS_INVALID = "SHIPPING_ADDRESS_INVALID"
    DISCOUNT_INVALID = "DISCOUNT_INVALID"
    REFERENCE_INVALID = "REFERENCE_INVALID"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"

    @property
    def kind(self) -> ErrorKind | None:
        return _PLACE_KINDS.get(self)


_PLACE_KINDS = {
    OrderPlaceStatus.BASKET_INVALID: ErrorKind.STATE_CONFLICT,
    OrderPlaceStatus.SHIPPING_ADDRESS_INVALID: ErrorKind.VALIDATION,
    OrderPlaceStatus.DISCOUNT_INVALID: ErrorKind.VALIDATION,
    OrderPlaceStatus.REFERENCE_INVALID: ErrorKind.REFERENTIAL,
    OrderPlaceStatus.UNKNOWN_ERROR: ErrorKind.STORAGE,
}


@dataclass(frozen=True)
class DiscountResolution:
    """Outcome of looking up every code a customer submitted.

    ``unresolved`` holds codes that were not found or whose lookup failed;
    ``invalid`` holds codes that were found but are inactive or used up.
    """

    requested: tuple[str, ...] = ()
    found: tuple[DiscountCode, ...] = ()
    invalid: tuple[str, ...] = ()
    unresolved: tuple[str, ...] = ()

    @property
    def applied(self) -> tuple[DiscountCode, ...]:
        return tuple(discount for discount in self.found if discount.valid)

    @property
    def resolved_cleanly(self) -> bool:
        return not self.unresolved

    @property
    def all_valid(self) -> bool:
        return self.resolved_cleanly and not self.invalid

    @property
    def stacking_permitted(self) -> bool:
        if len(self.requested) <= 1:
            return True
        return all(discount.stackable for discount in self.found)

    @property
    def accepted(self) -> bool:
        return self.all_valid and self.stacking_permitted


@dataclass(frozen=True)
class OrderPlaceResult:
    status: OrderPlaceStatus
    state: CheckoutState
    order_id: OrderId | None = None
    pruned_product_ids: tuple[ProductId, ...] = ()
    discounts: DiscountResolution = field(default_factory=DiscountResolution)

    @property
    def ok(self) -> bool:
        return self.status is OrderPlaceStatus.OK


class StatusUpdateResult(Enum):
    OK = "OK"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    STATUS_NOT_FOUND = "STATUS_NOT_FOUND"
