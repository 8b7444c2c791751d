"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Self

CENT = Decimal("0.01")
UNLIMITED_USES = -1


def _parse_id(value: str) -> int:
    parsed = int(value)
    if parsed < 1:
        raise ValueError("Identifiers are positive integers")
    return parsed


@dataclass(frozen=True)
class CustomerId:
    """Unique identifier for a Customer."""

    value: int

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=_parse_id(value))


@dataclass(frozen=True)
class ProductId:
    """Unique identifier for a Product."""

    value: int

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=_parse_id(value))


@dataclass(frozen=True)
class AddressId:
    """Unique identifier for a ShippingAddress."""

    value: int

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=_parse_id(value))


@dataclass(frozen=True)
class DiscountCodeId:
    """Unique identifier for a DiscountCode."""

    value: int

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=_parse_id(value))


@dataclass(frozen=True)
class OrderId:
    """Unique identifier for an Order."""

    value: int

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=_parse_id(value))


@dataclass(frozen=True)
class OrderStatusId:
    """Unique identifier for an OrderStatus."""

    value: int

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=_parse_id(value))


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    def __str__(self) -> str:
        return f"{self.amount:.2f}"

    def rounded(self) -> "Money":
        """Return the amount at currency precision (half-up)."""
        return Money(self.amount.quantize(CENT, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Quantity:
    """Strictly positive number of items."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 1:
            raise ValueError("Quantity must be at least 1")


@dataclass(frozen=True)
class Percent:
    """Discount percentage between 0 and 100 inclusive."""

    value: Decimal

    def __post_init__(self) -> None:
        if not Decimal(0) <= self.value <= Decimal(100):
            raise ValueError("Percent must be between 0 and 100")


@dataclass(frozen=True)
class RemainingUses:
    """Uses left on a discount code; -1 means unlimited."""

    value: int

    def __post_init__(self) -> None:
        if self.value < UNLIMITED_USES:
            raise ValueError("Remaining uses cannot be below -1")

    @property
    def unlimited(self) -> bool:
        return self.value == UNLIMITED_USES

    @property
    def exhausted(self) -> bool:
        return self.value == 0
