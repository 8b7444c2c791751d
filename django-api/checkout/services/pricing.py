"""Pricing calculator for basket snapshots.

Each discount is taken from the original subtotal, not from the result of the
previous discount: 10% + 20% on 100.00 is 70.00, not 72.00. Nothing is rounded
here; rounding to currency precision happens when the order is persisted.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal
from functools import reduce

from checkout.domain import AvailabilitySnapshot, Money, Percent

HUNDRED = Decimal(100)


def line_total(line: AvailabilitySnapshot) -> Decimal:
    return line.price_per_item.amount * line.quantity.value


def subtotal(lines: Iterable[AvailabilitySnapshot]) -> Decimal:
    """Sum of price per item times quantity across all lines."""
    return sum((line_total(line) for line in lines), Decimal(0))


def discounted_total(
    lines: Sequence[AvailabilitySnapshot], percents: Sequence[Percent]
) -> Decimal:
    """Subtotal minus every discount computed against the original subtotal.

    Clamped at zero when stacked percentages exceed 100.
    """
    base = subtotal(lines)
    total = reduce(
        lambda remaining, percent: remaining - base * percent.value / HUNDRED,
        percents,
        base,
    )
    return max(total, Decimal(0))


def price_to_pay(
    lines: Sequence[AvailabilitySnapshot], percents: Sequence[Percent]
) -> Money:
    """Unrounded amount the order will record as price paid."""
    return Money(discounted_total(lines, percents))
