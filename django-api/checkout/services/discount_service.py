"""Discount code resolution and administration.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Return domain models or domain errors

Resolution never spends a use; uses are decremented only when an order commits.
"""

from collections.abc import Iterable
from decimal import Decimal

import structlog

from checkout.domain import DiscountCode, DiscountCodeId, DiscountResolution, Percent, RemainingUses
from checkout.domain.errors import (
    DiscountCodeNotFoundError,
    InvalidDiscountCodeError,
    InvalidIdError,
    StoreError,
)
from checkout.stores.interfaces import DiscountStore

logger = structlog.get_logger(__name__)


class DiscountResolver:
    """Looks up submitted discount codes and applies the stacking rule."""

    def __init__(self, store: DiscountStore) -> None:
        self._store = store

    def resolve(self, codes: Iterable[str]) -> DiscountResolution:
        """Resolve each code independently.

        Codes are matched exactly and case-sensitively. A code that is not
        found, or whose lookup fails, is reported as unresolved rather than
        dropped.
        """
        requested = tuple(dict.fromkeys(codes))
        found: list[DiscountCode] = []
        invalid: list[str] = []
        unresolved: list[str] = []

        for code in requested:
            try:
                discount = self._store.get_discount_code(code)
            except StoreError as exc:
                logger.warning("Discount code lookup failed", code=code, error=exc.detail)
                unresolved.append(code)
                continue
            if discount is None:
                unresolved.append(code)
                continue
            found.append(discount)
            if not discount.valid:
                invalid.append(code)

        return DiscountResolution(
            requested=requested,
            found=tuple(found),
            invalid=tuple(invalid),
            unresolved=tuple(unresolved),
        )

    def validate(self, code: str) -> DiscountCode:
        """Return a single code for the customer-facing validity check.

        Raises:
            DiscountCodeNotFoundError: If the code does not exist.
        """
        discount = self._store.get_discount_code(code)
        if discount is None:
            raise DiscountCodeNotFoundError(code)
        return discount


class DiscountService:
    """Staff-facing discount code administration."""

    def __init__(self, store: DiscountStore) -> None:
        self._store = store

    def list_discount_codes(self) -> list[DiscountCode]:
        return self._store.list_discount_codes()

    def create_discount_code(
        self,
        code: str,
        percent: Decimal,
        uses: int,
        active: bool,
        stackable: bool,
    ) -> DiscountCode:
        """Create a discount code.

        Raises:
            InvalidDiscountCodeError: If the code is blank or a value is out of range.
            DiscountCodeConflictError: If the code already exists.
        """
        if not code:
            raise InvalidDiscountCodeError("Discount code cannot be blank")
        _check_percent(percent)
        _check_uses(uses)
        discount = self._store.create_discount_code(
            code=code,
            percent=percent,
            remaining_uses=uses,
            active=active,
            stackable=stackable,
        )
        logger.info("Discount code created", discount_code_id=discount.id.value)
        return discount

    def update_discount_code(
        self,
        discount_code_id: str,
        *,
        percent: Decimal | None = None,
        stackable: bool | None = None,
        active: bool | None = None,
        remaining_uses: int | None = None,
    ) -> DiscountCode:
        """Apply a partial update to a discount code.

        Raises:
            InvalidIdError: If discount_code_id is not a positive integer.
            InvalidDiscountCodeError: If a value is out of range.
            DiscountCodeNotFoundError: If the code does not exist.
        """
        try:
            parsed_id = DiscountCodeId.from_string(discount_code_id)
        except ValueError:
            raise InvalidIdError("discount code id") from None

        changes: dict[str, object] = {}
        if percent is not None:
            _check_percent(percent)
            changes["percent"] = percent
        if stackable is not None:
            changes["stackable"] = stackable
        if active is not None:
            changes["active"] = active
        if remaining_uses is not None:
            _check_uses(remaining_uses)
            changes["remaining_uses"] = remaining_uses

        discount = self._store.update_discount_code(parsed_id, **changes)
        if discount is None:
            raise DiscountCodeNotFoundError(discount_code_id)
        return discount


def _check_percent(percent: Decimal) -> None:
    try:
        Percent(percent)
    except ValueError as exc:
        raise InvalidDiscountCodeError(str(exc)) from None


def _check_uses(uses: int) -> None:
    try:
        RemainingUses(uses)
    except ValueError as exc:
        raise InvalidDiscountCodeError(str(exc)) from None
