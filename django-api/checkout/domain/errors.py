"""Domain error codes for the checkout module."""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """How a failure should be treated by the caller."""

    VALIDATION = "VALIDATION"
    STATE_CONFLICT = "STATE_CONFLICT"
    REFERENTIAL = "REFERENTIAL"
    STORAGE = "STORAGE"


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_ID = "INVALID_ID"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    DISCOUNT_CODE_NOT_FOUND = "DISCOUNT_CODE_NOT_FOUND"
    DISCOUNT_CODE_CONFLICT = "DISCOUNT_CODE_CONFLICT"
    DISCOUNT_CODE_INVALID = "DISCOUNT_CODE_INVALID"
    BASKET_CHANGED = "BASKET_CHANGED"
    STOCK_CONFLICT = "STOCK_CONFLICT"
    DISCOUNT_EXHAUSTED = "DISCOUNT_EXHAUSTED"
    REFERENCE_VIOLATION = "REFERENCE_VIOLATION"
    STORAGE_FAILURE = "STORAGE_FAILURE"

    @property
    def kind(self) -> ErrorKind:
        return _KINDS[self]


_KINDS = {
    ErrorCode.INVALID_ID: ErrorKind.VALIDATION,
    ErrorCode.ORDER_NOT_FOUND: ErrorKind.VALIDATION,
    ErrorCode.DISCOUNT_CODE_NOT_FOUND: ErrorKind.VALIDATION,
    ErrorCode.DISCOUNT_CODE_CONFLICT: ErrorKind.VALIDATION,
    ErrorCode.DISCOUNT_CODE_INVALID: ErrorKind.VALIDATION,
    ErrorCode.BASKET_CHANGED: ErrorKind.STATE_CONFLICT,
    ErrorCode.STOCK_CONFLICT: ErrorKind.STATE_CONFLICT,
    ErrorCode.DISCOUNT_EXHAUSTED: ErrorKind.STATE_CONFLICT,
    ErrorCode.REFERENCE_VIOLATION: ErrorKind.REFERENTIAL,
    ErrorCode.STORAGE_FAILURE: ErrorKind.STORAGE,
}


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    @property
    def kind(self) -> ErrorKind:
        return self.code.kind


class InvalidIdError(DomainError):
    """Raised when an identifier is not a positive integer."""

    def __init__(self, field: str = "id") -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {field} format",
        )
        self.field = field


class OrderNotFoundError(DomainError):
    """Raised when an order is not found (or belongs to someone else)."""

    def __init__(self, order_id: int) -> None:
        super().__init__(
            code=ErrorCode.ORDER_NOT_FOUND,
            message="Order not found",
        )
        self.order_id = order_id


class DiscountCodeNotFoundError(DomainError):
    """Raised when a discount code does not exist."""

    def __init__(self, reference: str) -> None:
        super().__init__(
            code=ErrorCode.DISCOUNT_CODE_NOT_FOUND,
            message="Discount code does not exist",
        )
        self.reference = reference


class DiscountCodeConflictError(DomainError):
    """Raised when creating a discount code that already exists."""

    def __init__(self, code: str) -> None:
        super().__init__(
            code=ErrorCode.DISCOUNT_CODE_CONFLICT,
            message="Discount code already exists",
        )
        self.discount_code = code


class InvalidDiscountCodeError(DomainError):
    """Raised when discount code attributes are out of range."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.DISCOUNT_CODE_INVALID, message=message)


class BasketChangedError(DomainError):
    """Raised inside the commit when the basket no longer matches what was priced."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.BASKET_CHANGED,
            message="Basket changed during checkout",
        )


class StockConflictError(DomainError):
    """Raised inside the commit when a product no longer has enough stock."""

    def __init__(self, product_id: int) -> None:
        super().__init__(
            code=ErrorCode.STOCK_CONFLICT,
            message="Product stock changed during checkout",
        )
        self.product_id = product_id


class DiscountExhaustedError(DomainError):
    """Raised inside the commit when a limited discount code ran out of uses."""

    def __init__(self, discount_code_id: int) -> None:
        super().__init__(
            code=ErrorCode.DISCOUNT_EXHAUSTED,
            message="Discount code has no uses left",
        )
        self.discount_code_id = discount_code_id


class ReferentialIntegrityError(DomainError):
    """Raised when a referenced row vanished mid-transaction."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(
            code=ErrorCode.REFERENCE_VIOLATION,
            message="A referenced record no longer exists",
        )
        self.detail = detail


class StoreError(DomainError):
    """Raised for unexpected storage failures; safe to retry with backoff."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(
            code=ErrorCode.STORAGE_FAILURE,
            message="Storage failure",
        )
        self.detail = detail
