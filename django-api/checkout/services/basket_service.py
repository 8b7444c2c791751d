"""Basket snapshot reader."""

from checkout.domain import AvailabilitySnapshot, CustomerId, ProductId
from checkout.stores.interfaces import BasketStore


class BasketSnapshotReader:
    """Reads a customer's basket joined with live price and availability.

    Has no side effects. Storage failures propagate as StoreError without
    interpretation.
    """

    def __init__(self, store: BasketStore) -> None:
        self._store = store

    def read(self, customer_id: CustomerId) -> list[AvailabilitySnapshot]:
        return self._store.get_basket_snapshot(customer_id)


def unavailable_products(snapshot: list[AvailabilitySnapshot]) -> list[ProductId]:
    return [line.product_id for line in snapshot if not line.available]
