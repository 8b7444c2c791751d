"""Checkout service - turns a customer's basket into a placed order.

A checkout attempt moves through a fixed sequence of states:

    STARTED -> ADDRESS_CHECKED -> BASKET_VALIDATED -> PRICED -> COMMITTED

and leaves early with a result when a gate fails. Rejecting a basket removes
its unavailable lines even though no order is placed; that cleanup is the only
write that can happen on a failed attempt. Everything else is written by a
single commit transaction in the store, which rolls back completely on error.

Calling place_order twice for the same basket yields one order: the first
commit claims the basket lines, so the second attempt fails the basket gate,
or fails its own commit if it read the basket before the first one finished.
"""

import dataclasses
from collections.abc import Sequence

import structlog

from checkout.domain import (
    AddressId,
    CheckoutState,
    CustomerId,
    DiscountCode,
    OrderDraft,
    OrderId,
    OrderPlaceResult,
    OrderPlaceStatus,
    ProductId,
)
from checkout.domain.errors import (
    BasketChangedError,
    DiscountExhaustedError,
    ReferentialIntegrityError,
    StockConflictError,
    StoreError,
)
from checkout.notifications.interfaces import OrderNotifier
from checkout.services import pricing
from checkout.services.basket_service import BasketSnapshotReader, unavailable_products
from checkout.services.discount_service import DiscountResolver
from checkout.stores.interfaces import CheckoutStore, DiscountStore

logger = structlog.get_logger(__name__)


class CheckoutCoordinator:
    """Runs one checkout attempt against already-resolved discount codes."""

    def __init__(self, store: CheckoutStore, notifier: OrderNotifier) -> None:
        self._store = store
        self._reader = BasketSnapshotReader(store)
        self._notifier = notifier

    def place_order(
        self,
        customer_id: CustomerId,
        shipping_address_id: AddressId,
        discounts: Sequence[DiscountCode] = (),
    ) -> OrderPlaceResult:
        with structlog.contextvars.bound_contextvars(customer_id=customer_id.value):
            return self._run(customer_id, shipping_address_id, tuple(discounts))

    def _run(
        self,
        customer_id: CustomerId,
        shipping_address_id: AddressId,
        discounts: tuple[DiscountCode, ...],
    ) -> OrderPlaceResult:
        state = CheckoutState.STARTED
        try:
            if not self._store.address_belongs_to_customer(customer_id, shipping_address_id):
                return _reject(
                    OrderPlaceStatus.SHIPPING_ADDRESS_INVALID,
                    CheckoutState.ADDRESS_INVALID,
                    reason="shipping address not owned by customer",
                )
            state = _advance(CheckoutState.ADDRESS_CHECKED)

            snapshot = self._reader.read(customer_id)
            if not snapshot:
                return _reject(
                    OrderPlaceStatus.BASKET_INVALID,
                    CheckoutState.BASKET_INVALID,
                    reason="basket empty",
                )
            unavailable = unavailable_products(snapshot)
            if unavailable:
                self._prune(customer_id, unavailable)
                return _reject(
                    OrderPlaceStatus.BASKET_INVALID,
                    CheckoutState.BASKET_INVALID,
                    reason="basket has unavailable products",
                    pruned_product_ids=tuple(unavailable),
                )
            state = _advance(CheckoutState.BASKET_VALIDATED)

            draft = OrderDraft(
                customer_id=customer_id,
                shipping_address_id=shipping_address_id,
                price_paid=pricing.price_to_pay(
                    snapshot, [discount.percent for discount in discounts]
                ),
                lines=tuple(snapshot),
                discount_code_ids=tuple(discount.id for discount in discounts),
            )
            state = _advance(CheckoutState.PRICED)

            order_id = self._store.commit_order(draft)
        except BasketChangedError:
            return _reject(
                OrderPlaceStatus.BASKET_INVALID,
                CheckoutState.BASKET_INVALID,
                reason="basket changed during commit",
            )
        except StockConflictError as exc:
            return _reject(
                OrderPlaceStatus.BASKET_INVALID,
                CheckoutState.BASKET_INVALID,
                reason="stock changed during commit",
                product_id=exc.product_id,
            )
        except DiscountExhaustedError as exc:
            return _reject(
                OrderPlaceStatus.DISCOUNT_INVALID,
                CheckoutState.DISCOUNT_INVALID,
                reason="discount code ran out of uses during commit",
                discount_code_id=exc.discount_code_id,
            )
        except ReferentialIntegrityError as exc:
            logger.warning(
                "Checkout hit a vanished reference", state=state.value, detail=exc.detail
            )
            return OrderPlaceResult(
                status=OrderPlaceStatus.REFERENCE_INVALID,
                state=CheckoutState.REFERENCE_INVALID,
            )
        except StoreError:
            logger.exception("Checkout failed on storage error", state=state.value)
            return OrderPlaceResult(
                status=OrderPlaceStatus.UNKNOWN_ERROR,
                state=CheckoutState.UNKNOWN_ERROR,
            )

        _advance(CheckoutState.COMMITTED)
        logger.info(
            "Order placed",
            order_id=order_id.value,
            price_paid=str(draft.price_paid.rounded()),
        )
        self._notify(order_id)
        return OrderPlaceResult(
            status=OrderPlaceStatus.OK,
            state=CheckoutState.COMMITTED,
            order_id=order_id,
        )

    def _prune(self, customer_id: CustomerId, product_ids: list[ProductId]) -> None:
        try:
            removed = self._store.remove_basket_lines(customer_id, product_ids)
        except StoreError:
            logger.warning(
                "Failed to remove unavailable basket lines",
                product_ids=[product_id.value for product_id in product_ids],
                exc_info=True,
            )
            return
        logger.info(
            "Removed unavailable basket lines",
            product_ids=[product_id.value for product_id in product_ids],
            removed=removed,
        )

    def _notify(self, order_id: OrderId) -> None:
        try:
            self._notifier.notify_order_placed(order_id)
        except Exception:
            logger.exception("Order placed notification failed", order_id=order_id.value)


class CheckoutService:
    """Entry point the request layer calls to place an order."""

    def __init__(
        self,
        store: CheckoutStore,
        discount_store: DiscountStore,
        notifier: OrderNotifier,
    ) -> None:
        self._resolver = DiscountResolver(discount_store)
        self._coordinator = CheckoutCoordinator(store, notifier)

    def place_order(
        self,
        customer_id: CustomerId,
        shipping_address_id: AddressId,
        discount_codes: Sequence[str] = (),
    ) -> OrderPlaceResult:
        """Place an order from the customer's basket.

        Discount codes are resolved first; an unknown, invalid or
        non-stackable set rejects the checkout before anything is written.
        """
        resolution = self._resolver.resolve(discount_codes)
        if not resolution.accepted:
            logger.info(
                "Checkout rejected",
                customer_id=customer_id.value,
                reason="discount codes not accepted",
                invalid=list(resolution.invalid),
                unresolved=list(resolution.unresolved),
                stacking_permitted=resolution.stacking_permitted,
            )
            return OrderPlaceResult(
                status=OrderPlaceStatus.DISCOUNT_INVALID,
                state=CheckoutState.DISCOUNT_INVALID,
                discounts=resolution,
            )
        result = self._coordinator.place_order(
            customer_id, shipping_address_id, resolution.applied
        )
        return dataclasses.replace(result, discounts=resolution)


def _advance(state: CheckoutState) -> CheckoutState:
    logger.debug("Checkout state changed", state=state.value)
    return state


def _reject(
    status: OrderPlaceStatus,
    state: CheckoutState,
    reason: str,
    pruned_product_ids: tuple[ProductId, ...] = (),
    **context: object,
) -> OrderPlaceResult:
    logger.info("Checkout rejected", status=status.value, reason=reason, **context)
    return OrderPlaceResult(status=status, state=state, pruned_product_ids=pruned_product_ids)
