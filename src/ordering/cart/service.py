"""Cart use cases: the command layer over a user's DRAFT order.

A cart is simply the user's one DRAFT order. Every mutating call re-reads the
draft under the user's lock and re-checks that it exists, belongs to the
caller and is still a DRAFT, so a cart confirmed or abandoned by a racing
request fails with ``NoDraftOrder`` instead of being edited behind the
caller's back.
"""

import structlog
from protean.utils.globals import current_domain

from ordering.catalogue import get_catalogue
from ordering.catalogue.port import CatalogueLookup
from ordering.exceptions import (
    EmptyCart,
    InvalidQuantity,
    NoDraftOrder,
    OrderItemNotFound,
    OrderNotDraft,
    ProductNotFound,
    UnauthorizedOrderAccess,
)
from ordering.order.events import DomainEventCollector
from ordering.order.item import create_order_item
from ordering.order.locking import UserLocks, user_locks
from ordering.order.order import Order
from ordering.order.repository import OrderStore
from ordering.order.results import CheckoutResult, OrderTransitionResult
from ordering.order.state_machine import can_modify_items
from ordering.order.status import OrderStatus
from ordering.shared.money import Money

logger = structlog.get_logger(__name__)


def validate_quantity(quantity) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantity(quantity)


class CartService:
    def __init__(self, repository: OrderStore, catalogue: CatalogueLookup, locks: UserLocks = user_locks):
        self.repository = repository
        self.catalogue = catalogue
        self.locks = locks

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get_cart(self, user_id, correlation_id: str | None = None) -> Order | None:
        return self.repository.find_draft_by_user_id(user_id)

    def get_cart_or_fail(self, user_id, correlation_id: str | None = None) -> Order:
        draft = self.get_cart(user_id, correlation_id)
        if draft is None:
            raise NoDraftOrder()
        return draft

    # -------------------------------------------------------------------
    # Draft lifecycle
    # -------------------------------------------------------------------
    def create_draft_order(self, user_id, correlation_id: str | None = None) -> Order:
        """Return the user's DRAFT, creating it first if there is none."""
        log = logger.bind(user_id=str(user_id), correlation_id=correlation_id)

        with self.locks.hold(user_id):
            existing = self.repository.find_draft_by_user_id(user_id)
            if existing is not None:
                return existing

            order = self.repository.create_order(user_id, OrderStatus.DRAFT)

        log.info("Draft order created", order_id=str(order.id))
        return order

    def abandon_cart(self, user_id, correlation_id: str | None = None) -> OrderTransitionResult:
        log = logger.bind(user_id=str(user_id), correlation_id=correlation_id)
        collector = DomainEventCollector()

        with self.locks.hold(user_id):
            order = self._draft_with_ownership_check(user_id, log)
            order.cancel(correlation_id)
            collector.collect(order)
            self.repository.add(order)

        log.info("Cart abandoned", order_id=str(order.id), item_count=order.item_count)
        return OrderTransitionResult(order=order, events=collector.events)

    # -------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------
    def add_item_to_cart(self, user_id, product_id, quantity, correlation_id: str | None = None) -> Order:
        """Snapshot the product's current name and price onto the cart, merging repeat adds."""
        log = logger.bind(user_id=str(user_id), correlation_id=correlation_id)
        validate_quantity(quantity)

        product = self.catalogue.get_product_by_id(product_id)
        if not product.is_active:
            raise ProductNotFound(product_id)

        item = create_order_item(
            product_id=product.id,
            product_name=product.name,
            unit_price=Money.from_major_units(product.price, product.currency),
            quantity=quantity,
        )

        with self.locks.hold(user_id):
            draft = self.create_draft_order(user_id, correlation_id)
            self._assert_owned_draft(draft, user_id, log)
            order = self.repository.add_item(draft.id, item)

        log.info(
            "Item added to cart",
            order_id=str(order.id),
            product_id=str(product_id),
            quantity=quantity,
            item_count=order.item_count,
        )
        return order

    def update_item_quantity(self, user_id, product_id, quantity, correlation_id: str | None = None) -> Order:
        log = logger.bind(user_id=str(user_id), correlation_id=correlation_id)
        validate_quantity(quantity)

        with self.locks.hold(user_id):
            draft = self._draft_with_ownership_check(user_id, log)
            if draft.find_item(product_id) is None:
                raise OrderItemNotFound(str(product_id))
            order = self.repository.update_item_quantity(draft.id, product_id, quantity)

        log.info("Cart item quantity updated", order_id=str(order.id), product_id=str(product_id), quantity=quantity)
        return order

    def remove_item_from_cart(self, user_id, product_id, correlation_id: str | None = None) -> Order:
        log = logger.bind(user_id=str(user_id), correlation_id=correlation_id)

        with self.locks.hold(user_id):
            draft = self._draft_with_ownership_check(user_id, log)
            if draft.find_item(product_id) is None:
                raise OrderItemNotFound(str(product_id))
            order = self.repository.remove_item(draft.id, product_id)

        log.info("Item removed from cart", order_id=str(order.id), product_id=str(product_id))
        return order

    def clear_cart(self, user_id, correlation_id: str | None = None) -> Order:
        log = logger.bind(user_id=str(user_id), correlation_id=correlation_id)

        with self.locks.hold(user_id):
            draft = self._draft_with_ownership_check(user_id, log)
            order = self.repository.clear_items(draft.id)

        log.info("Cart cleared", order_id=str(order.id))
        return order

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def confirm_draft_order(self, user_id, correlation_id: str | None = None) -> CheckoutResult:
        """Check out the user's cart: DRAFT -> CONFIRMED.

        A one-shot commitment. Once confirmed the DRAFT slot is empty, so a
        second call fails with ``NoDraftOrder``. Prescription-only products do
        not block checkout; they only set ``requires_prescription`` on the result.
        """
        log = logger.bind(user_id=str(user_id), correlation_id=correlation_id)
        collector = DomainEventCollector()

        with self.locks.hold(user_id):
            draft = self._draft_with_ownership_check(user_id, log)
            if draft.item_count == 0:
                raise EmptyCart()

            requires_prescription = self._requires_prescription(draft, log)
            draft.confirm(correlation_id)
            collector.collect(draft)
            order = self.repository.add(draft)

        log.info(
            "Cart checked out",
            order_id=str(order.id),
            total=order.total.amount,
            currency=order.total.currency,
            item_count=order.item_count,
            requires_prescription=requires_prescription,
        )
        return CheckoutResult(
            order=order,
            events=collector.events,
            requires_prescription=requires_prescription,
        )

    def place_draft_order(self, user_id, correlation_id: str | None = None) -> OrderTransitionResult:
        """Submit the cart without confirming it (DRAFT -> CREATED); see ``OrderService.confirm_order``."""
        log = logger.bind(user_id=str(user_id), correlation_id=correlation_id)

        with self.locks.hold(user_id):
            draft = self._draft_with_ownership_check(user_id, log)
            if draft.item_count == 0:
                raise EmptyCart()

            draft.place()
            order = self.repository.add(draft)

        log.info("Cart placed as order", order_id=str(order.id), item_count=order.item_count)
        return OrderTransitionResult(order=order)

    # -------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------
    def _draft_with_ownership_check(self, user_id, log) -> Order:
        draft = self.repository.find_draft_by_user_id(user_id)
        if draft is None:
            raise NoDraftOrder()
        self._assert_owned_draft(draft, user_id, log)
        return draft

    def _assert_owned_draft(self, draft, user_id, log) -> None:
        if not draft.is_owned_by(user_id):
            log.warning("Cart ownership mismatch", order_id=str(draft.id))
            raise UnauthorizedOrderAccess()
        if not can_modify_items(draft.status):
            raise OrderNotDraft(draft.status)

    def _requires_prescription(self, order, log) -> bool:
        """True when any line's product needs a prescription.

        A product that has since left the catalogue counts as needing one, so
        the order is still routed through review.
        """
        requires = False
        for item in order.items:
            try:
                product = self.catalogue.get_product_by_id(str(item.product_id))
            except ProductNotFound:
                log.warning("Product missing from catalogue at checkout", product_id=str(item.product_id))
                requires = True
                continue
            requires = requires or product.requires_prescription
        return requires


def cart_service() -> CartService:
    """Service wired to the active domain's repository and the configured catalogue."""
    return CartService(repository=current_domain.repository_for(Order), catalogue=get_catalogue())
