"""Order aggregate (CQRS): a cart while DRAFT, a commitment afterwards.

The aggregate keeps items unique by product, lets them change only while the
order is a DRAFT, and moves between statuses only along the state machine in
``ordering.order.state_machine``. ``total`` and ``item_count`` are always
derived from the lines and never stored. ``confirm`` and ``cancel`` raise
the matching domain event on the aggregate.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, String

from ordering.domain import ordering
from ordering.exceptions import OrderItemNotFound, OrderNotDraft
from ordering.order.events import create_order_cancelled_event, create_order_confirmed_event
from ordering.order.item import OrderItem, update_order_item_quantity
from ordering.order.state_machine import assert_transition, can_modify_items
from ordering.order.status import OrderStatus, as_status
from ordering.shared.money import DEFAULT_CURRENCY, Money, sum_money


@ordering.aggregate
class Order:
    user_id = Identifier(required=True)
    status = String(
        max_length=20,
        choices=OrderStatus,
        default=OrderStatus.CREATED.value,
    )
    items = HasMany(OrderItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def items_must_be_unique_per_product(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["Each product may appear only once in an order"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id, status=OrderStatus.CREATED):
        now = datetime.now(UTC)
        return cls(
            user_id=str(user_id),
            status=as_status(status).value,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def current_status(self) -> OrderStatus:
        return as_status(self.status)

    @property
    def total(self) -> Money:
        lines = self.sorted_items()
        currency = lines[0].unit_price.currency if lines else DEFAULT_CURRENCY
        return sum_money((item.subtotal for item in lines), currency)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def sorted_items(self) -> list:
        return sorted(self.items, key=lambda item: (item.added_at, str(item.product_id)))

    def find_item(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def is_owned_by(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    # -------------------------------------------------------------------
    # Item management (DRAFT only)
    # -------------------------------------------------------------------
    def _assert_items_modifiable(self):
        if not can_modify_items(self.status):
            raise OrderNotDraft(self.status)

    def _replace_item(self, existing, replacement):
        self.remove_items(existing)
        self.add_items(replacement)

    def add_item(self, item):
        """Add a line, or fold its quantity into the existing line for the same product."""
        self._assert_items_modifiable()
        if self.items:
            # All lines share one currency; Money.add refuses a mismatch
            self.total.add(item.subtotal)

        existing = self.find_item(item.product_id)
        if existing:
            self._replace_item(existing, update_order_item_quantity(existing, existing.quantity + item.quantity))
        else:
            self.add_items(item)
        self.updated_at = datetime.now(UTC)

    def change_item_quantity(self, product_id, quantity):
        self._assert_items_modifiable()

        existing = self.find_item(product_id)
        if existing is None:
            raise OrderItemNotFound(str(product_id))
        self._replace_item(existing, update_order_item_quantity(existing, quantity))
        self.updated_at = datetime.now(UTC)

    def remove_item(self, product_id):
        self._assert_items_modifiable()

        existing = self.find_item(product_id)
        if existing is None:
            raise OrderItemNotFound(str(product_id))
        self.remove_items(existing)
        self.updated_at = datetime.now(UTC)

    def remove_all_items(self):
        self._assert_items_modifiable()

        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def change_status(self, target):
        target = as_status(target)
        assert_transition(self.status, target)
        self.status = target.value
        self.updated_at = datetime.now(UTC)

    def place(self):
        """Submit a cart without confirming it."""
        self.change_status(OrderStatus.CREATED)

    def confirm(self, correlation_id=None):
        """Finalize the order. The event snapshot is taken before the status changes."""
        assert_transition(self.status, OrderStatus.CONFIRMED)
        event = create_order_confirmed_event(self, correlation_id)

        self.change_status(OrderStatus.CONFIRMED)
        self.raise_(event)

    def pay(self):
        self.change_status(OrderStatus.PAID)

    def cancel(self, correlation_id=None):
        previous_status = self.current_status
        assert_transition(previous_status, OrderStatus.CANCELLED)
        event = create_order_cancelled_event(self, previous_status, correlation_id)

        self.change_status(OrderStatus.CANCELLED)
        self.raise_(event)
