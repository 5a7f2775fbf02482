"""Return values of the ordering use cases."""

from dataclasses import dataclass, field

from ordering.order.order import Order


@dataclass(frozen=True)
class OrderTransitionResult:
    """The order after a status change, plus the events the change raised."""

    order: Order
    events: list = field(default_factory=list)


@dataclass(frozen=True)
class CheckoutResult:
    """Outcome of confirming a cart.

    ``requires_prescription`` never blocks checkout; it tells the caller to send
    the customer on to prescription review before fulfilment.
    """

    order: Order
    events: list = field(default_factory=list)
    requires_prescription: bool = False
