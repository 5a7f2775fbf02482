"""Domain events for the Order aggregate.

Events are immutable facts carrying a snapshot of the order at the moment of
the transition. The Order aggregate raises them; use cases gather them in a
``DomainEventCollector`` and hand them back to the caller for dispatch.
"""

import json
from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer, String, Text

from ordering.domain import ordering
from ordering.order.item import item_summary


@ordering.event(part_of="Order")
class OrderConfirmed:
    """A draft or placed order was confirmed and its total finalized."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    total_amount = Integer(required=True)  # minor units
    currency = String(max_length=3, required=True)
    item_count = Integer(required=True)
    item_summary = Text(required=True)  # JSON: list of line summaries
    occurred_at = DateTime(required=True)
    correlation_id = String(max_length=255)


@ordering.event(part_of="Order")
class OrderCancelled:
    """An order was cancelled; carries the status it was cancelled from."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    previous_status = String(max_length=20, required=True)
    total_amount = Integer(required=True)
    currency = String(max_length=3, required=True)
    item_count = Integer(required=True)
    occurred_at = DateTime(required=True)
    correlation_id = String(max_length=255)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
def create_order_confirmed_event(order, correlation_id: str | None = None) -> OrderConfirmed:
    total = order.total
    return OrderConfirmed(
        order_id=str(order.id),
        user_id=str(order.user_id),
        total_amount=total.amount,
        currency=total.currency,
        item_count=order.item_count,
        item_summary=json.dumps([item_summary(item) for item in order.sorted_items()]),
        occurred_at=datetime.now(UTC),
        correlation_id=correlation_id,
    )


def create_order_cancelled_event(order, previous_status, correlation_id: str | None = None) -> OrderCancelled:
    total = order.total
    return OrderCancelled(
        order_id=str(order.id),
        user_id=str(order.user_id),
        previous_status=getattr(previous_status, "value", previous_status),
        total_amount=total.amount,
        currency=total.currency,
        item_count=order.item_count,
        occurred_at=datetime.now(UTC),
        correlation_id=correlation_id,
    )


# ---------------------------------------------------------------------------
# Collector
# ---------------------------------------------------------------------------
class DomainEventCollector:
    """Append-only buffer of the events raised during one use-case call."""

    def __init__(self):
        self._events = []

    def add(self, event) -> None:
        self._events.append(event)

    def collect(self, aggregate) -> None:
        """Copy the events an aggregate has raised. Call before persisting; saving clears them."""
        for event in aggregate._events:
            self.add(event)

    @property
    def events(self) -> list:
        return list(self._events)

    def events_of_type(self, event_cls) -> list:
        return [event for event in self._events if isinstance(event, event_cls)]

    def has_events(self) -> bool:
        return bool(self._events)

    def clear(self) -> None:
        self._events.clear()

    def __len__(self):
        return len(self._events)

    def __iter__(self):
        return iter(list(self._events))
