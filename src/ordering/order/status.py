"""Order statuses and the metadata table that describes them."""

from dataclasses import dataclass
from enum import Enum


class OrderStatus(Enum):
    DRAFT = "DRAFT"
    CREATED = "CREATED"
    CONFIRMED = "CONFIRMED"
    PAID = "PAID"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class StatusMetadata:
    label: str
    description: str
    terminal: bool
    mutable: bool


_STATUS_METADATA = {
    OrderStatus.DRAFT: StatusMetadata(
        label="Draft",
        description="Shopping cart, items can still be added or removed",
        terminal=False,
        mutable=True,
    ),
    OrderStatus.CREATED: StatusMetadata(
        label="Created",
        description="Order placed and awaiting confirmation",
        terminal=False,
        mutable=False,
    ),
    OrderStatus.CONFIRMED: StatusMetadata(
        label="Confirmed",
        description="Order confirmed and awaiting payment",
        terminal=False,
        mutable=False,
    ),
    OrderStatus.PAID: StatusMetadata(
        label="Paid",
        description="Payment received, preparing for shipment",
        terminal=False,
        mutable=False,
    ),
    OrderStatus.SHIPPED: StatusMetadata(
        label="Shipped",
        description="Order handed to the carrier",
        terminal=False,
        mutable=False,
    ),
    OrderStatus.DELIVERED: StatusMetadata(
        label="Delivered",
        description="Order delivered to the customer",
        terminal=True,
        mutable=False,
    ),
    OrderStatus.CANCELLED: StatusMetadata(
        label="Cancelled",
        description="Order cancelled, no further changes possible",
        terminal=True,
        mutable=False,
    ),
}


def as_status(value) -> OrderStatus:
    """Accept either an ``OrderStatus`` or its stored string value."""
    if isinstance(value, OrderStatus):
        return value
    return OrderStatus(value)


def get_status_metadata(status) -> StatusMetadata:
    return _STATUS_METADATA[as_status(status)]


def is_terminal(status) -> bool:
    return get_status_metadata(status).terminal


def is_mutable(status) -> bool:
    return get_status_metadata(status).mutable


def all_statuses() -> list[OrderStatus]:
    return list(OrderStatus)
