"""Order status state machine.

Pure functions over ``OrderStatus``; nothing here reads or writes state, so
every function is safe to call from any thread.

    DRAFT     -> CREATED, CONFIRMED, CANCELLED
    CREATED   -> CONFIRMED, CANCELLED
    CONFIRMED -> PAID, CANCELLED
    PAID      -> SHIPPED, CANCELLED
    SHIPPED   -> DELIVERED, CANCELLED
    DELIVERED -> (terminal)
    CANCELLED -> (terminal)
"""

from dataclasses import dataclass, field

from ordering.exceptions import InvalidOrderStateTransition
from ordering.order.status import OrderStatus, as_status, is_mutable, is_terminal

_VALID_TRANSITIONS = {
    OrderStatus.DRAFT: frozenset({OrderStatus.CREATED, OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CREATED: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

_PAID_STATES = frozenset({OrderStatus.PAID, OrderStatus.SHIPPED, OrderStatus.DELIVERED})

# Statuses from which the order can still move forward through checkout and payment
_MODIFIABLE_STATES = frozenset({OrderStatus.DRAFT, OrderStatus.CREATED, OrderStatus.CONFIRMED})

# Declaration order of the enum, used to keep allowed-transition lists stable
_ORDER = list(OrderStatus)


@dataclass(frozen=True)
class TransitionCheck:
    valid: bool
    reason: str | None = None
    allowed_transitions: tuple[OrderStatus, ...] = field(default_factory=tuple)


def get_allowed_transitions(status) -> list[OrderStatus]:
    allowed = _VALID_TRANSITIONS[as_status(status)]
    return sorted(allowed, key=_ORDER.index)


def can_transition(from_status, to_status) -> bool:
    source = as_status(from_status)
    if is_terminal(source):
        return False
    return as_status(to_status) in _VALID_TRANSITIONS[source]


def validate_transition(from_status, to_status) -> TransitionCheck:
    """Like ``can_transition``, with a reason and the legal targets when the move is rejected."""
    source = as_status(from_status)
    target = as_status(to_status)

    if is_terminal(source):
        return TransitionCheck(
            valid=False,
            reason=f"Order is in terminal state '{source.value}' and cannot be modified",
        )

    if target not in _VALID_TRANSITIONS[source]:
        return TransitionCheck(
            valid=False,
            reason=f"Transition from '{source.value}' to '{target.value}' is not allowed",
            allowed_transitions=tuple(get_allowed_transitions(source)),
        )

    return TransitionCheck(valid=True)


def can_cancel(status) -> bool:
    return can_transition(status, OrderStatus.CANCELLED)


def is_paid(status) -> bool:
    return as_status(status) in _PAID_STATES


def is_modifiable(status) -> bool:
    return as_status(status) in _MODIFIABLE_STATES


def can_modify_items(status) -> bool:
    return is_mutable(status)


def can_confirm_order(status) -> bool:
    return can_transition(status, OrderStatus.CONFIRMED)


def assert_transition(from_status, to_status) -> None:
    """Raise ``InvalidOrderStateTransition`` unless the move is legal."""
    check = validate_transition(from_status, to_status)
    if not check.valid:
        raise InvalidOrderStateTransition(
            as_status(from_status).value,
            as_status(to_status).value,
            check.allowed_transitions,
            reason=check.reason,
        )
