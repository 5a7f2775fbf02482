"""Lifecycle use cases for orders that have left the cart: confirm, pay, cancel.

Each operation re-reads the order, checks the caller owns it and asks the
state machine whether the move is legal before persisting anything.
"""

import structlog
from protean.utils.globals import current_domain

from ordering.exceptions import (
    InvalidOrderStateTransition,
    OrderAlreadyConfirmed,
    OrderCannotBeCancelled,
    OrderNotConfirmed,
    OrderNotFound,
    OrderTerminalState,
    UnauthorizedOrderAccess,
)
from ordering.order.events import DomainEventCollector
from ordering.order.locking import UserLocks, user_locks
from ordering.order.order import Order
from ordering.order.repository import OrderStore
from ordering.order.results import OrderTransitionResult
from ordering.order.state_machine import can_cancel
from ordering.order.status import OrderStatus, is_terminal

logger = structlog.get_logger(__name__)

_CONFIRMED_OR_LATER = frozenset({OrderStatus.CONFIRMED, OrderStatus.PAID, OrderStatus.SHIPPED})


class OrderService:
    def __init__(self, repository: OrderStore, locks: UserLocks = user_locks):
        self.repository = repository
        self.locks = locks

    def confirm_order(self, order_id, user_id, correlation_id: str | None = None) -> OrderTransitionResult:
        """CREATED -> CONFIRMED for orders placed before confirmation."""
        log = logger.bind(user_id=str(user_id), order_id=str(order_id), correlation_id=correlation_id)
        collector = DomainEventCollector()

        with self.locks.hold(user_id):
            order = self._owned_order(order_id, user_id, log)
            status = order.current_status

            if is_terminal(status):
                raise OrderTerminalState(status.value)
            if status in _CONFIRMED_OR_LATER:
                raise OrderAlreadyConfirmed(status.value)
            if status is OrderStatus.DRAFT:
                raise InvalidOrderStateTransition(
                    status.value,
                    OrderStatus.CONFIRMED.value,
                    reason="Draft orders are confirmed through cart checkout",
                )
            order.confirm(correlation_id)
            collector.collect(order)
            self.repository.add(order)

        log.info("Order confirmed", total=order.total.amount, item_count=order.item_count)
        return OrderTransitionResult(order=order, events=collector.events)

    def pay_for_order(self, order_id, user_id, correlation_id: str | None = None) -> OrderTransitionResult:
        """CONFIRMED -> PAID. No money moves here; payment capture happens elsewhere."""
        log = logger.bind(user_id=str(user_id), order_id=str(order_id), correlation_id=correlation_id)

        with self.locks.hold(user_id):
            order = self._owned_order(order_id, user_id, log)
            if order.current_status is not OrderStatus.CONFIRMED:
                raise OrderNotConfirmed(order.status)

            order.pay()
            self.repository.add(order)

        log.info("Order paid", total=order.total.amount)
        return OrderTransitionResult(order=order)

    def cancel_order(self, order_id, user_id, correlation_id: str | None = None) -> OrderTransitionResult:
        log = logger.bind(user_id=str(user_id), order_id=str(order_id), correlation_id=correlation_id)
        collector = DomainEventCollector()

        with self.locks.hold(user_id):
            order = self._owned_order(order_id, user_id, log)
            previous_status = order.current_status

            if is_terminal(previous_status):
                raise OrderTerminalState(previous_status.value)
            if not can_cancel(previous_status):
                raise OrderCannotBeCancelled(previous_status.value)

            order.cancel(correlation_id)
            collector.collect(order)
            self.repository.add(order)

        log.info("Order cancelled", previous_status=previous_status.value, item_count=order.item_count)
        return OrderTransitionResult(order=order, events=collector.events)

    def _owned_order(self, order_id, user_id, log) -> Order:
        order = self.repository.find_by_id(order_id)
        if order is None:
            raise OrderNotFound(str(order_id))
        if not order.is_owned_by(user_id):
            log.warning("Order ownership mismatch")
            raise UnauthorizedOrderAccess()
        return order


def order_service() -> OrderService:
    return OrderService(repository=current_domain.repository_for(Order))
