"""Order storage contract and its Protean repository.

``OrderStore`` is the capability the services depend on. ``OrderRepository``
fulfils it on top of whichever Protean database provider is configured: the
memory provider in development and tests, a SQL provider in production.
Queries go through the DAO so the same rules (drafts excluded from history,
newest first, quantity merge on add) hold on every backend.
"""

from typing import Protocol

from protean.exceptions import ObjectNotFoundError

from ordering.domain import ordering
from ordering.exceptions import DraftOrderAlreadyExists, OrderNotFound
from ordering.order.order import Order
from ordering.order.pagination import Page, PageRequest, build_page
from ordering.order.status import OrderStatus, as_status

_HISTORY_STATUSES = [status.value for status in OrderStatus if status is not OrderStatus.DRAFT]


class OrderStore(Protocol):
    def add(self, order: Order) -> Order: ...

    def create_order(self, user_id, status=OrderStatus.CREATED) -> Order: ...

    def find_by_id(self, order_id) -> Order | None: ...

    def find_by_user_id(self, user_id, status=None) -> list[Order]: ...

    def find_by_user_id_paginated(self, user_id, page_request: PageRequest) -> Page: ...

    def update_status(self, order_id, status) -> Order: ...

    def find_draft_by_user_id(self, user_id) -> Order | None: ...

    def has_draft(self, user_id) -> bool: ...

    def exists(self, order_id) -> bool: ...

    def add_item(self, order_id, item) -> Order: ...

    def update_item_quantity(self, order_id, product_id, quantity) -> Order: ...

    def remove_item(self, order_id, product_id) -> Order: ...

    def clear_items(self, order_id) -> Order: ...

    def get_item(self, order_id, product_id): ...


@ordering.repository(part_of=Order)
class OrderRepository:
    # -------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------
    def create_order(self, user_id, status=OrderStatus.CREATED) -> Order:
        """Persist a new, empty order. A user can hold only one DRAFT at a time."""
        status = as_status(status)
        if status is OrderStatus.DRAFT and self.has_draft(user_id):
            raise DraftOrderAlreadyExists()

        order = Order.create(user_id=user_id, status=status)
        self.add(order)
        return order

    def find_by_id(self, order_id) -> Order | None:
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError:
            return None

    def exists(self, order_id) -> bool:
        return self.find_by_id(order_id) is not None

    def find_by_user_id(self, user_id, status=None) -> list[Order]:
        """All of a user's orders, newest first, optionally narrowed to one status.

        Unbounded: the aggregate's default query limit is lifted. Callers that
        need bounded reads use ``find_by_user_id_paginated``.
        """
        criteria = {"user_id": str(user_id)}
        if status is not None:
            criteria["status"] = as_status(status).value

        return (
            self._dao.query.filter(**criteria)
            .order_by("-created_at")
            .limit(None)
            .all()
            .items
        )

    def find_by_user_id_paginated(self, user_id, page_request: PageRequest) -> Page:
        """Order history: every status except DRAFT, newest first."""
        result = (
            self._dao.query.filter(user_id=str(user_id), status__in=_HISTORY_STATUSES)
            .order_by("-created_at")
            .offset(page_request.offset)
            .limit(page_request.limit)
            .all()
        )
        return build_page(result.items, result.total, page_request)

    def update_status(self, order_id, status) -> Order:
        """Persist a status change.

        Goes through ``Order.change_status``, so an illegal move raises
        ``InvalidOrderStateTransition`` on every backend. The services run
        their own guards first and report the more specific error.
        """
        order = self._get_or_raise(order_id)
        order.change_status(status)
        self.add(order)
        return order

    # -------------------------------------------------------------------
    # Drafts
    # -------------------------------------------------------------------
    def find_draft_by_user_id(self, user_id) -> Order | None:
        drafts = self.find_by_user_id(user_id, status=OrderStatus.DRAFT)
        return drafts[0] if drafts else None

    def has_draft(self, user_id) -> bool:
        return self.find_draft_by_user_id(user_id) is not None

    # -------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------
    def add_item(self, order_id, item) -> Order:
        """Append ``item``, or add its quantity to the line already holding that product."""
        order = self._get_or_raise(order_id)
        order.add_item(item)
        self.add(order)
        return order

    def update_item_quantity(self, order_id, product_id, quantity) -> Order:
        order = self._get_or_raise(order_id)
        order.change_item_quantity(product_id, quantity)
        self.add(order)
        return order

    def remove_item(self, order_id, product_id) -> Order:
        order = self._get_or_raise(order_id)
        order.remove_item(product_id)
        self.add(order)
        return order

    def clear_items(self, order_id) -> Order:
        order = self._get_or_raise(order_id)
        order.remove_all_items()
        self.add(order)
        return order

    def get_item(self, order_id, product_id):
        order = self.find_by_id(order_id)
        if order is None:
            return None
        return order.find_item(product_id)

    def _get_or_raise(self, order_id) -> Order:
        order = self.find_by_id(order_id)
        if order is None:
            raise OrderNotFound(str(order_id))
        return order
