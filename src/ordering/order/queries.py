"""Read side: order history and order detail views.

Views are frozen dataclasses built from the aggregate, so callers never hold
a reference to anything the repository owns.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime

import structlog
from protean.utils.globals import current_domain

from ordering.compliance import get_compliance
from ordering.compliance.port import ComplianceInfo, ComplianceLookup
from ordering.exceptions import OrderNotFound, UnauthorizedOrderAccess
from ordering.order.order import Order
from ordering.order.pagination import Page, normalize_pagination
from ordering.order.repository import OrderStore

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class MoneyView:
    amount: int
    currency: str


@dataclass(frozen=True)
class OrderLineView:
    product_id: str
    product_name: str
    unit_price: MoneyView
    quantity: int
    subtotal: MoneyView
    added_at: datetime | None


@dataclass(frozen=True)
class PrescriptionView:
    id: str
    status: str
    rejection_reason: str | None = None


@dataclass(frozen=True)
class ConsultationView:
    id: str
    status: str


@dataclass(frozen=True)
class ComplianceView:
    status: str
    requires_prescription: bool = True
    prescriptions: list[PrescriptionView] = field(default_factory=list)
    consultations: list[ConsultationView] = field(default_factory=list)


@dataclass(frozen=True)
class OrderSummaryView:
    order_id: str
    status: str
    item_count: int
    total: MoneyView
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class OrderDetailView:
    order_id: str
    user_id: str
    status: str
    item_count: int
    total: MoneyView
    items: list[OrderLineView]
    created_at: datetime | None
    updated_at: datetime | None
    compliance: ComplianceView | None = None


def _money_view(money) -> MoneyView:
    return MoneyView(amount=money.amount, currency=money.currency)


def to_order_summary(order) -> OrderSummaryView:
    return OrderSummaryView(
        order_id=str(order.id),
        status=order.status,
        item_count=order.item_count,
        total=_money_view(order.total),
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def to_order_detail(order) -> OrderDetailView:
    return OrderDetailView(
        order_id=str(order.id),
        user_id=str(order.user_id),
        status=order.status,
        item_count=order.item_count,
        total=_money_view(order.total),
        items=[
            OrderLineView(
                product_id=str(item.product_id),
                product_name=item.product_name,
                unit_price=_money_view(item.unit_price),
                quantity=item.quantity,
                subtotal=_money_view(item.subtotal),
                added_at=item.added_at,
            )
            for item in order.sorted_items()
        ],
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def to_compliance_view(info: ComplianceInfo) -> ComplianceView:
    return ComplianceView(
        status=info.status.value,
        prescriptions=[
            PrescriptionView(id=link.id, status=link.status.value, rejection_reason=link.rejection_reason)
            for link in info.prescriptions
        ],
        consultations=[ConsultationView(id=link.id, status=link.status.value) for link in info.consultations],
    )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------
class OrderQueryService:
    def __init__(self, repository: OrderStore, compliance: ComplianceLookup):
        self.repository = repository
        self.compliance = compliance

    def get_order_history(self, user_id, page=None, limit=None, correlation_id: str | None = None) -> Page:
        """A page of the user's orders, newest first. Carts (DRAFT orders) are not history."""
        page_request = normalize_pagination(page, limit)
        result = self.repository.find_by_user_id_paginated(user_id, page_request)

        logger.debug(
            "Order history fetched",
            user_id=str(user_id),
            page=result.page,
            total=result.total,
            correlation_id=correlation_id,
        )
        return replace(result, items=[to_order_summary(order) for order in result.items])

    def get_order_by_id(self, order_id, user_id, correlation_id: str | None = None) -> OrderDetailView:
        order = self.repository.find_by_id(order_id)
        if order is None:
            raise OrderNotFound(str(order_id))
        if not order.is_owned_by(user_id):
            logger.warning(
                "Order ownership mismatch",
                user_id=str(user_id),
                order_id=str(order_id),
                correlation_id=correlation_id,
            )
            raise UnauthorizedOrderAccess()

        detail = to_order_detail(order)
        info = self.compliance.get_compliance_info(str(order.id))
        if info is not None:
            detail = replace(detail, compliance=to_compliance_view(info))
        return detail


def order_query_service() -> OrderQueryService:
    return OrderQueryService(repository=current_domain.repository_for(Order), compliance=get_compliance())
