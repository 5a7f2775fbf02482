"""Read-side tests: order history pages and order detail views."""

from datetime import UTC, datetime, timedelta

import pytest
from ordering.compliance.port import ComplianceStatus
from ordering.exceptions import OrderNotFound, UnauthorizedOrderAccess
from ordering.order.queries import MoneyView, OrderDetailView, OrderSummaryView
from ordering.order.status import OrderStatus


def _placed_order(repository, user_id="user-001", minutes=0):
    order = repository.create_order(user_id)
    order.created_at = datetime(2026, 3, 1, 9, 0, tzinfo=UTC) + timedelta(minutes=minutes)
    repository.add(order)
    return order


class TestOrderHistory:
    def test_empty(self, queries):
        page = queries.get_order_history("user-001")
        assert page.items == []
        assert page.total == 0
        assert page.total_pages == 1
        assert page.page == 1
        assert page.limit == 10

    def test_returns_summary_views(self, queries, carts):
        carts.add_item_to_cart("user-001", "prod-001", 2)
        confirmed = carts.confirm_draft_order("user-001").order

        page = queries.get_order_history("user-001")

        assert page.total == 1
        summary = page.items[0]
        assert isinstance(summary, OrderSummaryView)
        assert summary.order_id == str(confirmed.id)
        assert summary.status == "CONFIRMED"
        assert summary.item_count == 2
        assert summary.total == MoneyView(amount=5000, currency="INR")

    def test_cart_is_not_history(self, queries, carts):
        carts.add_item_to_cart("user-001", "prod-001", 1)
        assert queries.get_order_history("user-001").total == 0

    def test_paginates_newest_first(self, queries, repository):
        orders = [_placed_order(repository, minutes=i) for i in range(12)]

        first = queries.get_order_history("user-001", page=1, limit=5)
        last = queries.get_order_history("user-001", page=3, limit=5)

        assert first.total == 12
        assert first.total_pages == 3
        assert first.has_next_page and not first.has_previous_page
        assert [s.order_id for s in first.items] == [str(o.id) for o in reversed(orders[-5:])]
        assert len(last.items) == 2
        assert last.has_previous_page and not last.has_next_page

    def test_out_of_range_inputs_are_normalized(self, queries, repository):
        _placed_order(repository)
        page = queries.get_order_history("user-001", page=0, limit=1000)
        assert page.page == 1
        assert page.limit == 100

    def test_only_callers_orders(self, queries, repository):
        _placed_order(repository, user_id="user-001")
        _placed_order(repository, user_id="user-002")
        assert queries.get_order_history("user-002").total == 1


class TestOrderDetail:
    def test_detail_view(self, queries, carts):
        carts.add_item_to_cart("user-001", "prod-002", 2)
        carts.add_item_to_cart("user-001", "prod-001", 1)
        order = carts.confirm_draft_order("user-001").order

        detail = queries.get_order_by_id(order.id, "user-001")

        assert isinstance(detail, OrderDetailView)
        assert detail.user_id == "user-001"
        assert detail.status == "CONFIRMED"
        assert detail.item_count == 3
        assert detail.total == MoneyView(amount=2 * 1250 + 2500, currency="INR")
        lines = {line.product_id: line for line in detail.items}
        assert set(lines) == {"prod-001", "prod-002"}
        assert lines["prod-002"].subtotal == MoneyView(amount=2500, currency="INR")
        assert lines["prod-001"].product_name == "Paracetamol 500mg"
        assert detail.compliance is None

    def test_cart_is_readable_by_id(self, queries, carts):
        draft = carts.add_item_to_cart("user-001", "prod-001", 1)
        assert queries.get_order_by_id(draft.id, "user-001").status == OrderStatus.DRAFT.value

    def test_not_found(self, queries):
        with pytest.raises(OrderNotFound):
            queries.get_order_by_id("missing", "user-001")

    def test_other_users_order(self, queries, repository):
        order = _placed_order(repository, user_id="user-001")
        with pytest.raises(UnauthorizedOrderAccess):
            queries.get_order_by_id(order.id, "user-002")


class TestComplianceDecoration:
    def test_pending_without_links(self, queries, carts, compliance):
        carts.add_item_to_cart("user-001", "rx-001", 1)
        order = carts.confirm_draft_order("user-001").order
        compliance.require_prescription(order.id)

        detail = queries.get_order_by_id(order.id, "user-001")

        assert detail.compliance.status == "PENDING"
        assert detail.compliance.requires_prescription is True
        assert detail.compliance.prescriptions == []

    def test_approved_prescription(self, queries, carts, compliance):
        carts.add_item_to_cart("user-001", "rx-001", 1)
        order = carts.confirm_draft_order("user-001").order
        compliance.link_prescription(order.id, "rx-9", ComplianceStatus.REJECTED, "Illegible")
        compliance.link_consultation(order.id, "cons-1", ComplianceStatus.APPROVED)

        detail = queries.get_order_by_id(order.id, "user-001")

        assert detail.compliance.status == "APPROVED"
        assert detail.compliance.prescriptions[0].rejection_reason == "Illegible"
        assert detail.compliance.consultations[0].id == "cons-1"

    def test_rejected(self, queries, carts, compliance):
        carts.add_item_to_cart("user-001", "rx-001", 1)
        order = carts.confirm_draft_order("user-001").order
        compliance.link_prescription(order.id, "rx-9", ComplianceStatus.REJECTED)

        assert queries.get_order_by_id(order.id, "user-001").compliance.status == "REJECTED"
        assert compliance.get_compliance_info(str(order.id)).status is ComplianceStatus.REJECTED

    def test_otc_order_is_not_decorated(self, queries, carts, compliance):
        carts.add_item_to_cart("user-001", "prod-001", 1)
        order = carts.confirm_draft_order("user-001").order

        assert queries.get_order_by_id(order.id, "user-001").compliance is None
        assert compliance.calls == [str(order.id)]
