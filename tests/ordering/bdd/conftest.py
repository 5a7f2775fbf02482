"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.exceptions import OrderingError
from ordering.order.events import OrderCancelled, OrderConfirmed
from pytest_bdd import given, parsers, then

_EVENT_CLASSES = {
    "OrderConfirmed": OrderConfirmed,
    "OrderCancelled": OrderCancelled,
}


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for the ordering error raised by the last When step."""
    return {"exc": None}


@pytest.fixture()
def outcome():
    """Result of the last transition: the order and any events it raised."""
    return {"order": None, "events": [], "requires_prescription": None}


@pytest.fixture()
def capture(error, outcome):
    """Run a When action, recording either its result or the OrderingError it raised."""

    def _capture(action):
        try:
            result = action()
        except OrderingError as exc:
            error["exc"] = exc
            return None

        if hasattr(result, "events"):
            outcome["order"] = result.order
            outcome["events"] = list(result.events)
            outcome["requires_prescription"] = getattr(result, "requires_prescription", None)
        else:
            outcome["order"] = result
        return result

    return _capture


# ---------------------------------------------------------------------------
# Shared Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('user "{user_id}" has no cart'))
def user_has_no_cart(carts, user_id):
    assert carts.get_cart(user_id) is None


@given(parsers.cfparse('user "{user_id}" has an empty cart'))
def user_has_empty_cart(carts, user_id):
    carts.create_draft_order(user_id)


@given(parsers.cfparse('user "{user_id}" has {qty:d} of "{product_id}" in the cart'))
def user_has_items_in_cart(carts, user_id, qty, product_id):
    carts.add_item_to_cart(user_id, product_id, qty)


# ---------------------------------------------------------------------------
# Shared Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(outcome, status):
    assert outcome["order"].status == status


@then(parsers.cfparse('the order total is {amount:d} "{currency}"'))
def order_total_is(outcome, amount, currency):
    total = outcome["order"].total
    assert total.amount == amount
    assert total.currency == currency


@then(parsers.cfparse('an "{event_type}" event is raised'))
def event_is_raised(outcome, event_type):
    event_cls = _EVENT_CLASSES[event_type]
    assert any(isinstance(e, event_cls) for e in outcome["events"])


@then("no event is raised")
def no_event_is_raised(outcome):
    assert outcome["events"] == []


@then(parsers.cfparse('the request fails with "{code}"'))
def request_fails_with(error, code):
    assert error["exc"] is not None
    assert error["exc"].code == code


@then(parsers.cfparse('user "{user_id}" has no active cart'))
def user_has_no_active_cart(carts, user_id):
    assert carts.get_cart(user_id) is None
