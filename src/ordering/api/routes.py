"""FastAPI routes for the Ordering domain: the cart and order history.

Authentication happens upstream; the caller's identity arrives in the
``X-User-Id`` header.
"""

from fastapi import APIRouter, Depends, Header, Request

from ordering.api.schemas import (
    AddItemRequest,
    CheckoutResponse,
    OrderDetailResponse,
    OrderHistoryResponse,
    TransitionResponse,
    UpdateItemQuantityRequest,
    detail_response,
    event_schemas,
    history_response,
)
from ordering.cart.service import cart_service
from ordering.order.queries import order_query_service, to_order_detail
from ordering.order.service import order_service


def request_correlation_id(
    request: Request,
    header_value: str | None = Header(default=None, alias="X-Correlation-ID"),
) -> str | None:
    """The caller's correlation id, or the one the app middleware generated."""
    return header_value or getattr(request.state, "correlation_id", None)


def _transition_response(result) -> TransitionResponse:
    return TransitionResponse(
        order=detail_response(to_order_detail(result.order)),
        events=event_schemas(result.events),
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=OrderDetailResponse)
async def get_cart(
    user_id: str = Header(alias="X-User-Id"),
    correlation_id: str | None = Depends(request_correlation_id),
) -> OrderDetailResponse:
    cart = cart_service().get_cart_or_fail(user_id, correlation_id)
    return detail_response(to_order_detail(cart))


@cart_router.post("", status_code=201, response_model=OrderDetailResponse)
async def create_cart(
    user_id: str = Header(alias="X-User-Id"),
    correlation_id: str | None = Depends(request_correlation_id),
) -> OrderDetailResponse:
    cart = cart_service().create_draft_order(user_id, correlation_id)
    return detail_response(to_order_detail(cart))


@cart_router.delete("", response_model=OrderDetailResponse)
async def clear_cart(
    user_id: str = Header(alias="X-User-Id"),
    correlation_id: str | None = Depends(request_correlation_id),
) -> OrderDetailResponse:
    cart = cart_service().clear_cart(user_id, correlation_id)
    return detail_response(to_order_detail(cart))


@cart_router.post("/items", response_model=OrderDetailResponse)
async def add_cart_item(
    body: AddItemRequest,
    user_id: str = Header(alias="X-User-Id"),
    correlation_id: str | None = Depends(request_correlation_id),
) -> OrderDetailResponse:
    cart = cart_service().add_item_to_cart(user_id, body.product_id, body.quantity, correlation_id)
    return detail_response(to_order_detail(cart))


@cart_router.patch("/items/{product_id}", response_model=OrderDetailResponse)
async def update_cart_item(
    product_id: str,
    body: UpdateItemQuantityRequest,
    user_id: str = Header(alias="X-User-Id"),
    correlation_id: str | None = Depends(request_correlation_id),
) -> OrderDetailResponse:
    cart = cart_service().update_item_quantity(user_id, product_id, body.quantity, correlation_id)
    return detail_response(to_order_detail(cart))


@cart_router.delete("/items/{product_id}", response_model=OrderDetailResponse)
async def remove_cart_item(
    product_id: str,
    user_id: str = Header(alias="X-User-Id"),
    correlation_id: str | None = Depends(request_correlation_id),
) -> OrderDetailResponse:
    cart = cart_service().remove_item_from_cart(user_id, product_id, correlation_id)
    return detail_response(to_order_detail(cart))


@cart_router.post("/abandon", response_model=TransitionResponse)
async def abandon_cart(
    user_id: str = Header(alias="X-User-Id"),
    correlation_id: str | None = Depends(request_correlation_id),
) -> TransitionResponse:
    return _transition_response(cart_service().abandon_cart(user_id, correlation_id))


@cart_router.post("/checkout", response_model=CheckoutResponse)
async def checkout_cart(
    user_id: str = Header(alias="X-User-Id"),
    correlation_id: str | None = Depends(request_correlation_id),
) -> CheckoutResponse:
    """Confirm the cart. Prescription-only products never block this call;
    ``requires_prescription`` tells the client to start prescription review."""
    result = cart_service().confirm_draft_order(user_id, correlation_id)
    return CheckoutResponse(
        order=detail_response(to_order_detail(result.order)),
        events=event_schemas(result.events),
        requires_prescription=result.requires_prescription,
    )


@cart_router.post("/place", response_model=TransitionResponse)
async def place_cart(
    user_id: str = Header(alias="X-User-Id"),
    correlation_id: str | None = Depends(request_correlation_id),
) -> TransitionResponse:
    return _transition_response(cart_service().place_draft_order(user_id, correlation_id))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=OrderHistoryResponse)
async def order_history(
    page: int | None = None,
    limit: int | None = None,
    user_id: str = Header(alias="X-User-Id"),
    correlation_id: str | None = Depends(request_correlation_id),
) -> OrderHistoryResponse:
    result = order_query_service().get_order_history(user_id, page, limit, correlation_id)
    return history_response(result)


@order_router.get("/{order_id}", response_model=OrderDetailResponse)
async def order_detail(
    order_id: str,
    user_id: str = Header(alias="X-User-Id"),
    correlation_id: str | None = Depends(request_correlation_id),
) -> OrderDetailResponse:
    return detail_response(order_query_service().get_order_by_id(order_id, user_id, correlation_id))


@order_router.post("/{order_id}/confirm", response_model=TransitionResponse)
async def confirm_order(
    order_id: str,
    user_id: str = Header(alias="X-User-Id"),
    correlation_id: str | None = Depends(request_correlation_id),
) -> TransitionResponse:
    return _transition_response(order_service().confirm_order(order_id, user_id, correlation_id))


@order_router.post("/{order_id}/pay", response_model=TransitionResponse)
async def pay_for_order(
    order_id: str,
    user_id: str = Header(alias="X-User-Id"),
    correlation_id: str | None = Depends(request_correlation_id),
) -> TransitionResponse:
    return _transition_response(order_service().pay_for_order(order_id, user_id, correlation_id))


@order_router.post("/{order_id}/cancel", response_model=TransitionResponse)
async def cancel_order(
    order_id: str,
    user_id: str = Header(alias="X-User-Id"),
    correlation_id: str | None = Depends(request_correlation_id),
) -> TransitionResponse:
    return _transition_response(order_service().cancel_order(order_id, user_id, correlation_id))
