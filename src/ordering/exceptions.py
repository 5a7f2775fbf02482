"""Domain errors raised by the ordering services.

Every error carries a stable ``code`` and the HTTP status the API answers
with. Structural validation failures (bad field values) stay Protean
``ValidationError``s; these classes cover the business rules.
"""

from typing import Any


class OrderingError(Exception):
    code = "ORDERING_ERROR"
    status_code = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        payload = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


# ---------------------------------------------------------------------------
# Lookup and ownership
# ---------------------------------------------------------------------------
class OrderNotFound(OrderingError):
    code = "ORDER_NOT_FOUND"
    status_code = 404

    def __init__(self, order_id: str):
        super().__init__(f"Order with id '{order_id}' not found")
        self.order_id = order_id


class UnauthorizedOrderAccess(OrderingError):
    """The caller does not own the order. The message names neither the order nor its owner."""

    code = "UNAUTHORIZED_ORDER_ACCESS"
    status_code = 403

    def __init__(self):
        super().__init__("You do not have permission to access this order")


class ProductNotFound(OrderingError):
    code = "PRODUCT_NOT_FOUND"
    status_code = 404

    def __init__(self, product_id: str):
        super().__init__(f"Product with id '{product_id}' not found", {"product_id": product_id})
        self.product_id = product_id


# ---------------------------------------------------------------------------
# Status rules
# ---------------------------------------------------------------------------
class InvalidOrderStateTransition(OrderingError):
    code = "INVALID_ORDER_STATE_TRANSITION"
    status_code = 409

    def __init__(self, current_status: str, target_status: str, allowed_transitions=(), reason: str | None = None):
        allowed = [str(getattr(s, "value", s)) for s in allowed_transitions]
        super().__init__(
            reason or f"Cannot transition order from '{current_status}' to '{target_status}'",
            {
                "current_status": current_status,
                "target_status": target_status,
                "allowed_transitions": allowed,
            },
        )
        self.current_status = current_status
        self.target_status = target_status
        self.allowed_transitions = allowed


class OrderTerminalState(OrderingError):
    code = "ORDER_TERMINAL_STATE"
    status_code = 409

    def __init__(self, status: str):
        super().__init__(f"Order is in terminal state '{status}' and cannot be modified", {"status": status})
        self.status = status


class OrderCannotBeCancelled(OrderingError):
    code = "ORDER_CANNOT_BE_CANCELLED"
    status_code = 409

    def __init__(self, status: str):
        super().__init__(f"Order in state '{status}' cannot be cancelled", {"status": status})
        self.status = status


class OrderNotConfirmed(OrderingError):
    code = "ORDER_NOT_CONFIRMED"
    status_code = 409

    def __init__(self, status: str):
        super().__init__(f"Order must be confirmed before payment (current state: '{status}')", {"status": status})
        self.status = status


class OrderAlreadyConfirmed(OrderingError):
    code = "ORDER_ALREADY_CONFIRMED"
    status_code = 409

    def __init__(self, status: str):
        super().__init__(f"Order has already been confirmed (current state: '{status}')", {"status": status})
        self.status = status


# ---------------------------------------------------------------------------
# Cart rules
# ---------------------------------------------------------------------------
class DraftOrderAlreadyExists(OrderingError):
    code = "DRAFT_ORDER_ALREADY_EXISTS"
    status_code = 409

    def __init__(self):
        super().__init__("An active cart already exists for this user")


class NoDraftOrder(OrderingError):
    code = "NO_DRAFT_ORDER"
    status_code = 404

    def __init__(self):
        super().__init__("No active cart found. Please add items to start a new cart.")


class OrderNotDraft(OrderingError):
    code = "ORDER_NOT_DRAFT"
    status_code = 409

    def __init__(self, status: str):
        super().__init__(f"Order is not a cart and its items cannot be changed (current state: '{status}')")
        self.status = status


class OrderItemNotFound(OrderingError):
    code = "ORDER_ITEM_NOT_FOUND"
    status_code = 404

    def __init__(self, product_id: str):
        super().__init__(f"Product '{product_id}' is not in the cart", {"product_id": product_id})
        self.product_id = product_id


class InvalidQuantity(OrderingError):
    code = "INVALID_QUANTITY"
    status_code = 400

    def __init__(self, quantity):
        super().__init__(f"Quantity must be a positive integer, got {quantity!r}")
        self.quantity = quantity


class EmptyCart(OrderingError):
    code = "EMPTY_CART"
    status_code = 409

    def __init__(self):
        super().__init__("Cannot check out an empty cart")
