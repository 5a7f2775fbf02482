"""Order line items.

A line copies the product name and unit price at the moment it is added, so
later catalogue changes never reach an existing cart line. Lines are treated
as immutable values: a quantity change produces a new line.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, ValueObject

from ordering.domain import ordering
from ordering.shared.money import Money


@ordering.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    unit_price = ValueObject(Money, required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()

    @property
    def subtotal(self) -> Money:
        return calculate_item_subtotal(self)


def _validate_quantity(quantity) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError({"quantity": ["Quantity must be an integer"]})
    if quantity <= 0:
        raise ValidationError({"quantity": ["Quantity must be greater than 0"]})


def create_order_item(product_id, product_name, unit_price: Money, quantity: int, now: datetime | None = None):
    """Validate the inputs and build a line, snapshotting name and price."""
    errors = {}
    if not product_id or not str(product_id).strip():
        errors["product_id"] = ["Product ID cannot be empty"]
    if not product_name or not str(product_name).strip():
        errors["product_name"] = ["Product name cannot be empty"]
    if errors:
        raise ValidationError(errors)
    _validate_quantity(quantity)

    return OrderItem(
        product_id=str(product_id).strip(),
        product_name=str(product_name).strip(),
        unit_price=Money(amount=unit_price.amount, currency=unit_price.currency),
        quantity=quantity,
        added_at=now or datetime.now(UTC),
    )


def update_order_item_quantity(item, new_quantity: int):
    """Return a new line with ``new_quantity``; name, price and ``added_at`` carry over."""
    _validate_quantity(new_quantity)
    return OrderItem(
        product_id=item.product_id,
        product_name=item.product_name,
        unit_price=item.unit_price,
        quantity=new_quantity,
        added_at=item.added_at,
    )


def calculate_item_subtotal(item) -> Money:
    return item.unit_price.multiply(item.quantity)


def item_summary(item) -> dict:
    """Plain rendering of a line for event payloads."""
    return {
        "product_id": str(item.product_id),
        "product_name": item.product_name,
        "quantity": item.quantity,
        "subtotal": {"amount": item.subtotal.amount, "currency": item.subtotal.currency},
    }
