"""Pydantic request/response schemas for the Ordering API.

These are the external contracts. Responses are built from the read-side
views in ``ordering.order.queries`` rather than from aggregates directly.
"""

import dataclasses
import json
from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class MoneySchema(BaseModel):
    amount: int = Field(description="Amount in minor units, e.g. paise")
    currency: str


class OrderLineSchema(BaseModel):
    product_id: str
    product_name: str
    unit_price: MoneySchema
    quantity: int
    subtotal: MoneySchema
    added_at: datetime | None = None


class PrescriptionSchema(BaseModel):
    id: str
    status: str
    rejection_reason: str | None = None


class ConsultationSchema(BaseModel):
    id: str
    status: str


class ComplianceSchema(BaseModel):
    requires_prescription: bool = True
    status: str
    prescriptions: list[PrescriptionSchema] = []
    consultations: list[ConsultationSchema] = []


class EventLineSchema(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    subtotal: MoneySchema


class EventSchema(BaseModel):
    type: str
    order_id: str
    user_id: str
    total: MoneySchema
    item_count: int
    items: list[EventLineSchema] = []
    previous_status: str | None = None
    correlation_id: str | None = None
    occurred_at: datetime


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class AddItemRequest(BaseModel):
    product_id: str
    quantity: int = 1

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "quantity": 2,
                }
            ]
        }
    }


class UpdateItemQuantityRequest(BaseModel):
    quantity: int


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderSummaryResponse(BaseModel):
    order_id: str
    status: str
    item_count: int
    total: MoneySchema
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderDetailResponse(BaseModel):
    order_id: str
    user_id: str
    status: str
    item_count: int
    total: MoneySchema
    items: list[OrderLineSchema]
    created_at: datetime | None = None
    updated_at: datetime | None = None
    compliance: ComplianceSchema | None = None


class PaginationSchema(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


class OrderHistoryResponse(BaseModel):
    items: list[OrderSummaryResponse]
    pagination: PaginationSchema


class TransitionResponse(BaseModel):
    order: OrderDetailResponse
    events: list[EventSchema] = []


class CheckoutResponse(TransitionResponse):
    requires_prescription: bool


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
def detail_response(view) -> OrderDetailResponse:
    return OrderDetailResponse.model_validate(dataclasses.asdict(view))


def history_response(page) -> OrderHistoryResponse:
    return OrderHistoryResponse(
        items=[OrderSummaryResponse.model_validate(dataclasses.asdict(view)) for view in page.items],
        pagination=PaginationSchema(
            total=page.total,
            page=page.page,
            limit=page.limit,
            total_pages=page.total_pages,
            has_next_page=page.has_next_page,
            has_previous_page=page.has_previous_page,
        ),
    )


def event_schema(event) -> EventSchema:
    item_summary = getattr(event, "item_summary", None)
    return EventSchema(
        type=type(event).__name__,
        order_id=str(event.order_id),
        user_id=str(event.user_id),
        total=MoneySchema(amount=event.total_amount, currency=event.currency),
        item_count=event.item_count,
        items=json.loads(item_summary) if item_summary else [],
        previous_status=getattr(event, "previous_status", None),
        correlation_id=event.correlation_id,
        occurred_at=event.occurred_at,
    )


def event_schemas(events) -> list[EventSchema]:
    return [event_schema(event) for event in events]
