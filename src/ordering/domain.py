"""Ordering bounded context for the pharmacy storefront.

Models a shopping cart as a DRAFT order, the status state machine that governs
an order's lifecycle, and the checkout that turns a draft into a confirmed
commitment.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
