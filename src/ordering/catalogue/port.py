"""Catalogue lookup port.

Ordering reads products from the catalogue but never owns them. Adapters
return a ``CatalogueProduct`` snapshot or raise ``ProductNotFound``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CatalogueProduct:
    """What the cart needs to know about a product at the moment it is added."""

    id: str
    name: str
    price: Decimal  # major units, e.g. Decimal("25.00")
    currency: str
    requires_prescription: bool = False
    is_active: bool = True


class CatalogueLookup(ABC):
    @abstractmethod
    def get_product_by_id(self, product_id: str) -> CatalogueProduct:
        """Return the product or raise ``ProductNotFound``."""
        ...
