"""In-memory catalogue for development and testing.

Products are registered at runtime; every lookup is recorded in ``calls`` so
tests can assert on what the cart asked for.
"""

from decimal import Decimal

from ordering.catalogue.port import CatalogueLookup, CatalogueProduct
from ordering.exceptions import ProductNotFound
from ordering.shared.money import DEFAULT_CURRENCY


class InMemoryCatalogue(CatalogueLookup):
    def __init__(self) -> None:
        self.products: dict[str, CatalogueProduct] = {}
        self.calls: list[str] = []

    def add_product(
        self,
        product_id: str,
        name: str,
        price,
        currency: str = DEFAULT_CURRENCY,
        requires_prescription: bool = False,
        is_active: bool = True,
    ) -> CatalogueProduct:
        product = CatalogueProduct(
            id=product_id,
            name=name,
            price=Decimal(str(price)),
            currency=currency,
            requires_prescription=requires_prescription,
            is_active=is_active,
        )
        self.products[product_id] = product
        return product

    def change_price(self, product_id: str, price) -> None:
        product = self.products[product_id]
        self.add_product(
            product.id,
            product.name,
            price,
            currency=product.currency,
            requires_prescription=product.requires_prescription,
            is_active=product.is_active,
        )

    def deactivate(self, product_id: str) -> None:
        product = self.products[product_id]
        self.add_product(
            product.id,
            product.name,
            product.price,
            currency=product.currency,
            requires_prescription=product.requires_prescription,
            is_active=False,
        )

    def get_product_by_id(self, product_id: str) -> CatalogueProduct:
        self.calls.append(product_id)
        try:
            return self.products[product_id]
        except KeyError:
            raise ProductNotFound(product_id) from None
