"""Product aggregate, as seen by checkout.

Products belong to the catalog and live independently of orders.  Each
product sells in one or more variants (a color/size combination), and the
stock count is kept per variant.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


@dataclass
class ProductVariant:
    color: str
    size: str
    stock_quantity: int

    def matches(self, color: str, size: str) -> bool:
        return (
            self.color.lower() == color.lower()
            and self.size.lower() == size.lower()
        )

    def decrement(self, quantity: int) -> None:
        """Take *quantity* units out of stock."""
        if quantity <= 0:
            raise ValidationError("Stock decrement must be positive")
        if quantity > self.stock_quantity:
            raise ValidationError(
                f"Not enough stock for {self.color}/{self.size} "
                f"(need {quantity}, have {self.stock_quantity})"
            )
        self.stock_quantity -= quantity


@dataclass
class Product:
    """A product in the catalog.

    ``price`` is the list price; ``discount_price`` overrides it when set
    to a positive amount.
    """

    id: str
    merchant_id: str
    name: str
    price: Money
    shipping_cost: Money
    discount_price: Money | None = None
    variants: list[ProductVariant] = field(default_factory=list)

    @property
    def selling_price(self) -> Money:
        if self.discount_price is not None and not self.discount_price.is_zero:
            return self.discount_price
        return self.price

    def find_variant(self, color: str, size: str) -> ProductVariant | None:
        for variant in self.variants:
            if variant.matches(color, size):
                return variant
        return None
