"""Domain service: stock allocation at checkout.

Takes stock out of each product variant named by the cart.  Works in two
phases so a cart that fails on its last line leaves every variant
untouched:

  Phase 1: load and validate: every product exists, every variant
            exists, and every variant has enough stock.
  Phase 2: mutate and persist: decrement each variant and save the
            product.

Nothing is compensated if Phase 2 (or anything after it) fails part-way.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.cart import CartItem
from storefront.domain.model.product import Product, ProductVariant
from storefront.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Allocation:
    """A cart line paired with the product and variant that will fill it."""

    cart_item: CartItem
    product: Product
    variant: ProductVariant


class StockAllocationService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def allocate(self, cart_items: list[CartItem]) -> list[Allocation]:
        allocations = self._validate(cart_items)
        self._commit(allocations)
        return allocations

    def _validate(self, cart_items: list[CartItem]) -> list[Allocation]:
        allocations: list[Allocation] = []
        # Products are shared across lines so repeated products see the
        # running demand, not just their own line.
        products: dict[str, Product] = {}
        demand: dict[tuple[str, int], int] = {}

        for line in cart_items:
            if line.quantity <= 0:
                raise ValidationError(
                    f"Cart quantity for product {line.product_id} must be positive"
                )
            product = products.get(line.product_id)
            if product is None:
                product = self._product_repo.get_by_id(line.product_id)
                if product is None:
                    raise EntityNotFoundError(
                        f"Product not found with ID: {line.product_id}"
                    )
                products[line.product_id] = product

            variant = product.find_variant(line.color, line.size)
            if variant is None:
                raise ValidationError(
                    f"No variant of '{product.name}' with color "
                    f"'{line.color}' and size '{line.size}'"
                )

            key = (product.id, id(variant))
            demand[key] = demand.get(key, 0) + line.quantity
            if demand[key] > variant.stock_quantity:
                raise ValidationError(
                    f"Not enough stock for '{product.name}' "
                    f"({line.color}/{line.size}): need {demand[key]}, "
                    f"have {variant.stock_quantity}"
                )
            allocations.append(Allocation(line, product, variant))

        return allocations

    def _commit(self, allocations: list[Allocation]) -> None:
        touched: dict[str, Product] = {}
        for allocation in allocations:
            allocation.variant.decrement(allocation.cart_item.quantity)
            touched[allocation.product.id] = allocation.product
            logger.debug(
                "Stock decremented",
                product_id=allocation.product.id,
                color=allocation.variant.color,
                size=allocation.variant.size,
                quantity=allocation.cart_item.quantity,
                remaining=allocation.variant.stock_quantity,
            )
        for product in touched.values():
            self._product_repo.save(product)
