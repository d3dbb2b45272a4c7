"""Abstract repository for the Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  The catalog owns products; checkout only reads them and
writes back stock changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""
