"""Abstract access to customers' shopping carts."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import CartItem


class CartRepository(ABC):

    @abstractmethod
    def list_items(self, customer_id: str) -> list[CartItem]:
        """Return the customer's cart lines (empty list if none)."""

    @abstractmethod
    def clear(self, customer_id: str) -> None:
        """Remove every line from the customer's cart."""
