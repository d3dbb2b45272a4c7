"""Abstract access to customers' saved shipping addresses."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.address import ShippingAddress


class AddressBook(ABC):

    @abstractmethod
    def get_address(self, customer_id: str, address_id: str) -> ShippingAddress | None:
        """Return one of the customer's saved addresses, or None."""
