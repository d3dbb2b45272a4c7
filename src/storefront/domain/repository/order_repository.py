"""Abstract repository for the Order aggregate.

Implementations must honor these storage rules:

* ``save`` assigns the id of a new order (``order.id is None``).
* ``tracking_number`` is unique across all orders.
* ``save`` is a compare-and-swap on ``Order.version``: saving an order whose
  version no longer matches the stored copy raises ``ConcurrencyError``.
  A successful save bumps the version.

Listings are returned newest ``order_datetime`` first.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from storefront.domain.model.order import Order
from storefront.domain.model.status import OrderStatus
from storefront.domain.repository.paging import Page, PageRequest


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_tracking_number(self, tracking_number: str) -> Order | None:
        """Return an order by its tracking number, or None if not found."""

    def tracking_number_exists(self, tracking_number: str) -> bool:
        return self.get_by_tracking_number(tracking_number) is not None

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order (version-checked)."""

    @abstractmethod
    def search(self, keyword: str | None, request: PageRequest) -> Page[Order]:
        """All orders, optionally filtered by tracking number or address text."""

    @abstractmethod
    def find_by_customer(self, customer_id: str, request: PageRequest) -> Page[Order]:
        """Orders placed by a customer."""

    @abstractmethod
    def find_by_status(self, status: OrderStatus, request: PageRequest) -> Page[Order]:
        """Orders whose order-level status is *status*."""

    @abstractmethod
    def find_by_merchant(self, merchant_id: str, request: PageRequest) -> Page[Order]:
        """Orders containing at least one line item sold by *merchant_id*."""

    @abstractmethod
    def find_by_date_range(
        self, start: datetime, end: datetime, request: PageRequest
    ) -> Page[Order]:
        """Orders placed between *start* and *end*, both inclusive."""
