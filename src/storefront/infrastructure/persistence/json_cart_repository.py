"""JSON-file-backed implementation of CartRepository.

The file holds one record per cart line, keyed by customer.
"""

from __future__ import annotations

from pathlib import Path

from storefront.domain.model.cart import CartItem
from storefront.domain.repository.cart_repository import CartRepository
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def list_items(self, customer_id: str) -> list[CartItem]:
        return [
            CartItem(
                customer_id=raw["customer_id"],
                product_id=raw["product_id"],
                color=raw["color"],
                size=raw["size"],
                quantity=raw["quantity"],
            )
            for raw in self._file.load()
            if raw["customer_id"] == customer_id
        ]

    def clear(self, customer_id: str) -> None:
        with self._file.locked():
            remaining = [r for r in self._file.load() if r["customer_id"] != customer_id]
            self._file.persist(remaining)
