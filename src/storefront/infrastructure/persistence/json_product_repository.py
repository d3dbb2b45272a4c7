"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from storefront.domain.model.product import Product, ProductVariant
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._file.load():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def save(self, product: Product) -> None:
        with self._file.locked():
            records = self._file.load()
            for i, raw in enumerate(records):
                if raw["id"] == product.id:
                    records[i] = self._to_raw(product)
                    break
            else:
                records.append(self._to_raw(product))
            self._file.persist(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "merchant_id": product.merchant_id,
            "name": product.name,
            "price": str(product.price.amount),
            "discount_price": (
                str(product.discount_price.amount) if product.discount_price else None
            ),
            "shipping_cost": str(product.shipping_cost.amount),
            "currency": product.price.currency,
            "variants": [
                {"color": v.color, "size": v.size, "stock_quantity": v.stock_quantity}
                for v in product.variants
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        currency = raw.get("currency", "USD")
        discount = raw.get("discount_price")
        return Product(
            id=raw["id"],
            merchant_id=raw["merchant_id"],
            name=raw["name"],
            price=Money(Decimal(raw["price"]), currency),
            discount_price=Money(Decimal(discount), currency) if discount else None,
            shipping_cost=Money(Decimal(raw.get("shipping_cost", "0")), currency),
            variants=[
                ProductVariant(
                    color=v["color"],
                    size=v["size"],
                    stock_quantity=v["stock_quantity"],
                )
                for v in raw.get("variants", [])
            ],
        )
