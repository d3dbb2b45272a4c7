"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import structlog

from storefront.domain.exceptions import ConcurrencyError, ValidationError
from storefront.domain.model.address import ShippingAddress
from storefront.domain.model.order import (
    Order,
    OrderDetail,
    OrderTrack,
    PaymentMethod,
)
from storefront.domain.model.status import OrderStatus
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.paging import Page, PageRequest
from storefront.infrastructure.persistence.json_file import JsonFile

logger = structlog.get_logger(__name__)


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: str) -> Order | None:
        for raw in self._file.load():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_tracking_number(self, tracking_number: str) -> Order | None:
        for raw in self._file.load():
            if raw["tracking_number"] == tracking_number:
                return self._to_domain(raw)
        return None

    def save(self, order: Order) -> None:
        with self._file.locked():
            orders = self._file.load()

            if order.id is None:
                if any(r["tracking_number"] == order.tracking_number for r in orders):
                    raise ValidationError(
                        f"Tracking number {order.tracking_number} is already in use"
                    )
                order.id = self._next_id(orders)
                order.version = 1
                orders.append(self._to_raw(order))
                self._file.persist(orders)
                return

            for i, raw in enumerate(orders):
                if raw["id"] != order.id:
                    continue
                if raw["version"] != order.version:
                    logger.warning(
                        "Stale order rejected",
                        order_id=order.id,
                        stored_version=raw["version"],
                        loaded_version=order.version,
                    )
                    raise ConcurrencyError(
                        f"Order {order.id} was modified concurrently; reload and retry"
                    )
                order.version += 1
                orders[i] = self._to_raw(order)
                self._file.persist(orders)
                return

            raise ConcurrencyError(f"Order {order.id} no longer exists in storage")

    def search(self, keyword: str | None, request: PageRequest) -> Page[Order]:
        if not keyword:
            return self._page(lambda o: True, request)
        needle = keyword.lower()
        return self._page(
            lambda o: needle in o.tracking_number.lower()
            or needle in o.shipping_address.searchable_text(),
            request,
        )

    def find_by_customer(self, customer_id: str, request: PageRequest) -> Page[Order]:
        return self._page(lambda o: o.customer_id == customer_id, request)

    def find_by_status(self, status: OrderStatus, request: PageRequest) -> Page[Order]:
        return self._page(lambda o: o.status is status, request)

    def find_by_merchant(self, merchant_id: str, request: PageRequest) -> Page[Order]:
        return self._page(lambda o: merchant_id in o.merchant_ids, request)

    def find_by_date_range(
        self, start: datetime, end: datetime, request: PageRequest
    ) -> Page[Order]:
        return self._page(lambda o: start <= o.order_datetime <= end, request)

    # --- Query helpers --------------------------------------------------------

    def _matching(self, predicate: Callable[[Order], bool]) -> list[Order]:
        orders = [o for o in map(self._to_domain, self._file.load()) if predicate(o)]
        orders.sort(key=lambda o: o.order_datetime, reverse=True)
        return orders

    def _page(self, predicate: Callable[[Order], bool], request: PageRequest) -> Page[Order]:
        return Page.of(self._matching(predicate), request)

    @staticmethod
    def _next_id(orders: list[dict]) -> str:
        if not orders:
            return "1"
        return str(max(int(o["id"]) for o in orders) + 1)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        address = order.shipping_address
        return {
            "id": order.id,
            "version": order.version,
            "tracking_number": order.tracking_number,
            "customer_id": order.customer_id,
            "payment_method": order.payment_method.value,
            "status": order.status.value,
            "shipping_address": {
                "address_id": address.address_id,
                "address_type": address.address_type,
                "phone_number": address.phone_number,
                "address_line1": address.address_line1,
                "address_line2": address.address_line2,
                "city": address.city,
                "state": address.state,
                "postal_code": address.postal_code,
                "country": address.country,
            },
            "products_cost": str(order.products_cost.amount),
            "subtotal": str(order.subtotal.amount),
            "shipping_cost": str(order.shipping_cost.amount),
            "tax": str(order.tax.amount),
            "total": str(order.total.amount),
            "currency": order.total.currency,
            "order_datetime": order.order_datetime.isoformat(),
            "delivery_days": order.delivery_days,
            "delivery_date": order.delivery_date.isoformat() if order.delivery_date else None,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "items": [
                {
                    "merchant_id": item.merchant_id,
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity.value,
                    "color": item.color,
                    "size": item.size,
                    "price": str(item.price.amount),
                    "shipping_cost": str(item.shipping_cost.amount),
                    "subtotal": str(item.subtotal.amount),
                    "track": {
                        "status": item.track.status.value,
                        "updated_on": item.track.updated_on.isoformat(),
                        "notes": item.track.notes,
                    },
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw.get("currency", "USD")

        def money(value: str) -> Money:
            return Money(Decimal(value), currency)

        items = [
            OrderDetail(
                merchant_id=i["merchant_id"],
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                color=i["color"],
                size=i["size"],
                price=money(i["price"]),
                shipping_cost=money(i["shipping_cost"]),
                track=OrderTrack(
                    status=OrderStatus(i["track"]["status"]),
                    updated_on=date.fromisoformat(i["track"]["updated_on"]),
                    notes=i["track"].get("notes", ""),
                ),
            )
            for i in raw["items"]
        ]
        return Order(
            id=raw["id"],
            version=raw["version"],
            tracking_number=raw["tracking_number"],
            customer_id=raw["customer_id"],
            payment_method=PaymentMethod(raw["payment_method"]),
            shipping_address=ShippingAddress(**raw["shipping_address"]),
            items=items,
            products_cost=money(raw["products_cost"]),
            subtotal=money(raw["subtotal"]),
            shipping_cost=money(raw["shipping_cost"]),
            tax=money(raw["tax"]),
            total=money(raw["total"]),
            status=OrderStatus(raw["status"]),
            order_datetime=datetime.fromisoformat(raw["order_datetime"]),
            delivery_days=raw["delivery_days"],
            delivery_date=(
                date.fromisoformat(raw["delivery_date"]) if raw.get("delivery_date") else None
            ),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
