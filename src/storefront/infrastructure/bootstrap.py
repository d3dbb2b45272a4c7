"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from storefront.domain.service.pricing import PricingEngine
from storefront.infrastructure.config import Settings, load_settings
from storefront.infrastructure.persistence.json_action_log_repository import (
    JsonActionLogRepository,
)
from storefront.infrastructure.persistence.json_address_book import JsonAddressBook
from storefront.infrastructure.persistence.json_cart_repository import (
    JsonCartRepository,
)
from storefront.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


@lru_cache(maxsize=1)
def settings() -> Settings:
    return load_settings()


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(settings().data_dir / "orders.json")


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(settings().data_dir / "products.json")


def cart_repository() -> JsonCartRepository:
    return JsonCartRepository(settings().data_dir / "carts.json")


def address_book() -> JsonAddressBook:
    return JsonAddressBook(settings().data_dir / "addresses.json")


def action_log_repository() -> JsonActionLogRepository:
    return JsonActionLogRepository(settings().data_dir / "action_logs.json")


def pricing_engine() -> PricingEngine:
    return PricingEngine(settings().pricing_policy)
