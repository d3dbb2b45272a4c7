"""A line in a customer's shopping cart (read-only view used at checkout)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CartItem:
    customer_id: str
    product_id: str
    color: str
    size: str
    quantity: int
