"""Domain service: order pricing.

Computes the money fields of an order at checkout and recomputes them when
a single line item is cancelled.  The two paths use separate tax rates;
see ``PricingPolicy``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from storefront.domain.model.value_objects import Money

if TYPE_CHECKING:
    from storefront.domain.model.order import Order, OrderDetail


@dataclass(frozen=True)
class PricingPolicy:
    creation_tax_rate: Decimal = Decimal("0.08")
    cancellation_tax_rate: Decimal = Decimal("0.10")
    free_shipping_threshold: Money = Money(Decimal("100"))


@dataclass(frozen=True)
class OrderTotals:
    products_cost: Money
    subtotal: Money
    shipping_cost: Money
    tax: Money
    total: Money


class PricingEngine:

    def __init__(self, policy: PricingPolicy | None = None) -> None:
        self._policy = policy or PricingPolicy()

    @property
    def policy(self) -> PricingPolicy:
        return self._policy

    def price_new_order(self, items: list[OrderDetail]) -> OrderTotals:
        """Totals for a freshly assembled order.

        ``products_cost`` sums unit prices without weighting by quantity.
        Shipping is waived once the subtotal exceeds the free-shipping
        threshold.
        """
        products_cost = Money.zero()
        subtotal = Money.zero()
        shipping_cost = Money.zero()
        for item in items:
            products_cost = products_cost + item.price
            subtotal = subtotal + item.subtotal
            shipping_cost = shipping_cost + item.shipping_cost

        if subtotal > self._policy.free_shipping_threshold:
            shipping_cost = Money.zero()

        tax = (subtotal * self._policy.creation_tax_rate).rounded()
        return OrderTotals(
            products_cost=products_cost,
            subtotal=subtotal,
            shipping_cost=shipping_cost,
            tax=tax,
            total=subtotal + shipping_cost + tax,
        )

    def recompute_after_cancellation(
        self, order: Order, cancelled: OrderDetail
    ) -> OrderTotals:
        """Totals after *cancelled* has been dropped from *order*.

        ``products_cost`` is carried over unchanged.  Shipping never drops
        below zero: it may already have been waived at checkout.
        """
        subtotal = order.subtotal - cancelled.subtotal
        if cancelled.shipping_cost <= order.shipping_cost:
            shipping_cost = order.shipping_cost - cancelled.shipping_cost
        else:
            shipping_cost = Money.zero()

        tax = (subtotal * self._policy.cancellation_tax_rate).rounded()
        return OrderTotals(
            products_cost=order.products_cost,
            subtotal=subtotal,
            shipping_cost=shipping_cost,
            tax=tax,
            total=subtotal + shipping_cost + tax,
        )
