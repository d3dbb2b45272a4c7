"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items (``OrderDetail``)
and each line's fulfillment track.  The order-level status and the
per-line statuses move independently; the rules that tie them together
live in the transition methods below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import TYPE_CHECKING

from storefront.domain.exceptions import (
    EntityNotFoundError,
    InvalidStateError,
    ValidationError,
)
from storefront.domain.model.address import ShippingAddress
from storefront.domain.model.status import (
    OrderStatus,
    Transition,
    aggregate_status,
    is_allowed,
    is_update_target,
)
from storefront.domain.model.value_objects import Money, Quantity

if TYPE_CHECKING:
    from storefront.domain.service.pricing import OrderTotals, PricingEngine


class PaymentMethod(Enum):
    CARD = "CARD"
    CASH_ON_DELIVERY = "CASH_ON_DELIVERY"

    @classmethod
    def parse(cls, raw: str) -> PaymentMethod:
        try:
            return cls(raw.strip().upper())
        except ValueError as exc:
            raise ValidationError(f"Unknown payment method '{raw}'") from exc


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _today() -> date:
    return _now().date()


@dataclass
class OrderTrack:
    """Fulfillment status of a single line item."""

    status: OrderStatus
    updated_on: date
    notes: str = ""


@dataclass
class OrderDetail:
    """One product variant within an order.

    ``price`` and ``shipping_cost`` are snapshots taken at checkout, so
    later catalog changes never alter what a historical order was billed.
    """

    merchant_id: str
    product_id: str
    product_name: str
    quantity: Quantity
    color: str
    size: str
    price: Money  # unit price, locked at checkout
    shipping_cost: Money
    track: OrderTrack

    @property
    def subtotal(self) -> Money:
        return self.price * self.quantity.value

    @property
    def is_cancelled(self) -> bool:
        return self.track.status is OrderStatus.CANCELLED

    def matches(self, product_id: str, color: str, size: str) -> bool:
        return (
            self.product_id == product_id
            and self.color.lower() == color.lower()
            and self.size.lower() == size.lower()
        )


DEFAULT_DELIVERY_DAYS = 2


@dataclass
class Order:
    """Aggregate root for committed checkouts.

    Use ``Order.create()`` for new orders.  The ``__init__`` is kept plain
    so repositories can reconstitute persisted orders without re-running
    the checkout rules.
    """

    id: str | None
    tracking_number: str
    customer_id: str
    payment_method: PaymentMethod
    shipping_address: ShippingAddress
    items: list[OrderDetail]
    products_cost: Money = field(default_factory=Money.zero)
    subtotal: Money = field(default_factory=Money.zero)
    shipping_cost: Money = field(default_factory=Money.zero)
    tax: Money = field(default_factory=Money.zero)
    total: Money = field(default_factory=Money.zero)
    status: OrderStatus = OrderStatus.NEW
    order_datetime: datetime = field(default_factory=_now)
    delivery_days: int = DEFAULT_DELIVERY_DAYS
    delivery_date: date | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    version: int = 0

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        tracking_number: str,
        customer_id: str,
        payment_method: PaymentMethod,
        shipping_address: ShippingAddress,
        items: list[OrderDetail],
        pricing: PricingEngine,
        delivery_days: int = DEFAULT_DELIVERY_DAYS,
    ) -> Order:
        if not customer_id:
            raise ValidationError("Customer id is required")
        if not items:
            raise ValidationError("Order must contain at least one item")

        now = _now()
        order = Order(
            id=None,
            tracking_number=tracking_number,
            customer_id=customer_id,
            payment_method=payment_method,
            shipping_address=shipping_address,
            items=list(items),
            order_datetime=now,
            delivery_days=delivery_days,
            delivery_date=now.date() + timedelta(days=delivery_days),
            created_at=now,
            updated_at=now,
        )
        order.apply_totals(pricing.price_new_order(order.items))
        return order

    # --- State transitions ----------------------------------------------------

    def update_status(self, status: OrderStatus) -> None:
        """Set the order and every live line item to *status*.

        Cancelled lines keep their CANCELLED track.
        """
        self._check_update_target(status)
        self.status = status
        for item in self.live_items:
            item.track.status = status
        self._touch()

    def update_line_status(
        self,
        product_id: str,
        color: str,
        size: str,
        status: OrderStatus,
        notes: str,
    ) -> OrderDetail:
        """Move one line item to *status* and re-derive the order status."""
        self._check_update_target(status)
        item = self.find_item(product_id, color, size)
        if item.is_cancelled:
            raise InvalidStateError(
                f"Line item {product_id} ({color}/{size}) is already cancelled"
            )
        item.track.status = status
        item.track.notes = notes
        item.track.updated_on = _today()

        self.status = aggregate_status([i.track.status for i in self.live_items])
        self._touch()
        return item

    def cancel(self, notes: str) -> None:
        """Cancel the whole order.

        The track's ``updated_on`` is left as it was.  With no live line
        left, subtotal, shipping, tax and total drop to zero;
        ``products_cost`` is kept.
        """
        if self.status is OrderStatus.CANCELLED:
            raise InvalidStateError(f"Order {self.id} is already cancelled")
        if not is_allowed(self.status, OrderStatus.CANCELLED, Transition.CANCEL):
            raise InvalidStateError(
                f"Order {self.id} cannot be cancelled after it has been "
                f"{self.status.value.lower()}"
            )
        self.status = OrderStatus.CANCELLED
        for item in self.live_items:
            item.track.status = OrderStatus.CANCELLED
            item.track.notes = notes
        self.subtotal = Money.zero()
        self.shipping_cost = Money.zero()
        self.tax = Money.zero()
        self.total = Money.zero()
        self._touch()

    def cancel_line(
        self,
        product_id: str,
        color: str,
        size: str,
        notes: str,
        pricing: PricingEngine,
    ) -> OrderDetail:
        """Cancel one line item and recompute the order's money fields."""
        item = self.find_item(product_id, color, size)
        if item.is_cancelled:
            raise InvalidStateError(
                f"Line item {product_id} ({color}/{size}) is already cancelled"
            )
        if not is_allowed(self.status, OrderStatus.CANCELLED, Transition.CANCEL):
            raise InvalidStateError(
                f"Cannot cancel items of order {self.id} in {self.status.value} status"
            )

        item.track.status = OrderStatus.CANCELLED
        item.track.notes = notes
        self.apply_totals(pricing.recompute_after_cancellation(self, item))

        if all(i.is_cancelled for i in self.items):
            self.status = OrderStatus.CANCELLED
        self._touch()
        return item

    # --- Pricing --------------------------------------------------------------

    def apply_totals(self, totals: OrderTotals) -> None:
        self.products_cost = totals.products_cost
        self.subtotal = totals.subtotal
        self.shipping_cost = totals.shipping_cost
        self.tax = totals.tax
        self.total = totals.total

    # --- Queries --------------------------------------------------------------

    @property
    def live_items(self) -> list[OrderDetail]:
        """Line items that have not been cancelled."""
        return [item for item in self.items if not item.is_cancelled]

    @property
    def merchant_ids(self) -> set[str]:
        return {item.merchant_id for item in self.items}

    def find_item(self, product_id: str, color: str, size: str) -> OrderDetail:
        for item in self.items:
            if item.matches(product_id, color, size):
                return item
        raise EntityNotFoundError(
            f"Product {product_id} ({color}/{size}) not found in order {self.id}"
        )

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _check_update_target(status: OrderStatus) -> None:
        if not is_update_target(status):
            raise ValidationError(
                "Order status cannot be set to CANCELLED here; "
                "use the cancellation operations"
            )

    def _touch(self) -> None:
        self.updated_at = _now()
