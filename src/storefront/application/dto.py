"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Money is rendered as
display strings, dates as ISO strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from storefront.domain.model.address import ShippingAddress
from storefront.domain.model.order import Order, OrderDetail
from storefront.domain.repository.paging import Page

T = TypeVar("T")

DATETIME_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class OrderTrackDTO:
    status: str
    updated_on: str
    notes: str


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    merchant_id: str
    product_id: str
    product_name: str
    color: str
    size: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    shipping_cost: str
    subtotal: str
    track: OrderTrackDTO


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    tracking_number: str
    customer_id: str
    status: str
    payment_method: str
    shipping_address: ShippingAddress
    items: list[OrderLineItemDTO]
    products_cost: str
    subtotal: str
    shipping_cost: str
    tax: str
    total: str
    delivery_days: int
    delivery_date: str
    ordered_at: str


@dataclass(frozen=True)
class OrderBriefDTO:
    """Output: one row of an order listing."""

    id: str
    tracking_number: str
    customer_id: str
    status: str
    item_count: int
    total: str
    delivery_days: int
    delivery_date: str
    ordered_at: str


@dataclass(frozen=True)
class OrderMerchantDTO:
    """Output: one line item of an order, as seen by the merchant selling it."""

    order_id: str
    tracking_number: str
    customer_id: str
    payment_method: str
    shipping_address: ShippingAddress
    delivery_date: str
    ordered_at: str
    item: OrderLineItemDTO


@dataclass(frozen=True)
class PageDTO(Generic[T]):
    items: list[T]
    page: int
    total_items: int
    total_pages: int


# --- Mapping ------------------------------------------------------------------


def line_item_to_dto(item: OrderDetail) -> OrderLineItemDTO:
    return OrderLineItemDTO(
        merchant_id=item.merchant_id,
        product_id=item.product_id,
        product_name=item.product_name,
        color=item.color,
        size=item.size,
        quantity=item.quantity.value,
        unit_price=str(item.price),
        shipping_cost=str(item.shipping_cost),
        subtotal=str(item.subtotal),
        track=OrderTrackDTO(
            status=item.track.status.value,
            updated_on=item.track.updated_on.isoformat(),
            notes=item.track.notes,
        ),
    )


def _delivery_date(order: Order) -> str:
    return order.delivery_date.isoformat() if order.delivery_date else ""


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        tracking_number=order.tracking_number,
        customer_id=order.customer_id,
        status=order.status.value,
        payment_method=order.payment_method.value,
        shipping_address=order.shipping_address,
        items=[line_item_to_dto(item) for item in order.items],
        products_cost=str(order.products_cost),
        subtotal=str(order.subtotal),
        shipping_cost=str(order.shipping_cost),
        tax=str(order.tax),
        total=str(order.total),
        delivery_days=order.delivery_days,
        delivery_date=_delivery_date(order),
        ordered_at=order.order_datetime.strftime(DATETIME_FORMAT),
    )


def order_to_brief(order: Order) -> OrderBriefDTO:
    return OrderBriefDTO(
        id=order.id,  # type: ignore[arg-type]
        tracking_number=order.tracking_number,
        customer_id=order.customer_id,
        status=order.status.value,
        item_count=len(order.items),
        total=str(order.total),
        delivery_days=order.delivery_days,
        delivery_date=_delivery_date(order),
        ordered_at=order.order_datetime.strftime(DATETIME_FORMAT),
    )


def merchant_lines(order: Order, merchant_id: str) -> list[OrderMerchantDTO]:
    return [
        OrderMerchantDTO(
            order_id=order.id,  # type: ignore[arg-type]
            tracking_number=order.tracking_number,
            customer_id=order.customer_id,
            payment_method=order.payment_method.value,
            shipping_address=order.shipping_address,
            delivery_date=_delivery_date(order),
            ordered_at=order.order_datetime.strftime(DATETIME_FORMAT),
            item=line_item_to_dto(item),
        )
        for item in order.items
        if item.merchant_id == merchant_id
    ]


def page_to_dto(page: Page[Order], mapper) -> PageDTO:
    return PageDTO(
        items=[mapper(order) for order in page.items],
        page=page.page,
        total_items=page.total_items,
        total_pages=page.total_pages,
    )
