"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.cancel_line_item import CancelLineItemHandler
from storefront.application.cancel_order import CancelOrderHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.dto import OrderBriefDTO, OrderDTO, OrderMerchantDTO
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.update_line_item_status import UpdateLineItemStatusHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.order import PaymentMethod
from storefront.domain.model.status import OrderStatus
from storefront.domain.repository.paging import PageRequest
from storefront.infrastructure.bootstrap import (
    action_log_repository,
    address_book,
    cart_repository,
    order_repository,
    pricing_engine,
    product_repository,
    settings,
)

_order_id = click.option("--id", "order_id", required=True, help="Order ID.")
_actor = click.option("--actor", required=True, help="ID of the user making the change.")


def _variant_options(func):
    func = click.option("--size", required=True, help="Variant size.")(func)
    func = click.option("--color", required=True, help="Variant color.")(func)
    func = click.option("--product", "product_id", required=True, help="Product ID.")(func)
    return func


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    address = dto.shipping_address
    click.echo(f"Order #{dto.id}  {dto.tracking_number}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_id}   Payment: {dto.payment_method}")
    click.echo(f"Placed:   {dto.ordered_at}   Delivery by: {dto.delivery_date}")
    click.echo(f"Ship to:  {address.address_line1}, {address.city}, {address.country}")
    click.echo()
    click.echo(
        f"  {'Product':<20} {'Variant':<14} {'Qty':>4} {'Price':>10} "
        f"{'Subtotal':>10}  {'Status':<10}"
    )
    click.echo(f"  {'-'*74}")
    for item in dto.items:
        variant = f"{item.color}/{item.size}"
        click.echo(
            f"  {item.product_name:<20} {variant:<14} {item.quantity:>4} "
            f"{item.unit_price:>10} {item.subtotal:>10}  {item.track.status:<10}"
        )
    click.echo(f"  {'-'*74}")
    for label, value in (
        ("Subtotal", dto.subtotal),
        ("Shipping", dto.shipping_cost),
        ("Tax", dto.tax),
        ("Order Total", dto.total),
    ):
        click.echo(f"  {label:<27} {value:>20}")


def _display_brief(dto: OrderBriefDTO) -> None:
    click.echo(
        f"{dto.id:<6} {dto.tracking_number:<12} {dto.customer_id:<12} "
        f"{dto.status:<11} {dto.item_count:>5} {dto.total:>11}  {dto.ordered_at}"
    )


def _display_merchant_line(dto: OrderMerchantDTO) -> None:
    item = dto.item
    click.echo(
        f"{dto.order_id:<6} {dto.tracking_number:<12} {item.product_name:<20} "
        f"{item.color}/{item.size:<10} {item.quantity:>4} {item.subtotal:>10}  "
        f"{item.track.status}"
    )


@click.command("checkout")
@click.option("--customer", required=True, help="Customer ID.")
@click.option("--address", "address_id", required=True, help="Saved address ID to ship to.")
@click.option("--payment", default="CASH_ON_DELIVERY", show_default=True,
              help="Payment method (CARD or CASH_ON_DELIVERY).")
def order_checkout(customer: str, address_id: str, payment: str) -> None:
    """Turn the customer's cart into an order."""
    handler = CreateOrderHandler(
        order_repo=order_repository(),
        cart_repo=cart_repository(),
        product_repo=product_repository(),
        address_book=address_book(),
        action_log_repo=action_log_repository(),
        pricing=pricing_engine(),
        delivery_days=settings().delivery_days,
    )

    try:
        dto = handler.handle(
            customer_id=customer,
            address_id=address_id,
            payment_method=PaymentMethod.parse(payment),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} created  (tracking number {dto.tracking_number})")
    click.echo()
    _display_order(dto)


@click.command("show")
@_order_id
def order_show(order_id: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("track")
@click.argument("tracking_number")
def order_track(tracking_number: str) -> None:
    """Look up an order by its tracking number."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.by_tracking_number(tracking_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{dto.tracking_number}: {dto.status}")
    click.echo(f"  Items: {dto.item_count}   Total: {dto.total}")
    click.echo(f"  Placed {dto.ordered_at}, delivery by {dto.delivery_date}")


@click.command("list")
@click.option("--customer", default=None, help="Only orders of this customer.")
@click.option("--status", default=None, help="Only orders in this status.")
@click.option("--merchant", default=None, help="Line items sold by this merchant.")
@click.option("--from", "start", type=click.DateTime(), default=None, help="Placed on or after.")
@click.option("--to", "end", type=click.DateTime(), default=None, help="Placed on or before.")
@click.option("--keyword", default=None, help="Search tracking numbers and addresses.")
@click.option("--page", default=1, show_default=True, type=int)
@click.option("--size", default=10, show_default=True, type=int)
def order_list(customer, status, merchant, start, end, keyword, page, size) -> None:
    """List orders."""
    handler = ListOrdersHandler(order_repo=order_repository())

    if (start is None) != (end is None):
        raise click.BadParameter("--from and --to must be given together")

    try:
        request = PageRequest(page=page, size=size)
        if merchant:
            result = handler.by_merchant(merchant, request)
            for row in result.items:
                _display_merchant_line(row)
        else:
            if start is not None:
                result = handler.by_date_range(start, end, request)
            elif customer:
                result = handler.by_customer(customer, request)
            elif status:
                result = handler.by_status(OrderStatus.parse(status), request)
            else:
                result = handler.all(request, keyword=keyword)
            for dto in result.items:
                _display_brief(dto)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"-- page {result.page} of {result.total_pages} ({result.total_items} orders)"
    )


@click.command("cancel")
@_order_id
@_actor
@click.option("--notes", default="", help="Reason for cancelling.")
def order_cancel(order_id: str, actor: str, notes: str) -> None:
    """Cancel a whole order."""
    handler = CancelOrderHandler(
        order_repo=order_repository(),
        action_log_repo=action_log_repository(),
    )

    try:
        handler.handle(actor, order_id, notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} cancelled.")


@click.command("cancel-item")
@_order_id
@_variant_options
@_actor
@click.option("--notes", default="", help="Reason for cancelling.")
def order_cancel_item(
    order_id: str, product_id: str, color: str, size: str, actor: str, notes: str
) -> None:
    """Cancel one product variant within an order."""
    handler = CancelLineItemHandler(
        order_repo=order_repository(),
        action_log_repo=action_log_repository(),
        pricing=pricing_engine(),
    )

    try:
        dto = handler.handle(actor, order_id, product_id, color, size, notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} ({color}/{size}) removed from order #{order_id}.")
    click.echo(f"New total: {dto.total}  (status={dto.status})")


@click.command("set-status")
@_order_id
@click.option("--status", required=True, help="New order status.")
@_actor
@click.option("--notes", default="", help="Notes for the change.")
def order_set_status(order_id: str, status: str, actor: str, notes: str) -> None:
    """Set the status of an order and all its live items."""
    handler = UpdateOrderStatusHandler(
        order_repo=order_repository(),
        action_log_repo=action_log_repository(),
    )

    try:
        dto = handler.handle(actor, order_id, OrderStatus.parse(status), notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} is now {dto.status}.")


@click.command("set-item-status")
@_order_id
@_variant_options
@click.option("--status", required=True, help="New line item status.")
@_actor
@click.option("--notes", default="", help="Notes for the change.")
def order_set_item_status(
    order_id: str,
    product_id: str,
    color: str,
    size: str,
    status: str,
    actor: str,
    notes: str,
) -> None:
    """Set the status of one product variant within an order."""
    handler = UpdateLineItemStatusHandler(
        order_repo=order_repository(),
        action_log_repo=action_log_repository(),
    )

    try:
        dto = handler.handle(
            actor, order_id, product_id, color, size, OrderStatus.parse(status), notes
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item {product_id} ({color}/{size}) updated; order #{order_id} is now {dto.status}.")
