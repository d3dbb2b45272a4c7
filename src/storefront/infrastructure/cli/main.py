import click

from storefront.infrastructure.bootstrap import settings
from storefront.infrastructure.cli.log_commands import log_show
from storefront.infrastructure.cli.order_commands import (
    order_cancel,
    order_cancel_item,
    order_checkout,
    order_list,
    order_set_item_status,
    order_set_status,
    order_show,
    order_track,
)
from storefront.infrastructure.logging import configure_logging


@click.group()
def cli() -> None:
    """Storefront — order lifecycle and fulfillment"""
    cfg = settings()
    configure_logging(cfg.log_level, cfg.environment)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def log() -> None:
    """Inspect the action log."""


# Register subcommands
order.add_command(order_cancel)
order.add_command(order_cancel_item)
order.add_command(order_checkout)
order.add_command(order_list)
order.add_command(order_set_item_status)
order.add_command(order_set_status)
order.add_command(order_show)
order.add_command(order_track)
log.add_command(log_show)
