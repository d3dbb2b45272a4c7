"""CLI commands for the action log."""

from __future__ import annotations

import click

from storefront.application.action_log import ShowActionLogHandler
from storefront.infrastructure.bootstrap import action_log_repository


@click.command("show")
@click.option("--user", "user_id", default=None, help="Only entries for this user.")
def log_show(user_id: str | None) -> None:
    """List recorded order actions."""
    handler = ShowActionLogHandler(action_log_repo=action_log_repository())
    entries = handler.handle(user_id)

    if not entries:
        click.echo("No actions recorded.")
        return

    for entry in entries:
        click.echo(
            f"{entry.timestamp}  {entry.user_id:<12} {entry.action:<7} "
            f"{entry.resource} {entry.resource_id}: {entry.details}"
        )
