from __future__ import annotations

from pathlib import Path

import click

from supplyhub.domain.model.actor import Actor, Role
from supplyhub.infrastructure.bootstrap import Container
from supplyhub.infrastructure.cli.context import CliContext
from supplyhub.infrastructure.cli.inventory_commands import (
    inventory_add,
    inventory_adjust,
    inventory_catalog,
    inventory_curate,
    inventory_delete,
    inventory_discontinue,
    inventory_image,
    inventory_list,
    inventory_low_stock,
    inventory_movements,
    inventory_publish,
    inventory_refresh,
    inventory_reinstate,
    inventory_show,
    inventory_unpublish,
    inventory_update,
)
from supplyhub.infrastructure.cli.order_commands import (
    order_bulk_status,
    order_cancel,
    order_create,
    order_delete,
    order_edit,
    order_list,
    order_show,
    order_stats,
    order_status,
)
from supplyhub.infrastructure.cli.product_commands import product_add, product_list, product_update
from supplyhub.infrastructure.cli.request_commands import (
    display_delete,
    display_list,
    display_review,
    display_submit,
    request_cancel,
    request_create,
    request_delete,
    request_list,
    request_respond,
)
from supplyhub.infrastructure.cli.shipment_commands import (
    shipment_create,
    shipment_delete,
    shipment_list,
    shipment_stats,
    shipment_status,
    shipment_update,
)
from supplyhub.infrastructure.config import load_settings
from supplyhub.infrastructure.logging_setup import configure_logging

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option("--user", "user_id", envvar="SUPPLYHUB_USER", default="admin",
              show_default=True, help="ID of the acting user.")
@click.option("--name", envvar="SUPPLYHUB_USER_NAME", default=None, help="Display name of the acting user.")
@click.option("--role", type=click.Choice([r.value for r in Role]), envvar="SUPPLYHUB_ROLE",
              default=Role.ADMIN.value, show_default=True, help="Role of the acting user.")
@click.option("--email", envvar="SUPPLYHUB_USER_EMAIL", default=None, help="Email of the acting user.")
@click.option("--log-level", type=click.Choice(_LOG_LEVELS, case_sensitive=False), default=None,
              help="Override the configured log level.")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="INI settings file.")
@click.pass_context
def cli(
    ctx: click.Context,
    user_id: str,
    name: str | None,
    role: str,
    email: str | None,
    log_level: str | None,
    config_path: Path | None,
) -> None:
    """SupplyHub: warehouse inventory, internal orders and supplier requests."""
    settings = load_settings(config_path)
    configure_logging(settings.logging, log_level)
    ctx.obj = CliContext(
        container=Container(settings),
        actor=Actor(user_id=user_id, name=name or user_id, role=Role(role), email=email),
    )


@cli.group()
def inventory() -> None:
    """Manage warehouse inventory."""


@cli.group()
def order() -> None:
    """Manage internal orders."""


@cli.group()
def request() -> None:
    """Manage quantity requests to suppliers."""


@cli.group()
def display() -> None:
    """Manage supplier display requests."""


@cli.group()
def product() -> None:
    """Manage a supplier's product catalog."""


@cli.group()
def shipment() -> None:
    """Track incoming and outgoing shipments."""


# Register subcommands
for command in (
    inventory_add, inventory_adjust, inventory_catalog, inventory_curate, inventory_delete,
    inventory_discontinue, inventory_image, inventory_list, inventory_low_stock,
    inventory_movements, inventory_publish, inventory_refresh, inventory_reinstate,
    inventory_show, inventory_unpublish, inventory_update,
):
    inventory.add_command(command)
for command in (
    order_bulk_status, order_cancel, order_create, order_delete, order_edit,
    order_list, order_show, order_stats, order_status,
):
    order.add_command(command)
for command in (request_cancel, request_create, request_delete, request_list, request_respond):
    request.add_command(command)
for command in (display_delete, display_list, display_review, display_submit):
    display.add_command(command)
for command in (product_add, product_list, product_update):
    product.add_command(command)
for command in (
    shipment_create, shipment_delete, shipment_list, shipment_stats, shipment_status,
    shipment_update,
):
    shipment.add_command(command)
