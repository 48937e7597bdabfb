"""CLI commands for incoming and outgoing shipments."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from supplyhub.application.dto import ShipmentDTO
from supplyhub.application.shipments import (
    CreateShipmentHandler,
    DeleteShipmentHandler,
    ListShipmentsHandler,
    ShipmentStatsHandler,
    UpdateShipmentHandler,
    UpdateShipmentStatusHandler,
)
from supplyhub.domain.exceptions import DomainException
from supplyhub.domain.model.shipment import ShipmentStatus, ShipmentType
from supplyhub.infrastructure.cli.context import CliContext, pass_cli

_TYPES = [t.value for t in ShipmentType]
_STATUSES = [s.value for s in ShipmentStatus]
_DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%d %H:%M"]


def _utc(value: datetime | None) -> datetime | None:
    return value.replace(tzinfo=timezone.utc) if value is not None else None


def _display_shipments(shipments: list[ShipmentDTO]) -> None:
    if not shipments:
        click.echo("No shipments found.")
        return
    click.echo(
        f"{'ID':<5} {'Type':<9} {'Tracking':<18} {'Items':>6} {'Value':>12}  "
        f"{'Status':<15} {'ETA'}"
    )
    click.echo("-" * 85)
    for s in shipments:
        click.echo(
            f"{s.id:<5} {s.type:<9} {s.tracking_number[:18]:<18} {s.items:>6} "
            f"{s.value:>12}  {s.status:<15} {s.eta or '-'}"
        )


@click.command("create")
@click.option("--type", "shipment_type", required=True, type=click.Choice(_TYPES), help="Direction.")
@click.option("--tracking", required=True, help="Carrier tracking number.")
@click.option("--items", default=0, type=int, help="Number of packages.")
@click.option("--value", default="0", help="Declared value.")
@click.option("--supplier", default="", help="Sending supplier (incoming).")
@click.option("--destination", default="", help="Destination (outgoing).")
@click.option("--eta", type=click.DateTime(_DATE_FORMATS), default=None, help="Expected arrival.")
@click.option("--notes", default="", help="Free-text notes.")
@pass_cli
def shipment_create(
    obj: CliContext, shipment_type: str, tracking: str, items: int, value: str,
    supplier: str, destination: str, eta: datetime | None, notes: str,
) -> None:
    """Record a new shipment."""
    handler = CreateShipmentHandler(obj.container.unit_of_work(), obj.container.events)
    try:
        shipment = handler.handle(
            obj.actor, shipment_type, tracking, items, value, supplier=supplier,
            destination=destination, eta=_utc(eta), notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Shipment #{shipment.id} ({shipment.type}) {shipment.tracking_number} "
        f"recorded as {shipment.status}"
    )


@click.command("list")
@click.option("--type", "shipment_type", type=click.Choice(_TYPES), default=None,
              help="Only this direction.")
@pass_cli
def shipment_list(obj: CliContext, shipment_type: str | None) -> None:
    """List shipments, newest first."""
    _display_shipments(ListShipmentsHandler(obj.container.unit_of_work()).handle(shipment_type))


@click.command("update")
@click.argument("shipment_id")
@click.option("--tracking", default=None, help="New tracking number.")
@click.option("--items", default=None, type=int, help="New package count.")
@click.option("--value", default=None, help="New declared value.")
@click.option("--supplier", default=None, help="New supplier.")
@click.option("--destination", default=None, help="New destination.")
@click.option("--eta", type=click.DateTime(_DATE_FORMATS), default=None, help="New expected arrival.")
@click.option("--notes", default=None, help="New notes.")
@pass_cli
def shipment_update(
    obj: CliContext, shipment_id: str, tracking: str | None, items: int | None,
    value: str | None, supplier: str | None, destination: str | None,
    eta: datetime | None, notes: str | None,
) -> None:
    """Edit a shipment's details."""
    handler = UpdateShipmentHandler(obj.container.unit_of_work(), obj.container.events)
    try:
        shipment = handler.handle(
            obj.actor, shipment_id, tracking_number=tracking, items=items, value=value,
            supplier=supplier, destination=destination, eta=_utc(eta), notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Shipment #{shipment.id} updated")


@click.command("status")
@click.argument("shipment_id")
@click.argument("new_status", type=click.Choice(_STATUSES))
@pass_cli
def shipment_status(obj: CliContext, shipment_id: str, new_status: str) -> None:
    """Move a shipment to a new status."""
    handler = UpdateShipmentStatusHandler(obj.container.unit_of_work(), obj.container.events)
    try:
        shipment = handler.handle(obj.actor, shipment_id, new_status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Shipment #{shipment.id} is now {shipment.status}")


@click.command("delete")
@click.argument("shipment_id")
@click.confirmation_option(prompt="Delete this shipment?")
@pass_cli
def shipment_delete(obj: CliContext, shipment_id: str) -> None:
    """Delete a shipment record."""
    handler = DeleteShipmentHandler(obj.container.unit_of_work(), obj.container.events)
    try:
        handler.handle(obj.actor, shipment_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Shipment #{shipment_id} deleted")


@click.command("stats")
@pass_cli
def shipment_stats(obj: CliContext) -> None:
    """Show shipment counts and total value."""
    stats = ShipmentStatsHandler(obj.container.unit_of_work()).handle()
    click.echo(f"Total shipments: {stats.total}")
    click.echo(f"  incoming       {stats.incoming}")
    click.echo(f"  outgoing       {stats.outgoing}")
    click.echo(f"  pending        {stats.pending}")
    click.echo(f"  in transit     {stats.in_transit}")
    click.echo(f"Total value:     {stats.total_value}")
