"""CLI commands for quantity requests and display requests."""

from __future__ import annotations

import click

from supplyhub.application.cancel_quantity_request import (
    CancelQuantityRequestHandler,
    DeleteQuantityRequestHandler,
)
from supplyhub.application.create_quantity_request import CreateQuantityRequestHandler
from supplyhub.application.display_requests import (
    DeleteDisplayRequestHandler,
    ListDisplayRequestsHandler,
    ReviewDisplayRequestHandler,
    SubmitDisplayRequestHandler,
)
from supplyhub.application.list_quantity_requests import ListQuantityRequestsHandler
from supplyhub.application.respond_to_quantity_request import RespondToQuantityRequestHandler
from supplyhub.domain.exceptions import DomainException
from supplyhub.domain.model.quantity_request import RESPONSE_STATUSES
from supplyhub.infrastructure.cli.context import CliContext, pass_cli

_RESPONSES = sorted(s.value for s in RESPONSE_STATUSES)


# --- Quantity requests --------------------------------------------------------

@click.command("create")
@click.option("--product", "product_id", required=True, help="Supplier product ID.")
@click.option("--quantity", required=True, type=int, help="Units requested.")
@click.option("--supplier", "supplier_id", default=None, help="Supplier ID (if not in the catalog).")
@click.option("--name", "product_name", default=None, help="Product name (if not in the catalog).")
@click.option("--supplier-email", default="", help="Where to email the supplier.")
@click.option("--notes", default=None, help="Notes for the supplier.")
@pass_cli
def request_create(
    obj: CliContext, product_id: str, quantity: int, supplier_id: str | None,
    product_name: str | None, supplier_email: str, notes: str | None,
) -> None:
    """Ask a supplier for more stock."""
    handler = CreateQuantityRequestHandler(
        obj.container.unit_of_work(), obj.container.events, obj.container.notifier
    )
    try:
        dto, merged = handler.handle(
            obj.actor, product_id, quantity, supplier_id=supplier_id,
            product_name=product_name, supplier_email=supplier_email, notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if merged:
        click.echo(
            f"Combined with pending request #{dto.id}: {dto.requested_quantity} units in total."
        )
    else:
        click.echo(f"Quantity request #{dto.id} created for {dto.requested_quantity} units.")


@click.command("respond")
@click.argument("request_id")
@click.argument("response", type=click.Choice(_RESPONSES))
@click.option("--quantity", "approved_quantity", default=None, type=int, help="Units approved.")
@click.option("--reason", default=None, help="Rejection reason.")
@click.option("--notes", default=None, help="Notes for the requester.")
@pass_cli
def request_respond(
    obj: CliContext, request_id: str, response: str, approved_quantity: int | None,
    reason: str | None, notes: str | None,
) -> None:
    """Answer a quantity request (supplier or admin)."""
    handler = RespondToQuantityRequestHandler(
        obj.container.unit_of_work(), obj.container.events, obj.container.notifier,
        obj.container.settings.inventory,
    )
    try:
        dto = handler.handle(request_id, response, obj.actor, approved_quantity, reason, notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if dto.approved_quantity:
        click.echo(f"Request #{dto.id} {dto.status}: {dto.approved_quantity} units added to inventory.")
    else:
        click.echo(f"Request #{dto.id} {dto.status}.")


@click.command("cancel")
@click.argument("request_id")
@pass_cli
def request_cancel(obj: CliContext, request_id: str) -> None:
    """Cancel a pending quantity request."""
    try:
        CancelQuantityRequestHandler(obj.container.unit_of_work(), obj.container.events).handle(
            request_id, obj.actor
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Request #{request_id} cancelled.")


@click.command("delete")
@click.argument("request_id")
@pass_cli
def request_delete(obj: CliContext, request_id: str) -> None:
    """Delete one of your quantity requests."""
    try:
        DeleteQuantityRequestHandler(obj.container.unit_of_work(), obj.container.events).handle(
            request_id, obj.actor
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Request #{request_id} deleted.")


@click.command("list")
@click.option("--supplier", "supplier_id", default=None, help="Only this supplier's requests.")
@click.option("--mine", is_flag=True, default=False, help="Only requests I made.")
@click.option("--pending", "pending_only", is_flag=True, default=False, help="Only pending requests.")
@pass_cli
def request_list(obj: CliContext, supplier_id: str | None, mine: bool, pending_only: bool) -> None:
    """List quantity requests, newest first."""
    requests = ListQuantityRequestsHandler(obj.container.unit_of_work()).handle(
        supplier_id=supplier_id,
        requested_by=obj.actor.user_id if mine else None,
        pending_only=pending_only,
    )
    if not requests:
        click.echo("No quantity requests found.")
        return

    click.echo(f"{'ID':<5} {'Product':<24} {'Supplier':<12} {'Req':>5} {'Appr':>5}  Status")
    click.echo("-" * 70)
    for r in requests:
        approved = "-" if r.approved_quantity is None else str(r.approved_quantity)
        click.echo(
            f"{r.id:<5} {r.product_name[:24]:<24} {r.supplier_id[:12]:<12} "
            f"{r.requested_quantity:>5} {approved:>5}  {r.status}"
        )


# --- Display requests ---------------------------------------------------------

@click.command("submit")
@click.argument("product_id")
@pass_cli
def display_submit(obj: CliContext, product_id: str) -> None:
    """Propose one of your products for the warehouse catalog."""
    try:
        dto = SubmitDisplayRequestHandler(obj.container.unit_of_work(), obj.container.events).handle(
            obj.actor, product_id
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Display request #{dto.id} submitted for {dto.product_name}.")


@click.command("review")
@click.argument("request_id")
@click.option("--accept/--reject", required=True, help="Accept or reject the proposal.")
@click.option("--reason", default=None, help="Rejection reason.")
@pass_cli
def display_review(obj: CliContext, request_id: str, accept: bool, reason: str | None) -> None:
    """Accept or reject a display request (staff only)."""
    handler = ReviewDisplayRequestHandler(
        obj.container.unit_of_work(), obj.container.events, obj.container.notifier
    )
    try:
        dto = handler.handle(request_id, accept, obj.actor, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if dto.quantity_request_id:
        click.echo(
            f"Display request #{dto.id} {dto.status}; "
            f"quantity request #{dto.quantity_request_id} sent to the supplier."
        )
    else:
        click.echo(f"Display request #{dto.id} {dto.status}.")


@click.command("delete")
@click.argument("request_id")
@pass_cli
def display_delete(obj: CliContext, request_id: str) -> None:
    """Withdraw one of your pending display requests."""
    try:
        DeleteDisplayRequestHandler(obj.container.unit_of_work(), obj.container.events).handle(
            request_id, obj.actor
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Display request #{request_id} deleted.")


@click.command("list")
@click.option("--mine", is_flag=True, default=False, help="Only my display requests.")
@click.option("--pending", "pending_only", is_flag=True, default=False, help="Only pending requests.")
@pass_cli
def display_list(obj: CliContext, mine: bool, pending_only: bool) -> None:
    """List display requests, newest first."""
    requests = ListDisplayRequestsHandler(obj.container.unit_of_work()).handle(
        supplier_id=obj.actor.user_id if mine else None, pending_only=pending_only
    )
    if not requests:
        click.echo("No display requests found.")
        return

    click.echo(f"{'ID':<5} {'Product':<24} {'Supplier':<12} {'Price':>10}  Status")
    click.echo("-" * 64)
    for r in requests:
        click.echo(
            f"{r.id:<5} {r.product_name[:24]:<24} {r.supplier_id[:12]:<12} "
            f"{r.product_price:>10}  {r.status}"
        )
