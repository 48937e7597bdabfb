"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from supplyhub.application.cancel_order import CancelOrderHandler
from supplyhub.application.create_order import CreateOrderHandler
from supplyhub.application.delete_order import DeleteOrderHandler
from supplyhub.application.dto import OrderDTO, OrderItemSpec
from supplyhub.application.show_order import (
    ListOrdersHandler,
    OrderStatsHandler,
    ShowOrderHandler,
)
from supplyhub.application.update_order_items import UpdateOrderItemsHandler
from supplyhub.application.update_order_status import (
    BulkUpdateOrderStatusHandler,
    UpdateOrderStatusHandler,
)
from supplyhub.domain.exceptions import DomainException
from supplyhub.domain.model.order import OrderStatus
from supplyhub.infrastructure.cli.context import CliContext, pass_cli

_STATUSES = [s.value for s in OrderStatus]


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse '3:2,7:1' (item ID:quantity) into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ItemID:Quantity'."
            )
        item_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for item '{item_id}'."
            )
        specs.append(OrderItemSpec(item_id=item_id.strip(), quantity=qty))
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number}  (id={dto.id}, status={dto.status})")
    click.echo(f"Requested by: {dto.requester_name or dto.requested_by}")
    click.echo(f"Created:      {dto.created_at}")
    if dto.notes:
        click.echo(f"Notes:        {dto.notes}")
    if dto.cancellation_reason:
        click.echo(f"Cancelled:    {dto.cancellation_reason}")
    click.echo()
    click.echo(f"  {'Item':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*51}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name[:24]:<24} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*51}")
    click.echo(f"  {'Order Total':<31} {dto.total:>20}")


@click.command("create")
@click.option("--items", required=True, help="Items as 'ItemID:Qty,ItemID:Qty'.")
@click.option("--notes", default="", help="Notes for the warehouse.")
@pass_cli
def order_create(obj: CliContext, items: str, notes: str) -> None:
    """Place an order; stock is reserved immediately."""
    specs = _parse_items(items)
    handler = CreateOrderHandler(obj.container.unit_of_work(), obj.container.events)

    try:
        dto = handler.handle(obj.actor, specs, notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Order created, stock reserved.")
    _display_order(dto)


@click.command("show")
@click.argument("order_ref")
@pass_cli
def order_show(obj: CliContext, order_ref: str) -> None:
    """Show an order by ID or order number."""
    try:
        dto = ShowOrderHandler(obj.container.unit_of_work()).handle(order_ref)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _display_order(dto)


@click.command("list")
@click.option("--status", type=click.Choice(_STATUSES), default=None, help="Filter by status.")
@click.option("--mine", is_flag=True, default=False, help="Only orders I placed.")
@click.option("--supplier", "supplier_id", default=None, help="Only orders with this supplier's items.")
@pass_cli
def order_list(obj: CliContext, status: str | None, mine: bool, supplier_id: str | None) -> None:
    """List orders, newest first."""
    orders = ListOrdersHandler(obj.container.unit_of_work()).handle(
        status=status,
        requested_by=obj.actor.user_id if mine else None,
        supplier_id=supplier_id,
    )
    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<5} {'Number':<17} {'Status':<10} {'Lines':>5} {'Total':>12}  Requested by")
    click.echo("-" * 72)
    for o in orders:
        click.echo(
            f"{o.id:<5} {o.order_number:<17} {o.status:<10} {len(o.items):>5} {o.total:>12}  "
            f"{o.requester_name or o.requested_by}"
        )


@click.command("status")
@click.argument("order_ref")
@click.argument("new_status", type=click.Choice(_STATUSES))
@click.option("--reason", default=None, help="Required when cancelling.")
@pass_cli
def order_status(obj: CliContext, order_ref: str, new_status: str, reason: str | None) -> None:
    """Move an order to its next status (staff only)."""
    handler = UpdateOrderStatusHandler(
        obj.container.unit_of_work(), obj.container.events, obj.container.notifier
    )
    try:
        dto = handler.handle(order_ref, new_status, obj.actor, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} is now {dto.status}.")


@click.command("bulk-status")
@click.argument("new_status", type=click.Choice(_STATUSES))
@click.argument("order_refs", nargs=-1, required=True)
@click.option("--reason", default=None, help="Required when cancelling.")
@pass_cli
def order_bulk_status(
    obj: CliContext, new_status: str, order_refs: tuple[str, ...], reason: str | None
) -> None:
    """Move several orders to one status, all or nothing."""
    handler = BulkUpdateOrderStatusHandler(
        obj.container.unit_of_work(), obj.container.events, obj.container.notifier
    )
    try:
        dtos = handler.handle(list(order_refs), new_status, obj.actor, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{len(dtos)} orders moved to {new_status}.")


@click.command("cancel")
@click.argument("order_ref")
@click.option("--reason", required=True, help="Why the order is cancelled.")
@pass_cli
def order_cancel(obj: CliContext, order_ref: str, reason: str) -> None:
    """Cancel an order, releasing or restoring its stock."""
    handler = CancelOrderHandler(
        obj.container.unit_of_work(), obj.container.events, obj.container.notifier
    )
    try:
        dto = handler.handle(order_ref, obj.actor, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} cancelled.")


@click.command("edit")
@click.argument("order_ref")
@click.option("--items", required=True, help="New items as 'ItemID:Qty,ItemID:Qty'.")
@pass_cli
def order_edit(obj: CliContext, order_ref: str, items: str) -> None:
    """Replace the items of a pending order."""
    specs = _parse_items(items)
    handler = UpdateOrderItemsHandler(obj.container.unit_of_work(), obj.container.events)
    try:
        dto = handler.handle(order_ref, specs, obj.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Order updated, stock re-reserved.")
    _display_order(dto)


@click.command("delete")
@click.argument("order_ref")
@pass_cli
def order_delete(obj: CliContext, order_ref: str) -> None:
    """Delete a pending order and release its stock."""
    handler = DeleteOrderHandler(obj.container.unit_of_work(), obj.container.events)
    try:
        handler.handle(order_ref, obj.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_ref} deleted.")


@click.command("stats")
@click.option("--mine", is_flag=True, default=False, help="Only orders I placed.")
@pass_cli
def order_stats(obj: CliContext, mine: bool) -> None:
    """Show order counts and values."""
    stats = OrderStatsHandler(obj.container.unit_of_work()).handle(
        requested_by=obj.actor.user_id if mine else None
    )
    click.echo(f"Total orders:        {stats.total}")
    for status, count in stats.by_status.items():
        click.echo(f"  {status:<18} {count}")
    click.echo(f"Total value:         {stats.total_value}")
    click.echo(f"Average order value: {stats.average_order_value}")
