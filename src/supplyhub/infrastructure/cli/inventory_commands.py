"""CLI commands for warehouse inventory."""

from __future__ import annotations

from pathlib import Path

import click

from supplyhub.application.add_inventory_item import AddInventoryItemHandler
from supplyhub.application.adjust_stock import AdjustStockHandler
from supplyhub.application.attach_inventory_image import AttachInventoryImageHandler
from supplyhub.application.catalog_curation import (
    CurateInventoryItemHandler,
    DiscontinueInventoryItemHandler,
    PublishInventoryItemHandler,
    ReinstateInventoryItemHandler,
    UnpublishInventoryItemHandler,
)
from supplyhub.application.delete_inventory_item import DeleteInventoryItemHandler
from supplyhub.application.dto import InventoryItemDTO
from supplyhub.application.refresh_stock_statuses import RefreshStockStatusesHandler
from supplyhub.application.show_inventory import (
    ListInventoryHandler,
    LowStockReportHandler,
    PublishedCatalogHandler,
    ShowInventoryItemHandler,
    StockMovementsHandler,
)
from supplyhub.application.update_inventory_item import UpdateInventoryItemHandler
from supplyhub.domain.exceptions import DomainException
from supplyhub.infrastructure.cli.context import CliContext, pass_cli


def _display_items(items: list[InventoryItemDTO], empty: str = "No inventory items found.") -> None:
    if not items:
        click.echo(empty)
        return
    click.echo(
        f"{'ID':<5} {'Name':<24} {'SKU':<12} {'Qty':>6} {'Rsvd':>6} {'Avail':>6} "
        f"{'Price':>10}  {'Status':<13} {'Pub'}"
    )
    click.echo("-" * 95)
    for i in items:
        click.echo(
            f"{i.id:<5} {i.name[:24]:<24} {i.sku[:12]:<12} {i.quantity:>6} "
            f"{i.reserved_quantity:>6} {i.available_quantity:>6} {i.price:>10}  "
            f"{i.status:<13} {'yes' if i.is_published else 'no'}"
        )


def _display_item(i: InventoryItemDTO) -> None:
    click.echo(f"Item #{i.id}  {i.name}  (status={i.status})")
    click.echo(f"SKU:       {i.sku or '-'}")
    click.echo(f"Category:  {i.category or '-'}")
    click.echo(f"Location:  {i.location or '-'}")
    click.echo(f"Supplier:  {i.supplier_name or i.supplier_id or '-'}")
    click.echo(f"On hand:   {i.quantity}  (reserved {i.reserved_quantity}, available {i.available_quantity})")
    click.echo(f"Levels:    min {i.min_stock_level} / max {i.max_stock_level}")
    click.echo(f"Price:     {i.price}  (unit {i.unit_price})")
    click.echo(f"Published: {'yes' if i.is_published else 'no'}  (details saved: {'yes' if i.details_saved else 'no'})")
    if i.tags:
        click.echo(f"Tags:      {', '.join(i.tags)}")


@click.command("add")
@click.option("--name", required=True, help="Item name.")
@click.option("--quantity", required=True, type=int, help="Opening stock.")
@click.option("--price", required=True, help="Unit price (e.g. 15.00).")
@click.option("--sku", default="", help="Stock keeping unit.")
@click.option("--category", default=None, help="Category (defaults from settings).")
@click.option("--location", default=None, help="Storage location (defaults from settings).")
@click.option("--min-stock", "min_stock", default=0, type=int, help="Low-stock threshold.")
@click.option("--max-stock", "max_stock", default=0, type=int, help="Target maximum stock.")
@click.option("--supplier", "supplier_id", default="", help="Supplier user ID.")
@pass_cli
def inventory_add(
    obj: CliContext, name: str, quantity: int, price: str, sku: str, category: str | None,
    location: str | None, min_stock: int, max_stock: int, supplier_id: str,
) -> None:
    """Add an inventory item by hand."""
    handler = AddInventoryItemHandler(
        obj.container.unit_of_work(), obj.container.events, obj.container.settings.inventory
    )
    try:
        item = handler.handle(
            obj.actor, name, quantity, price, sku=sku, category=category, location=location,
            min_stock_level=min_stock, max_stock_level=max_stock, supplier_id=supplier_id,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item #{item.id} '{item.name}' added with {item.quantity} units ({item.status})")


@click.command("show")
@click.argument("item_id")
@pass_cli
def inventory_show(obj: CliContext, item_id: str) -> None:
    """Show one inventory item."""
    try:
        item = ShowInventoryItemHandler(obj.container.unit_of_work()).handle(item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _display_item(item)


@click.command("update")
@click.argument("item_id")
@click.option("--name", default=None, help="New item name.")
@click.option("--sku", default=None, help="New stock keeping unit.")
@click.option("--category", default=None, help="New category.")
@click.option("--description", default=None, help="New internal description.")
@click.option("--location", default=None, help="New storage location.")
@click.option("--price", default=None, help="New unit price.")
@click.option("--min-stock", "min_stock", default=None, type=int, help="New low-stock threshold.")
@click.option("--max-stock", "max_stock", default=None, type=int, help="New target maximum stock.")
@click.option("--supplier-name", "supplier_name", default=None, help="New supplier display name.")
@pass_cli
def inventory_update(
    obj: CliContext, item_id: str, name: str | None, sku: str | None, category: str | None,
    description: str | None, location: str | None, price: str | None, min_stock: int | None,
    max_stock: int | None, supplier_name: str | None,
) -> None:
    """Edit an item's details and stock thresholds."""
    handler = UpdateInventoryItemHandler(obj.container.unit_of_work(), obj.container.events)
    try:
        item = handler.handle(
            obj.actor, item_id, name=name, sku=sku, category=category, description=description,
            location=location, unit_price=price, min_stock_level=min_stock,
            max_stock_level=max_stock, supplier_name=supplier_name,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item #{item.id} '{item.name}' updated ({item.status})")


@click.command("list")
@click.option("--search", default=None, help="Match name, SKU or category.")
@click.option("--supplier", "supplier_id", default=None, help="Only this supplier's items.")
@pass_cli
def inventory_list(obj: CliContext, search: str | None, supplier_id: str | None) -> None:
    """List inventory items."""
    items = ListInventoryHandler(obj.container.unit_of_work()).handle(search, supplier_id)
    _display_items(items)


@click.command("adjust")
@click.argument("item_id")
@click.option("--type", "movement_type", required=True,
              type=click.Choice(["in", "out", "adjustment"]), help="Movement type.")
@click.option("--quantity", required=True, type=int,
              help="Units to add/remove, or the new absolute count for 'adjustment'.")
@click.option("--reason", required=True, help="Why the stock changed.")
@click.option("--notes", default=None, help="Optional free-text notes.")
@pass_cli
def inventory_adjust(
    obj: CliContext, item_id: str, movement_type: str, quantity: int, reason: str, notes: str | None
) -> None:
    """Record a stock movement."""
    handler = AdjustStockHandler(obj.container.unit_of_work(), obj.container.events)
    try:
        item = handler.handle(obj.actor, item_id, quantity, movement_type, reason, notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item #{item.id} now has {item.quantity} units ({item.status})")


@click.command("curate")
@click.argument("item_id")
@click.option("--description", required=True, help="Customer-facing description.")
@click.option("--sale-price", default=None, help="Customer price, overriding the unit price.")
@click.option("--tag", "tags", multiple=True, help="Catalog tag (repeatable).")
@pass_cli
def inventory_curate(
    obj: CliContext, item_id: str, description: str, sale_price: str | None, tags: tuple[str, ...]
) -> None:
    """Save catalog details for an item."""
    handler = CurateInventoryItemHandler(obj.container.unit_of_work(), obj.container.events)
    try:
        item = handler.handle(obj.actor, item_id, description, sale_price, list(tags))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Catalog details saved for #{item.id} (price {item.price})")


def _visibility_command(name: str, handler_cls, done: str, help_text: str) -> click.Command:
    @click.command(name, help=help_text)
    @click.argument("item_id")
    @pass_cli
    def command(obj: CliContext, item_id: str) -> None:
        handler = handler_cls(obj.container.unit_of_work(), obj.container.events)
        try:
            item = handler.handle(obj.actor, item_id)
        except DomainException as exc:
            raise click.ClickException(str(exc))
        click.echo(f"Item #{item.id} '{item.name}' {done}.")

    return command


inventory_publish = _visibility_command(
    "publish", PublishInventoryItemHandler, "published", "Show an item in the catalog."
)
inventory_unpublish = _visibility_command(
    "unpublish", UnpublishInventoryItemHandler, "unpublished", "Hide an item from the catalog."
)
inventory_discontinue = _visibility_command(
    "discontinue", DiscontinueInventoryItemHandler, "discontinued", "Mark an item discontinued."
)
inventory_reinstate = _visibility_command(
    "reinstate", ReinstateInventoryItemHandler, "reinstated", "Undo a discontinuation."
)


@click.command("image")
@click.argument("item_id")
@click.argument("image_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@pass_cli
def inventory_image(obj: CliContext, item_id: str, image_file: Path) -> None:
    """Attach an image to an item."""
    handler = AttachInventoryImageHandler(
        obj.container.unit_of_work(), obj.container.object_store, obj.container.events
    )
    try:
        handler.handle(obj.actor, item_id, image_file.name, image_file.read_bytes())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Image attached to item #{item_id}")


@click.command("movements")
@click.option("--item", "item_id", default=None, help="Only this item's movements.")
@click.option("--limit", default=None, type=int, help="Show at most this many.")
@pass_cli
def inventory_movements(obj: CliContext, item_id: str | None, limit: int | None) -> None:
    """Show stock movement history, newest first."""
    movements = StockMovementsHandler(obj.container.unit_of_work()).handle(item_id, limit)
    if not movements:
        click.echo("No stock movements found.")
        return

    click.echo(f"{'When':<21} {'Item':<22} {'Type':<11} {'Qty':>6}  Reason")
    click.echo("-" * 80)
    for m in movements:
        click.echo(
            f"{m.timestamp:<21} {m.item_name[:22]:<22} {m.type:<11} {m.quantity:>6}  {m.reason}"
        )


@click.command("low-stock")
@pass_cli
def inventory_low_stock(obj: CliContext) -> None:
    """List items at or below their restock threshold."""
    items = LowStockReportHandler(obj.container.unit_of_work()).handle()
    _display_items(items, empty="No items are low on stock.")


@click.command("catalog")
@pass_cli
def inventory_catalog(obj: CliContext) -> None:
    """List the items internal users can order."""
    items = PublishedCatalogHandler(obj.container.unit_of_work()).handle()
    _display_items(items, empty="The catalog is empty.")


@click.command("refresh")
@pass_cli
def inventory_refresh(obj: CliContext) -> None:
    """Recompute every item's stock status."""
    changed = RefreshStockStatusesHandler(
        obj.container.unit_of_work(), obj.container.events
    ).handle()
    click.echo(f"Updated status for {changed} items.")


@click.command("delete")
@click.argument("item_id")
@click.confirmation_option(prompt="Delete this item and its movement history?")
@pass_cli
def inventory_delete(obj: CliContext, item_id: str) -> None:
    """Delete an item and its movement history."""
    handler = DeleteInventoryItemHandler(
        obj.container.unit_of_work(), obj.container.object_store, obj.container.events
    )
    try:
        handler.handle(obj.actor, item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item #{item_id} deleted.")
