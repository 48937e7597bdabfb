"""CLI commands for a supplier's product catalog."""

from __future__ import annotations

import click

from supplyhub.application.supplier_products import (
    AddProductHandler,
    ListProductsHandler,
    UpdateProductPriceHandler,
)
from supplyhub.domain.exceptions import DomainException
from supplyhub.infrastructure.cli.context import CliContext, pass_cli


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--sku", default="", help="Stock keeping unit.")
@click.option("--category", default="", help="Category.")
@click.option("--description", default="", help="Description.")
@pass_cli
def product_add(
    obj: CliContext, name: str, price: str, sku: str, category: str, description: str
) -> None:
    """Add a product to your catalog (suppliers only)."""
    handler = AddProductHandler(obj.container.unit_of_work())
    try:
        product = handler.handle(obj.actor, name, price, sku, category, description)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} '{product.name}' added at {product.price}")


@click.command("list")
@click.option("--supplier", "supplier_id", default=None, help="Only this supplier's products.")
@pass_cli
def product_list(obj: CliContext, supplier_id: str | None) -> None:
    """List supplier products."""
    products = ListProductsHandler(obj.container.unit_of_work()).handle(supplier_id)

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<8} {'Name':<24} {'Supplier':<12} {'Price':>10}")
    click.echo("-" * 57)
    for p in products:
        click.echo(f"{p.id:<8} {p.name[:24]:<24} {p.supplier_id[:12]:<12} {str(p.price):>10}")


@click.command("update")
@click.argument("product_id")
@click.option("--price", required=True, help="New price (e.g. 29.99).")
@pass_cli
def product_update(obj: CliContext, product_id: str, price: str) -> None:
    """Update a product's price."""
    handler = UpdateProductPriceHandler(obj.container.unit_of_work())
    try:
        product = handler.handle(obj.actor, product_id, price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} price updated to {product.price}")
