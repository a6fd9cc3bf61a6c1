"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from orderdesk.infrastructure.bootstrap import build_repositories, default_catalog
from orderdesk.infrastructure.config import get_settings


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    products = build_repositories().products.list_all()

    if not products:
        click.echo("No products found. Run 'orderdesk product seed' first.")
        return

    click.echo(f"{'Ref':<10} {'Name':<40} {'Price':>16}")
    click.echo("-" * 68)
    for p in products:
        click.echo(f"{p.ref:<10} {p.name[:40]:<40} {str(p.price):>16}")


@click.command("seed")
def product_seed() -> None:
    """Load the default catalog (existing refs are overwritten)."""
    repo = build_repositories().products
    catalog = default_catalog(get_settings().currency)
    for product in catalog:
        repo.save(product)

    click.echo(f"Seeded {len(catalog)} product(s).")
