from __future__ import annotations

import click
from flask import Blueprint, current_app

from crushstore.modules.catalog.bootstrap import AppConfigSource, CatalogBootstrapper, CatalogState, HttpConfigSource
from crushstore.modules.storefront.context import client_factory

cli_bp = Blueprint("cli", __name__, cli_group=None)


@cli_bp.cli.command("catalog")
@click.option("--server", default=None, help="Read /api/config/shopify from a running server instead of local config.")
def show_catalog(server: str | None) -> None:
    """Bootstrap the catalog and print it.

    Exits with status 1 when the catalog cannot be loaded.
    """

    source = HttpConfigSource(server) if server else AppConfigSource(current_app.config)
    view, _ = CatalogBootstrapper(source, client_factory(current_app)).run()

    if view.state is CatalogState.CONFIG_ERROR:
        click.echo(f"Configuration error ({view.error.code}): {view.error}", err=True)
        raise SystemExit(1)

    if view.is_empty:
        click.echo("No products available.")
        return

    click.echo("Featured:")
    for p in view.featured:
        click.echo(f"  {p.title}")
    click.echo(f"Catalog ({len(view.products)}):")
    for p in view.products:
        price = p.default_variant.price.display if p.purchasable else "unavailable"
        click.echo(f"  {p.handle or p.id}  {p.title}  {price}")
