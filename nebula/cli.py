"""Nebula CLI — run and inspect the package marketplace."""

import logging

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from nebula import __version__
from nebula.config import load_config
from nebula.errors import ConfigError
from nebula.logging_config import setup_logging

console = Console()

BANNER = r"""
 _   _      _           _
| \ | | ___| |__  _   _| | __ _
|  \| |/ _ \ '_ \| | | | |/ _` |
| |\  |  __/ |_) | |_| | | (_| |
|_| \_|\___|_.__/ \__,_|_|\__,_|
"""


def _load(config_path):
    try:
        return load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default=None, help="Path to config.yaml")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def main(ctx, config_path, json_logs):
    """Nebula — theme and plugin marketplace server.

    Serves the catalog API, accepts package uploads when the marketplace
    is enabled, and delivers package assets.
    """
    ctx.ensure_object(dict)
    ctx.obj["config"] = _load(config_path)
    level = logging.DEBUG if ctx.obj["config"].server.logging else logging.INFO
    setup_logging(level=level, json_logs=json_logs)


# ── Serve ────────────────────────────────────────────────────────────


@main.command()
@click.option("--host", default=None, help="Bind address (default from config)")
@click.option("--port", "-p", default=None, type=int, help="Port (default from config / $PORT)")
@click.pass_context
def serve(ctx, host, port):
    """Run the marketplace HTTP server."""
    import uvicorn

    from web.backend.app.main import create_app

    config = ctx.obj["config"]
    host = host or config.server.host
    port = port or config.server.port

    console.print(Panel(BANNER, title="Nebula Services", border_style="#7967dd"))
    app = create_app(config)
    console.print(f"[#7967dd]Server listening on[/] [bold #eb6f92]http://localhost:{port}/[/]")
    console.print(f"[#7967dd]Server also listening on[/] [bold #eb6f92]http://{host}:{port}/[/]")
    if not config.marketplace.writable:
        console.print("[yellow]Marketplace writes are disabled.[/]")
    uvicorn.run(app, host=host, port=port, log_level="debug" if config.server.logging else "info")


# ── Seed ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("seed_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def seed(ctx, seed_file):
    """Create the packages listed in SEED_FILE that are not in the catalog yet."""
    from nebula.catalog.assets import AssetDirectoryManager
    from nebula.catalog.seed import load_seed_file, seed_catalog
    from nebula.catalog.store import CatalogStore

    config = ctx.obj["config"]
    store = CatalogStore(config.db.path)
    store.initialize()
    assets = AssetDirectoryManager(config.server.assets_dir)
    assets.initialize()

    try:
        records = load_seed_file(seed_file)
    except ConfigError as e:
        raise click.ClickException(str(e))

    created = seed_catalog(store, assets, records)
    skipped = len(records) - len(created)
    console.print(f"[green]Created {len(created)} package(s)[/], {skipped} already present.")


# ── List ─────────────────────────────────────────────────────────────


@main.command(name="list")
@click.option("--page", default=1, type=click.IntRange(min=1), help="Page number")
@click.pass_context
def list_packages(ctx, page):
    """List catalog packages, 20 per page."""
    from nebula.catalog.store import CatalogStore

    store = CatalogStore(ctx.obj["config"].db.path)
    store.initialize()
    result = store.list(page)

    if not result.items:
        console.print(f"[yellow]No packages on page {page}.[/]")
        return

    table = Table(title=f"Catalog — page {page} of {result.total_pages} ({result.total_count} total)")
    table.add_column("Package", style="cyan")
    table.add_column("Title")
    table.add_column("Type", style="magenta")
    table.add_column("Version", justify="right")
    table.add_column("Author")
    for record in result.items:
        table.add_row(
            record.package_name, record.title, record.type.value, record.version, record.author
        )
    console.print(table)


# ── Show ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("package_name")
@click.pass_context
def show(ctx, package_name):
    """Show one package and the files in its asset directory."""
    from nebula.catalog.assets import AssetDirectoryManager
    from nebula.catalog.store import CatalogStore

    config = ctx.obj["config"]
    store = CatalogStore(config.db.path)
    store.initialize()
    record = store.get(package_name)
    if record is None:
        raise click.ClickException(f"Package '{package_name}' not found")

    console.print(f"\n[bold cyan]{record.title}[/] [dim]({record.package_name})[/]")
    for key, value in record.public_fields().items():
        if key != "title":
            console.print(f"  [bold]{key}:[/] {value if value is not None else '-'}")

    assets = AssetDirectoryManager(config.server.assets_dir)
    files = assets.list_files(package_name) if assets.exists(package_name) else None
    if files is None:
        console.print("  [red]Asset directory missing[/]")
    elif not files:
        console.print("  [dim]No uploaded files[/]")
    else:
        console.print(f"  [bold]files:[/] {', '.join(files)}")


if __name__ == "__main__":
    main()
