"""Command line interface."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from bakehouse import __version__
from bakehouse.config import inspect_config, load_config
from bakehouse.exceptions import BakeError, BakehouseError, ConfigurationError
from bakehouse.logging_setup import configure_logging, console
from bakehouse.oven import Oven

app = typer.Typer(name="bakehouse", help="Bakehouse - static site generator", no_args_is_help=True)


@app.command()
def bake(
    source: Path = typer.Argument(Path("."), help="Folder holding bakehouse.toml, content and templates."),
    destination: Path | None = typer.Argument(None, help="Output folder (defaults to <source>/output)."),
    reset: bool = typer.Option(False, "--reset", help="Clear the content cache before baking."),
    strict: bool = typer.Option(True, "--strict/--no-strict", help="Exit with an error when anything failed."),
    log_level: str | None = typer.Option(None, "--log-level", help="Overrides BAKEHOUSE_LOG_LEVEL."),
):
    """
    Bake the site in SOURCE into DESTINATION.
    """
    configure_logging(log_level)
    overrides = {"clear_cache": True} if reset else {}
    try:
        config = load_config(source, destination, **overrides)
        inspect_config(config)
    except ConfigurationError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        raise typer.Exit(code=1) from exc

    console.print(f"Baking {config.source_path} -> {config.destination_path}")
    try:
        result = Oven(config).bake(fail_on_error=strict)
    except BakeError as exc:
        table = Table(title=f"{len(exc.errors)} error(s)")
        table.add_column("Error", style="red")
        for error in exc.errors:
            table.add_row(escape(str(error)))
        console.print(table)
        raise typer.Exit(code=1) from exc
    except BakehouseError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        raise typer.Exit(code=1) from exc

    console.print(f"[bold green]Baked {result.rendered_count} items[/bold green]")
    if result.errors:
        console.print(f"[yellow]{len(result.errors)} error(s) were ignored[/yellow]")


@app.command()
def version():
    """
    Print the Bakehouse version.
    """
    console.print(f"bakehouse {__version__}")
