"""Cache management commands."""

from pathlib import Path
from typing import Optional

import typer

from ..cache import DependencyCache
from . import app
from ._common import console, resolve_config


@app.command()
def cache_info(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="TOML config file"),
):
    """Show cache information and statistics."""
    settings = resolve_config(config)

    console.print("[bold cyan]Asset RefGraph Cache Info[/bold cyan]")
    console.print()

    if not settings.cache_enabled:
        console.print("Status: [red]Disabled[/red]")
        return

    with DependencyCache(settings.cache_dir) as cache:
        stats = cache.stats()

    console.print("Status: [green]Enabled[/green]")
    console.print(f"Directory: [blue]{stats.get('directory', settings.cache_dir)}[/blue]")
    console.print(f"Entries: [yellow]{stats.get('size', 0)}[/yellow]")
    console.print(f"Size: [yellow]{stats.get('volume', 0)} bytes[/yellow]")


@app.command()
def cache_clear(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="TOML config file"),
):
    """Clear the dependency cache."""
    settings = resolve_config(config)

    if not settings.cache_enabled:
        console.print("[yellow]Cache is disabled[/yellow]")
        raise typer.Exit(0)

    with DependencyCache(settings.cache_dir) as cache:
        cache.clear()
    console.print("[green]Cache cleared successfully[/green]")
