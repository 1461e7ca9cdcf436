"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import AnalysisConfig, load_config
from ..exceptions import RefGraphError
from ..logging_config import setup_logging
from ..source import ManifestAssetSource

console = Console()


def resolve_config(
    config: Optional[Path] = None,
    workers: Optional[int] = None,
    no_cache: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> AnalysisConfig:
    """Build configuration from CLI options and set up logging."""
    overrides = {}
    if workers is not None:
        overrides["workers"] = workers
    if no_cache:
        overrides["cache_enabled"] = False
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    try:
        settings = load_config(config_file=config, **overrides)
    except RefGraphError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)
    setup_logging(verbose=settings.verbosity == "verbose", quiet=settings.verbosity == "quiet")
    return settings


def open_manifest(manifest: Path) -> ManifestAssetSource:
    """Load the asset manifest or exit with an error message."""
    try:
        return ManifestAssetSource(manifest)
    except RefGraphError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
