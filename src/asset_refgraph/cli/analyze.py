"""Main analysis command: analyze a selection or every asset."""

from pathlib import Path
from typing import List, Optional

import typer

from ..api import RefGraph
from ..formatters import get_formatter
from ..progress import ProgressReporter, SilentReporter
from ..session import SessionState
from . import app
from ._common import console, open_manifest, resolve_config


@app.command()
def analyze(
    asset_ids: Optional[List[str]] = typer.Argument(
        None,
        help="Asset identities to analyze (omit to analyze every asset)",
    ),
    manifest: Path = typer.Option(
        ...,
        "--manifest",
        "-m",
        help="JSON manifest listing assets, paths and dependencies",
        exists=True,
        dir_okay=False,
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", help="Threads resolving dependencies", min=1
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Do not persist dependency records"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="TOML config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Errors only, no progress bar"),
):
    """
    Build the reference graph and report most-referenced, unreferenced and circular assets.
    """
    settings = resolve_config(config, workers=workers, no_cache=no_cache, verbose=verbose, quiet=quiet)
    source = open_manifest(manifest)

    with RefGraph(source, settings) as graph:
        session = graph.start_analysis(asset_ids or [], background=True)
        reporter = SilentReporter() if quiet or json_output else ProgressReporter(console)
        reporter.follow(session)

        if session.state is SessionState.CANCELLED:
            console.print("[yellow]Analysis cancelled; no report produced.[/yellow]")
            raise typer.Exit(130)
        if session.state is SessionState.FAILED:
            console.print(f"[red]Analysis failed:[/red] {session.failure}")
            raise typer.Exit(1)

        formatter = get_formatter("json" if json_output else "rich")
        formatter.render(session.report, source.get_display_path)
