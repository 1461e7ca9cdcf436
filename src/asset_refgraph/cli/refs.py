"""Find the assets that reference a selection."""

from pathlib import Path
from typing import List, Optional

import typer

from ..api import RefGraph
from ..formatters.base import lenient_path
from ..session import SessionState
from . import app
from ._common import console, open_manifest, resolve_config


@app.command()
def refs(
    asset_ids: List[str] = typer.Argument(..., help="Asset identities to look up"),
    manifest: Path = typer.Option(
        ...,
        "--manifest",
        "-m",
        help="JSON manifest listing assets, paths and dependencies",
        exists=True,
        dir_okay=False,
    ),
    transitive: bool = typer.Option(
        False, "--transitive", "-t", help="Include indirect referrers"
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Do not persist dependency records"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="TOML config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    List every asset referencing the given assets.
    """
    settings = resolve_config(config, no_cache=no_cache, verbose=verbose)
    source = open_manifest(manifest)

    # Referrers can live anywhere, so the whole corpus is scanned
    with RefGraph(source, settings) as graph:
        session = graph.start_analysis()
        if session.state is not SessionState.COMPLETED:
            console.print(f"[red]Analysis failed:[/red] {session.failure}")
            raise typer.Exit(1)

        analyzer = session.analyzer()
        display_path = lenient_path(source.get_display_path)
        for asset_id, referrers in analyzer.find_references(asset_ids).items():
            console.print(f"[bold]{display_path(asset_id)}[/bold]")
            if referrers is None and asset_id not in analyzer.forward:
                console.print("  [yellow]???[/yellow] (unknown asset)")
                continue
            referrers = referrers or []
            if transitive:
                referrers = sorted(analyzer.transitive_referrers(asset_id))
            if not referrers:
                console.print("  [dim]not referenced[/dim]")
            for referrer in referrers:
                console.print(f"  ← {display_path(referrer)}")
