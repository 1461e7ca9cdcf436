"""CLI entry point. Registers all subcommands."""

import typer

app = typer.Typer(
    name="asset-refgraph",
    help="Asset RefGraph - Asset Reference Graph Analyzer",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .cache import cache_clear as _cache_clear, cache_info as _cache_info  # noqa: F401, E402
from .refs import refs as _refs  # noqa: F401, E402


def main() -> None:
    app()
