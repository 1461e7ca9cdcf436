"""Rich terminal formatter for Asset RefGraph."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..models import AnalysisReport
from .base import BaseFormatter, PathResolver, lenient_path


def _file_name(path: str) -> str:
    return path.replace("\\", "/").rsplit("/", 1)[-1]


class RichFormatter(BaseFormatter):
    """Summary panel followed by one table per finding kind."""

    def __init__(self, console: Console = None):
        self.console = console or Console()

    def render(self, report: AnalysisReport, display_path: PathResolver) -> None:
        display_path = lenient_path(display_path)
        self._print_summary(report)
        self._print_most_referenced(report, display_path)
        self._print_orphans(report, display_path)
        self._print_cycles(report, display_path)
        if report.warnings:
            self._print_warnings(report, display_path)

    def format(self, report: AnalysisReport, display_path: PathResolver) -> str:
        with self.console.capture() as capture:
            self.render(report, display_path)
        return capture.get()

    def _print_summary(self, report: AnalysisReport) -> None:
        lines = [
            f"Analyzed at: [bold]{report.timestamp:%Y-%m-%d %H:%M:%S}[/bold]",
            f"Assets scanned: [bold]{report.scanned_count}[/bold]",
            f"References found: [bold]{report.edge_count}[/bold]",
        ]
        if report.warning_count:
            lines.append(f"Assets with lookup errors: [yellow]{report.warning_count}[/yellow]")
        self.console.print(
            Panel("\n".join(lines), title="[bold cyan]Dependency Report[/bold cyan]", expand=False)
        )

    def _print_most_referenced(self, report: AnalysisReport, display_path: PathResolver) -> None:
        if not report.most_referenced:
            self.console.print("[dim]No asset is referenced by more than one other asset.[/dim]")
            return
        table = Table(title="Most referenced assets")
        table.add_column("Asset", style="bold")
        table.add_column("References", justify="right", style="cyan")
        table.add_column("Path", style="dim")
        for asset_id, count in report.most_referenced:
            path = display_path(asset_id)
            table.add_row(_file_name(path), str(count), path)
        self.console.print(table)

    def _print_orphans(self, report: AnalysisReport, display_path: PathResolver) -> None:
        if not report.orphaned:
            self.console.print("[green]No unreferenced assets.[/green]")
            return
        table = Table(title="Unreferenced assets")
        table.add_column("Asset", style="bold")
        table.add_column("Path", style="dim")
        for asset_id in report.orphaned:
            path = display_path(asset_id)
            table.add_row(_file_name(path), path)
        self.console.print(table)

    def _print_cycles(self, report: AnalysisReport, display_path: PathResolver) -> None:
        if not report.cycles and not report.cycle_groups:
            self.console.print("[green]No circular references.[/green]")
            return
        if report.cycles:
            table = Table(title="Mutual references")
            table.add_column("Asset", style="red")
            table.add_column("")
            table.add_column("Asset", style="red")
            for a, b in report.cycles:
                table.add_row(display_path(a), "↔", display_path(b))
            self.console.print(table)
        longer = [g for g in report.cycle_groups if len(g) > 2]
        for group in longer:
            chain = " → ".join(display_path(a) for a in group)
            self.console.print(f"[red]Cycle ({len(group)} assets):[/red] {chain}")

    def _print_warnings(self, report: AnalysisReport, display_path: PathResolver) -> None:
        table = Table(title="Lookup errors (treated as no dependencies)")
        table.add_column("Asset", style="yellow")
        table.add_column("Reason")
        for warning in report.warnings:
            table.add_row(display_path(warning.asset_id), warning.reason)
        self.console.print(table)
