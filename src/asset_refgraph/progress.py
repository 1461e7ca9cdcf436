"""Progress reporting: follow a background session with Rich or silently."""

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from .session import AnalysisSession

POLL_INTERVAL = 0.1


class ProgressReporter:
    """Rich progress bar driven by AnalysisSession.poll_progress()."""

    def __init__(self, console: Console):
        self.console = console

    def follow(self, session: AnalysisSession, description: str = "Analyzing dependencies"):
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            task = progress.add_task(description, total=None)
            try:
                while not session.wait(POLL_INTERVAL):
                    polled = session.poll_progress()
                    if polled is not None:
                        processed, total = polled
                        progress.update(task, completed=processed, total=total or None)
            except KeyboardInterrupt:
                progress.update(task, description="Cancelling")
                session.cancel()
                session.wait()
        return session


class SilentReporter:
    """No-op reporter for tests and --quiet mode."""

    def follow(self, session: AnalysisSession, description: str = ""):
        try:
            session.wait()
        except KeyboardInterrupt:
            session.cancel()
            session.wait()
        return session
