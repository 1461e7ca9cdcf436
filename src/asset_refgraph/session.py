"""Analysis session management for Asset RefGraph.

An AnalysisSession owns one analysis invocation at a time: the requested
asset set, the built maps, the derived report and the cancellation flag.

States:
    IDLE -> BUILDING -> {COMPLETED, CANCELLED, FAILED}

A session is reusable: start() from any state except BUILDING discards
the previous outcome and builds again.

Example:
    >>> session = AnalysisSession(DependencyGraphBuilder(source, cache))
    >>> session.start(["a1f3", "9c0e"])
    >>> session.state
    <SessionState.COMPLETED: 'completed'>
    >>> session.report.most_referenced
    ()
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional

from .exceptions import RefGraphError, SessionBusyError
from .graph.analyzer import ExcludePredicate, GraphAnalyzer, suffix_excluder
from .graph.builder import CancellationToken
from .logging_config import get_logger
from .report import build_report

if TYPE_CHECKING:
    from .config import AnalysisConfig
    from .graph.builder import DependencyGraphBuilder
    from .models import AnalysisReport, BuildResult

logger = get_logger(__name__)


class SessionState(Enum):
    """Lifecycle state of an analysis session."""

    IDLE = "idle"
    BUILDING = "building"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class AnalysisSession:
    """One analysis at a time over a builder, with observable progress.

    Thread-safe: the build may run on a background thread while callers
    poll progress, cancel or read the outcome.

    Attributes:
        builder: Graph builder bound to a source and a cache
        config: Report limits and orphan exclusions (None = defaults)
    """

    def __init__(
        self,
        builder: DependencyGraphBuilder,
        config: Optional[AnalysisConfig] = None,
        orphan_exclude: Optional[ExcludePredicate] = None,
    ) -> None:
        self.builder = builder
        self.config = config
        self._orphan_exclude = orphan_exclude

        self._lock = threading.RLock()
        self._state = SessionState.IDLE
        self._token: Optional[CancellationToken] = None
        self._progress: tuple[int, int] = (0, 0)
        self._result: Optional[BuildResult] = None
        self._report: Optional[AnalysisReport] = None
        self._failure: Optional[Exception] = None
        self._thread: Optional[threading.Thread] = None
        self.requested: list[str] = []

    # ── State ────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def report(self) -> Optional[AnalysisReport]:
        """The report of the last build, only once COMPLETED."""
        with self._lock:
            return self._report if self._state is SessionState.COMPLETED else None

    @property
    def result(self) -> Optional[BuildResult]:
        """Forward and reverse maps of the last build, only once COMPLETED."""
        with self._lock:
            return self._result if self._state is SessionState.COMPLETED else None

    @property
    def failure(self) -> Optional[Exception]:
        """Why the last build failed, only in FAILED."""
        with self._lock:
            return self._failure if self._state is SessionState.FAILED else None

    def analyzer(self) -> Optional[GraphAnalyzer]:
        result = self.result
        return GraphAnalyzer.from_build(result) if result is not None else None

    # ── Control ──────────────────────────────────────────────────────

    def start(self, asset_set: Iterable[str] = (), background: bool = False) -> AnalysisSession:
        """Start a build over asset_set (empty = every known asset).

        Raises:
            SessionBusyError: If a build is already running
        """
        requested = list(asset_set)
        with self._lock:
            if self._state is SessionState.BUILDING:
                raise SessionBusyError(self._state.value)
            self._state = SessionState.BUILDING
            self._token = CancellationToken()
            self._progress = (0, 0)
            self._result = None
            self._report = None
            self._failure = None
            self.requested = requested
            token = self._token

        if background:
            self._thread = threading.Thread(
                target=self._run, args=(requested, token), name="refgraph-session", daemon=True
            )
            self._thread.start()
        else:
            self._thread = None
            self._run(requested, token)
        return self

    def cancel(self) -> None:
        """Request cancellation; takes effect at the next asset boundary."""
        with self._lock:
            if self._state is SessionState.BUILDING and self._token is not None:
                logger.info("Cancellation requested")
                self._token.cancel()

    def poll_progress(self) -> Optional[tuple[int, int]]:
        """(processed, total) while building, otherwise None."""
        with self._lock:
            if self._state is not SessionState.BUILDING:
                return None
            return self._progress

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait for a background build. Returns False on timeout."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    # ── Internals ────────────────────────────────────────────────────

    def _on_start(self, total: int) -> None:
        with self._lock:
            self._progress = (0, total)

    def _on_progress(self, processed: int, total: int) -> bool:
        with self._lock:
            self._progress = (processed, total)
        return False

    def _run(self, requested: list[str], token: CancellationToken) -> None:
        try:
            result = self.builder.build(
                requested, progress=self._on_progress, cancel_token=token, on_start=self._on_start
            )
            if result.cancelled:
                with self._lock:
                    self._state = SessionState.CANCELLED
                return
            report = self._make_report(result)
        except RefGraphError as e:
            logger.error(f"Analysis failed: {e}")
            self._fail(e)
            return
        except Exception as e:
            logger.exception("Analysis failed unexpectedly")
            self._fail(e)
            return

        with self._lock:
            self._result = result
            self._report = report
            self._state = SessionState.COMPLETED

    def _fail(self, error: Exception) -> None:
        with self._lock:
            self._failure = error
            self._state = SessionState.FAILED

    def _make_report(self, result: BuildResult) -> AnalysisReport:
        if self.config is None:
            return build_report(result, orphan_exclude=self._orphan_exclude)

        exclude = self._orphan_exclude
        if exclude is None:
            exclude = suffix_excluder(
                self.config.orphan_exclude_suffixes, self.builder.source.get_display_path
            )
        return build_report(
            result,
            most_referenced_limit=self.config.most_referenced_limit,
            orphan_exclude=exclude,
            orphan_limit=self.config.orphan_cap,
        )
