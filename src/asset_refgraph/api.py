"""Public API for Asset RefGraph.

A RefGraph host owns the asset source, the dependency cache and the
configuration for the lifetime of the application, and hands out
analysis sessions.

Example:
    >>> from asset_refgraph import RefGraph, ManifestAssetSource
    >>> from asset_refgraph.api import get_report
    >>>
    >>> with RefGraph(ManifestAssetSource("assets.json")) as graph:
    ...     session = graph.start_analysis()          # analyze all
    ...     report = get_report(session)
    ...     report.most_referenced[:3]
    [('9c0e', 14), ('1b2d', 9), ('77aa', 9)]
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from .cache import DependencyCache
from .config import AnalysisConfig, load_config
from .graph.builder import DependencyGraphBuilder
from .logging_config import get_logger
from .models import AnalysisReport
from .session import AnalysisSession
from .source import AssetSource

logger = get_logger(__name__)


class RefGraph:
    """Application-level host for dependency analysis.

    Args:
        source: Where identities, dependencies and fingerprints come from
        config: Analysis configuration (default: load_config())
        cache: Explicit cache; by default one is created from the config
            (on disk under cache_dir, or in memory when caching is disabled)
    """

    def __init__(
        self,
        source: AssetSource,
        config: Optional[AnalysisConfig] = None,
        cache: Optional[DependencyCache] = None,
    ):
        self.source = source
        self.config = config if config is not None else load_config()
        if cache is None:
            directory = Path(self.config.cache_dir) if self.config.cache_enabled else None
            cache = DependencyCache(directory)
        self.cache = cache

    def builder(self) -> DependencyGraphBuilder:
        return DependencyGraphBuilder(self.source, self.cache, workers=self.config.workers)

    def new_session(self) -> AnalysisSession:
        return AnalysisSession(self.builder(), config=self.config)

    def start_analysis(
        self, asset_set: Iterable[str] = (), background: bool = False
    ) -> AnalysisSession:
        """Analyze asset_set (empty = every known asset) in a new session."""
        session = self.new_session()
        return session.start(asset_set, background=background)

    def clear_cache(self) -> None:
        self.cache.clear()

    def close(self) -> None:
        self.cache.close()

    def __enter__(self) -> RefGraph:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def cancel(session: AnalysisSession) -> None:
    session.cancel()


def poll_progress(session: AnalysisSession) -> Optional[tuple[int, int]]:
    return session.poll_progress()


def get_report(session: AnalysisSession) -> Optional[AnalysisReport]:
    return session.report
