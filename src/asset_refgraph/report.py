"""Assemble an AnalysisReport from a completed build."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .graph.analyzer import ExcludePredicate, GraphAnalyzer
from .models import AnalysisReport, BuildResult


def build_report(
    result: BuildResult,
    most_referenced_limit: int = 10,
    orphan_exclude: Optional[ExcludePredicate] = None,
    orphan_limit: Optional[int] = 20,
    now: Optional[datetime] = None,
) -> AnalysisReport:
    """Run every analyzer query once and freeze the answers.

    Raises:
        ValueError: If the build was cancelled (partial maps are not reported)
    """
    if result.cancelled:
        raise ValueError("cannot report on a cancelled build")

    analyzer = GraphAnalyzer.from_build(result)
    return AnalysisReport(
        most_referenced=tuple(analyzer.most_referenced(most_referenced_limit)),
        orphaned=tuple(analyzer.orphaned(exclude=orphan_exclude, limit=orphan_limit)),
        cycles=tuple(analyzer.cycles()),
        scanned_count=result.processed,
        timestamp=now or datetime.now(),
        total_count=result.total,
        edge_count=result.edge_count,
        cycle_groups=tuple(analyzer.cycle_groups()),
        warnings=tuple(result.warnings),
    )
