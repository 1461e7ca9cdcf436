"""Reference graph construction and queries."""

from .analyzer import GraphAnalyzer, suffix_excluder, tarjan_scc
from .builder import CancellationToken, DependencyGraphBuilder

__all__ = [
    "CancellationToken",
    "DependencyGraphBuilder",
    "GraphAnalyzer",
    "suffix_excluder",
    "tarjan_scc",
]
