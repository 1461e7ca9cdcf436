"""
Asset RefGraph - Asset Reference Graph Analyzer

Builds forward and reverse reference maps over an asset corpus (prefabs,
materials, textures, bundle entries...) keyed by stable identities, caches
per-asset dependency lists between runs, and reports the most referenced
assets, unreferenced assets and circular references.
"""

__version__ = "0.1.0"

from .api import RefGraph
from .cache import DependencyCache
from .config import AnalysisConfig, load_config
from .graph import CancellationToken, DependencyGraphBuilder, GraphAnalyzer
from .models import AnalysisReport, BuildResult, DependencyRecord
from .session import AnalysisSession, SessionState
from .source import AssetEntry, AssetSource, InMemoryAssetSource, ManifestAssetSource

__all__ = [
    "RefGraph",  # Main entry point
    "AnalysisSession",
    "SessionState",
    "DependencyGraphBuilder",
    "GraphAnalyzer",
    "CancellationToken",
    "DependencyCache",
    "DependencyRecord",
    "BuildResult",
    "AnalysisReport",
    "AnalysisConfig",
    "load_config",
    "AssetSource",
    "AssetEntry",
    "InMemoryAssetSource",
    "ManifestAssetSource",
]
