"""Exception hierarchy for Asset RefGraph."""

from .analysis import (
    AnalysisError,
    AssetLookupError,
    GraphInvariantError,
    SessionBusyError,
    SourceUnavailableError,
)
from .base import RefGraphError
from .config import ConfigurationError, InvalidConfigError

__all__ = [
    "RefGraphError",
    "AnalysisError",
    "AssetLookupError",
    "SourceUnavailableError",
    "GraphInvariantError",
    "SessionBusyError",
    "ConfigurationError",
    "InvalidConfigError",
]
