"""Analysis-related exceptions: asset lookup, source access, graph invariants."""

from typing import Any, Optional

from .base import RefGraphError


class AnalysisError(RefGraphError):
    """Base class for analysis-related errors."""
    pass


class AssetLookupError(AnalysisError, LookupError):
    """Raised by an asset source when an identity is unknown."""

    def __init__(self, asset_id: str, reason: str = "unknown asset identity"):
        super().__init__(
            f"Cannot resolve asset: {asset_id}",
            details={"asset_id": asset_id, "reason": reason},
        )
        self.asset_id = asset_id
        self.reason = reason


class SourceUnavailableError(AnalysisError):
    """Raised when the asset source as a whole cannot be reached.

    This is fatal for a build, unlike a lookup failure for a single asset.
    """

    def __init__(self, reason: str, location: Optional[str] = None):
        details = {"reason": reason}
        if location:
            details["location"] = location

        super().__init__(f"Asset source unavailable: {reason}", details=details)
        self.reason = reason
        self.location = location


class GraphInvariantError(AnalysisError):
    """Raised when graph input breaks a structural invariant."""

    def __init__(self, reason: str, value: Any = None):
        details = {"reason": reason}
        if value is not None:
            details["value"] = repr(value)

        super().__init__(f"Graph invariant violated: {reason}", details=details)
        self.reason = reason
        self.value = value


class SessionBusyError(AnalysisError):
    """Raised when a session is asked to start while a build is running."""

    def __init__(self, state: str):
        super().__init__(
            "Analysis session is already building",
            details={"state": state},
        )
        self.state = state
