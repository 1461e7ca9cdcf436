"""Data models for asset reference analysis.

Asset identities are plain strings (GUIDs or content hashes). Display paths
are never used as keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

AssetId = str
ForwardMap = dict[str, set[str]]
ReverseMap = dict[str, set[str]]

# Bumped whenever the persisted record layout changes
RECORD_FORMAT = 1


@dataclass(frozen=True)
class DependencyRecord:
    """Last computed direct dependencies of one asset at one fingerprint."""

    owner: AssetId
    direct_deps: tuple[AssetId, ...]
    fingerprint: str

    @classmethod
    def create(cls, owner: AssetId, deps: Iterable[AssetId], fingerprint: str) -> DependencyRecord:
        """Build a record, dropping self references and duplicates (first wins)."""
        cleaned = tuple(dict.fromkeys(d for d in deps if d != owner))
        return cls(owner=owner, direct_deps=cleaned, fingerprint=fingerprint)

    def to_dict(self) -> dict:
        return {
            "format": RECORD_FORMAT,
            "owner": self.owner,
            "direct_deps": list(self.direct_deps),
            "fingerprint": self.fingerprint,
        }

    @classmethod
    def from_dict(cls, data: dict) -> DependencyRecord:
        """Rebuild a record from its stored form.

        Raises:
            ValueError: If the payload is not a record of the current format
        """
        if not isinstance(data, dict) or data.get("format") != RECORD_FORMAT:
            raise ValueError("unsupported record format")
        owner = data["owner"]
        deps = data["direct_deps"]
        fingerprint = data["fingerprint"]
        if not isinstance(owner, str) or not isinstance(fingerprint, str):
            raise ValueError("record owner and fingerprint must be strings")
        if not isinstance(deps, list) or not all(isinstance(d, str) for d in deps):
            raise ValueError("record dependencies must be a list of strings")
        return cls(owner=owner, direct_deps=tuple(deps), fingerprint=fingerprint)


@dataclass(frozen=True)
class BuildWarning:
    """A per-asset failure tolerated during a build."""

    asset_id: AssetId
    reason: str


@dataclass
class BuildResult:
    """Forward and reverse maps produced by one build.

    Edges are directed: forward[A] contains B means A references B, and
    then reverse[B] contains A. reverse may hold keys outside the
    requested set.
    """

    requested: list[AssetId] = field(default_factory=list)
    forward: ForwardMap = field(default_factory=dict)
    reverse: ReverseMap = field(default_factory=dict)
    cancelled: bool = False
    processed: int = 0
    total: int = 0
    cache_hits: int = 0
    warnings: list[BuildWarning] = field(default_factory=list)

    @property
    def edge_count(self) -> int:
        return sum(len(deps) for deps in self.forward.values())


@dataclass(frozen=True)
class AnalysisReport:
    """Immutable summary of one completed analysis."""

    most_referenced: tuple[tuple[AssetId, int], ...]
    orphaned: tuple[AssetId, ...]
    cycles: tuple[tuple[AssetId, AssetId], ...]
    scanned_count: int
    timestamp: datetime
    total_count: int = 0
    edge_count: int = 0
    cycle_groups: tuple[tuple[AssetId, ...], ...] = ()
    warnings: tuple[BuildWarning, ...] = ()

    @property
    def warning_count(self) -> int:
        return len(self.warnings)
