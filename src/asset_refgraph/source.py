"""Asset sources: where identities, dependencies and fingerprints come from.

The graph engine only talks to the AssetSource protocol. Two concrete
sources are provided: an in-memory one (tests, embedding) and one backed
by a JSON manifest exported from an asset database:

    {
      "assets": [
        {"id": "a1f3", "path": "Assets/UI/Button.prefab",
         "deps": ["9c0e"], "fingerprint": "v7"}
      ]
    }
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Protocol, Sequence, runtime_checkable

from .exceptions import AssetLookupError, SourceUnavailableError
from .logging_config import get_logger

logger = get_logger(__name__)


@runtime_checkable
class AssetSource(Protocol):
    """Lookup interface consumed by the graph builder."""

    def list_all_identities(self) -> Sequence[str]:
        ...

    def get_direct_dependencies(self, asset_id: str) -> Sequence[str]:
        """Raises LookupError if asset_id is unknown."""
        ...

    def get_display_path(self, asset_id: str) -> str:
        ...

    def get_fingerprint(self, asset_id: str) -> str:
        ...


@dataclass(frozen=True)
class AssetEntry:
    """One asset as known to a concrete source."""

    asset_id: str
    path: str = ""
    deps: tuple[str, ...] = field(default_factory=tuple)
    fingerprint: Optional[str] = None

    def effective_fingerprint(self) -> str:
        if self.fingerprint is not None:
            return self.fingerprint
        digest = hashlib.sha256()
        digest.update(self.path.encode("utf-8"))
        for dep in self.deps:
            digest.update(b"\0")
            digest.update(str(dep).encode("utf-8"))
        return digest.hexdigest()[:16]


class InMemoryAssetSource:
    """Asset source over a fixed set of entries."""

    def __init__(self, entries: Iterable[AssetEntry] = ()):
        self._entries: dict[str, AssetEntry] = {}
        for entry in entries:
            self._entries[entry.asset_id] = entry

    @classmethod
    def from_mapping(cls, deps: dict[str, Sequence[str]]) -> InMemoryAssetSource:
        """Shortcut: {id: [dep ids]} with the id doubling as display path."""
        return cls(AssetEntry(asset_id=k, path=k, deps=tuple(v)) for k, v in deps.items())

    def upsert(self, entry: AssetEntry) -> None:
        self._entries[entry.asset_id] = entry

    def remove(self, asset_id: str) -> None:
        self._entries.pop(asset_id, None)

    def _entry(self, asset_id: str) -> AssetEntry:
        try:
            return self._entries[asset_id]
        except KeyError:
            raise AssetLookupError(asset_id) from None

    def list_all_identities(self) -> list[str]:
        return list(self._entries)

    def get_direct_dependencies(self, asset_id: str) -> list[str]:
        return list(self._entry(asset_id).deps)

    def get_display_path(self, asset_id: str) -> str:
        entry = self._entries.get(asset_id)
        return entry.path if entry is not None and entry.path else asset_id

    def get_fingerprint(self, asset_id: str) -> str:
        return self._entry(asset_id).effective_fingerprint()


class ManifestAssetSource(InMemoryAssetSource):
    """Asset source loaded from a JSON manifest file.

    Raises:
        SourceUnavailableError: If the manifest is missing or malformed
    """

    def __init__(self, manifest_path: str | Path):
        self.manifest_path = Path(manifest_path)
        super().__init__(self._load())
        logger.debug(f"Loaded {len(self._entries)} assets from {self.manifest_path}")

    def _load(self) -> list[AssetEntry]:
        try:
            raw = json.loads(self.manifest_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise SourceUnavailableError(str(e), location=str(self.manifest_path)) from e
        except json.JSONDecodeError as e:
            raise SourceUnavailableError(
                f"invalid JSON: {e}", location=str(self.manifest_path)
            ) from e

        assets = raw.get("assets") if isinstance(raw, dict) else None
        if not isinstance(assets, list):
            raise SourceUnavailableError(
                "manifest must contain an 'assets' list", location=str(self.manifest_path)
            )

        entries = []
        for index, item in enumerate(assets):
            try:
                entries.append(_parse_entry(item))
            except (KeyError, TypeError, ValueError) as e:
                raise SourceUnavailableError(
                    f"bad asset entry #{index}: {e}", location=str(self.manifest_path)
                ) from e
        return entries


def _parse_entry(item: dict) -> AssetEntry:
    asset_id = item["id"]
    if not isinstance(asset_id, str) or not asset_id:
        raise ValueError("'id' must be a non-empty string")
    deps = item.get("deps", [])
    if not isinstance(deps, list):
        raise ValueError("'deps' must be a list")
    fingerprint = item.get("fingerprint")
    return AssetEntry(
        asset_id=asset_id,
        path=str(item.get("path", "")),
        deps=tuple(deps),
        fingerprint=str(fingerprint) if fingerprint is not None else None,
    )
