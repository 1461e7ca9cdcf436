"""
Dependency record cache for Asset RefGraph.

Uses diskcache for SQLite-based persistent caching, or a locked dict when
no directory is given. Every storage failure degrades to a cache miss.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional, Union

from diskcache import Cache

from .logging_config import get_logger
from .models import DependencyRecord

logger = get_logger(__name__)


class DependencyCache:
    """
    Per-asset store of the last computed direct-dependency list.

    Features:
    - Records keyed by asset identity, validated by fingerprint at read time
    - Atomic upsert per key (readers never see a partial record)
    - Safe to share between sessions and threads
    - Corrupt or unreadable entries behave as absent
    """

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        """
        Initialize cache.

        Args:
            directory: Directory for on-disk storage; None keeps records
                in memory for the lifetime of this object
        """
        self.directory = str(directory) if directory is not None else None
        self._lock = threading.Lock()
        self._memory: dict[str, dict] = {}
        self._disk: Optional[Cache] = None

        if self.directory is not None:
            try:
                self._disk = Cache(self.directory)
                logger.debug(f"Dependency cache opened at {self.directory}")
            except Exception as e:
                # Unusable directory: run cold for this process
                logger.warning(f"Cache unavailable at {self.directory}, using memory: {e}")
                self._disk = None

    @property
    def persistent(self) -> bool:
        return self._disk is not None

    def get(self, asset_id: str) -> Optional[DependencyRecord]:
        """
        Look up the stored record for an asset.

        Args:
            asset_id: Asset identity

        Returns:
            The record, or None if absent, unreadable or malformed
        """
        try:
            raw = self._read(asset_id)
        except Exception as e:
            logger.warning(f"Cache get failed for {asset_id}: {e}")
            return None

        if raw is None:
            return None

        try:
            record = DependencyRecord.from_dict(raw)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Dropping corrupt cache entry for {asset_id}: {e}")
            self.invalidate(asset_id)
            return None

        if record.owner != asset_id:
            logger.warning(f"Dropping cache entry for {asset_id} owned by {record.owner}")
            self.invalidate(asset_id)
            return None

        return record

    def put(self, asset_id: str, record: DependencyRecord) -> None:
        """
        Store a record, replacing any previous one for the asset.

        Args:
            asset_id: Asset identity
            record: Record to store
        """
        payload = record.to_dict()
        try:
            if self._disk is not None:
                self._disk.set(asset_id, payload)
            else:
                with self._lock:
                    self._memory[asset_id] = payload
        except Exception as e:
            logger.warning(f"Cache put failed for {asset_id}: {e}")

    def invalidate(self, asset_id: str) -> None:
        """Remove the record for one asset, if any."""
        try:
            if self._disk is not None:
                self._disk.delete(asset_id)
            else:
                with self._lock:
                    self._memory.pop(asset_id, None)
        except Exception as e:
            logger.warning(f"Cache invalidate failed for {asset_id}: {e}")

    def clear(self) -> None:
        """Remove all records."""
        try:
            if self._disk is not None:
                self._disk.clear()
            else:
                with self._lock:
                    self._memory.clear()
            logger.info("Dependency cache cleared")
        except Exception as e:
            logger.warning(f"Cache clear failed: {e}")

    def __contains__(self, asset_id: str) -> bool:
        return self.get(asset_id) is not None

    def __len__(self) -> int:
        try:
            if self._disk is not None:
                return len(self._disk)
            with self._lock:
                return len(self._memory)
        except Exception as e:
            logger.warning(f"Cache size failed: {e}")
            return 0

    def stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache stats
        """
        if self._disk is None:
            return {"persistent": False, "size": len(self)}

        try:
            return {
                "persistent": True,
                "size": len(self._disk),
                "directory": self._disk.directory,
                "volume": self._disk.volume(),
            }
        except Exception as e:
            logger.warning(f"Cache stats failed: {e}")
            return {"persistent": True, "error": str(e)}

    def close(self) -> None:
        """Close cache (cleanup)."""
        if self._disk is not None:
            self._disk.close()

    def __enter__(self) -> DependencyCache:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _read(self, asset_id: str) -> Optional[dict]:
        if self._disk is not None:
            return self._disk.get(asset_id)
        with self._lock:
            return self._memory.get(asset_id)
