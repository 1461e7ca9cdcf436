"""Dependency graph construction from per-asset dependency lists."""

from __future__ import annotations

import itertools
import threading
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional

from ..cache import DependencyCache
from ..exceptions import GraphInvariantError, RefGraphError, SourceUnavailableError
from ..logging_config import get_logger
from ..models import BuildResult, BuildWarning, DependencyRecord
from ..source import AssetSource

logger = get_logger(__name__)

# Called with (processed, total) after each asset; a truthy return cancels.
ProgressCallback = Callable[[int, int], Optional[bool]]


class CancellationToken:
    """Cooperative cancellation flag shared between a caller and a build."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass(frozen=True)
class _Resolved:
    """Outcome of resolving one asset, produced on a worker thread."""

    asset_id: str
    deps: tuple[str, ...]
    record: Optional[DependencyRecord] = None  # new record to persist
    from_cache: bool = False
    error: Optional[str] = None


class DependencyGraphBuilder:
    """Builds forward and reverse maps for a set of assets.

    Unchanged assets (same fingerprint as their cached record) are not
    fetched again. With workers > 1 the per-asset lookups run on a thread
    pool while this thread folds results in input order, so maps, cache
    writes and progress reports are the same as in sequential mode.
    """

    def __init__(
        self,
        source: AssetSource,
        cache: Optional[DependencyCache] = None,
        workers: int = 1,
    ):
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.source = source
        self.cache = cache
        self.workers = workers

    def build(
        self,
        asset_ids: Iterable[str] = (),
        progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
        on_start: Optional[Callable[[int], None]] = None,
    ) -> BuildResult:
        """Build the graph for asset_ids (empty = every known asset).

        on_start receives the normalized request size before any asset is
        resolved.

        Raises:
            SourceUnavailableError: If the source cannot be reached at all
            GraphInvariantError: If an identity is not a non-empty string
        """
        requested = self._normalize(asset_ids)
        result = BuildResult(requested=requested, total=len(requested))
        logger.debug(f"Building dependency graph for {result.total} assets")
        if on_start is not None:
            on_start(result.total)

        if cancel_token is not None and cancel_token.cancelled:
            result.cancelled = True
            return result

        resolved_iter = self._iter_resolved(requested)
        try:
            for resolved in resolved_iter:
                self._fold(result, resolved)
                result.processed += 1

                stop = bool(progress(result.processed, result.total)) if progress else False
                if stop or (cancel_token is not None and cancel_token.cancelled):
                    result.cancelled = True
                    break
        finally:
            resolved_iter.close()

        if result.cancelled:
            logger.info(f"Build cancelled after {result.processed}/{result.total} assets")
        else:
            logger.info(
                f"Built graph: {result.processed} assets, {result.edge_count} edges, "
                f"{result.cache_hits} cached, {len(result.warnings)} warnings"
            )
        return result

    def _normalize(self, asset_ids: Iterable[str]) -> list[str]:
        ids = list(asset_ids)
        _check_ids(ids)
        if ids:
            return list(dict.fromkeys(ids))

        try:
            ids = list(self.source.list_all_identities())
        except RefGraphError:
            raise
        except Exception as e:
            raise SourceUnavailableError(f"cannot enumerate assets: {e}") from e
        _check_ids(ids)
        return list(dict.fromkeys(ids))

    def _iter_resolved(self, requested: list[str]) -> Iterator[_Resolved]:
        """Yield resolved assets in input order."""
        if self.workers == 1:
            for asset_id in requested:
                yield self._resolve(asset_id)
            return

        executor = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="refgraph")
        ids = iter(requested)
        pending = deque(
            executor.submit(self._resolve, asset_id)
            for asset_id in itertools.islice(ids, self.workers * 2)
        )
        try:
            while pending:
                resolved = pending.popleft().result()
                next_id = next(ids, None)
                if next_id is not None:
                    pending.append(executor.submit(self._resolve, next_id))
                yield resolved
        finally:
            # In-flight lookups finish; queued ones are dropped unwritten
            executor.shutdown(wait=True, cancel_futures=True)

    def _resolve(self, asset_id: str) -> _Resolved:
        try:
            fingerprint = str(self.source.get_fingerprint(asset_id))
            cached = self.cache.get(asset_id) if self.cache is not None else None
            if cached is not None and cached.fingerprint == fingerprint:
                logger.debug(f"Cache hit: {asset_id}")
                return _Resolved(asset_id, cached.direct_deps, from_cache=True)

            deps = list(self.source.get_direct_dependencies(asset_id))
        except (SourceUnavailableError, GraphInvariantError):
            raise
        except Exception as e:
            logger.warning(f"Failed to resolve dependencies of {asset_id}: {e}")
            return _Resolved(asset_id, (), error=str(e) or type(e).__name__)

        _check_ids(deps)
        record = DependencyRecord.create(asset_id, deps, fingerprint)
        return _Resolved(asset_id, record.direct_deps, record=record)

    def _fold(self, result: BuildResult, resolved: _Resolved) -> None:
        asset_id = resolved.asset_id
        deps = set(resolved.deps)
        result.forward[asset_id] = deps
        for dep in deps:
            result.reverse.setdefault(dep, set()).add(asset_id)

        if resolved.record is not None and self.cache is not None:
            self.cache.put(asset_id, resolved.record)
        if resolved.from_cache:
            result.cache_hits += 1
        if resolved.error is not None:
            result.warnings.append(BuildWarning(asset_id=asset_id, reason=resolved.error))


def _check_ids(ids: list) -> None:
    for value in ids:
        if not isinstance(value, str) or not value:
            raise GraphInvariantError("asset identities must be non-empty strings", value)
