"""Shared test fixtures for Asset RefGraph tests."""

import pytest

from asset_refgraph.cache import DependencyCache
from asset_refgraph.exceptions import AssetLookupError, SourceUnavailableError
from asset_refgraph.source import AssetEntry, InMemoryAssetSource


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


class CountingSource(InMemoryAssetSource):
    """In-memory source that records dependency fetches and can fail on demand."""

    def __init__(self, entries=(), failing=()):
        super().__init__(entries)
        self.fetches: list[str] = []
        self.failing = set(failing)

    def get_direct_dependencies(self, asset_id):
        self.fetches.append(asset_id)
        if asset_id in self.failing:
            raise AssetLookupError(asset_id, "simulated failure")
        return super().get_direct_dependencies(asset_id)


class UnreachableSource(InMemoryAssetSource):
    """Source whose backing store is gone."""

    def list_all_identities(self):
        raise ConnectionError("asset database offline")

    def get_fingerprint(self, asset_id):
        raise SourceUnavailableError("asset database offline")


def make_source(deps: dict, failing=(), paths=None) -> CountingSource:
    paths = paths or {}
    return CountingSource(
        (AssetEntry(asset_id=k, path=paths.get(k, k), deps=tuple(v)) for k, v in deps.items()),
        failing=failing,
    )


@pytest.fixture
def cycle_source():
    """A -> B, B -> C, C -> B."""
    return make_source({"A": ["B"], "B": ["C"], "C": ["B"]})


@pytest.fixture
def chain_source():
    """a -> b -> c -> d -> e."""
    return make_source({"a": ["b"], "b": ["c"], "c": ["d"], "d": ["e"], "e": []})


@pytest.fixture
def memory_cache():
    return DependencyCache()


@pytest.fixture
def disk_cache(tmp_path):
    with DependencyCache(tmp_path / "cache") as cache:
        yield cache


@pytest.fixture
def source_factory():
    """Build a CountingSource from {id: [deps]}."""
    return make_source


@pytest.fixture
def unreachable_source():
    return UnreachableSource([AssetEntry("a"), AssetEntry("b")])
