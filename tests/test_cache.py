"""Tests for the dependency record cache."""

import pytest

from asset_refgraph.cache import DependencyCache
from asset_refgraph.models import DependencyRecord


@pytest.fixture(params=["memory", "disk"])
def cache(request, tmp_path):
    if request.param == "memory":
        yield DependencyCache()
    else:
        with DependencyCache(tmp_path / "cache") as disk:
            yield disk


class TestDependencyCache:
    """Test basic cache operations in both modes."""

    def test_get_missing_returns_none(self, cache):
        """An unknown identity reads as absent."""
        assert cache.get("nope") is None
        assert "nope" not in cache

    def test_put_and_get(self, cache):
        """A stored record reads back unchanged."""
        record = DependencyRecord.create("a", ["b", "c"], "v1")
        cache.put("a", record)
        assert cache.get("a") == record
        assert len(cache) == 1

    def test_put_overwrites(self, cache):
        """A second put replaces the first."""
        cache.put("a", DependencyRecord.create("a", ["b"], "v1"))
        cache.put("a", DependencyRecord.create("a", ["c"], "v2"))
        record = cache.get("a")
        assert record.direct_deps == ("c",)
        assert record.fingerprint == "v2"

    def test_invalidate(self, cache):
        """invalidate drops a single record."""
        cache.put("a", DependencyRecord.create("a", [], "v1"))
        cache.put("b", DependencyRecord.create("b", [], "v1"))
        cache.invalidate("a")
        cache.invalidate("missing")  # no error
        assert cache.get("a") is None
        assert cache.get("b") is not None

    def test_clear(self, cache):
        """clear drops every record."""
        for name in "abc":
            cache.put(name, DependencyRecord.create(name, [], "v1"))
        cache.clear()
        assert len(cache) == 0
        assert cache.get("a") is None


class TestPersistence:
    """Test on-disk behavior and corruption handling."""

    def test_records_survive_reopen(self, tmp_path):
        """Records written by one instance are visible to the next."""
        with DependencyCache(tmp_path / "cache") as cache:
            cache.put("a", DependencyRecord.create("a", ["b"], "v1"))

        with DependencyCache(tmp_path / "cache") as cache:
            assert cache.get("a") == DependencyRecord("a", ("b",), "v1")
            assert cache.persistent

    def test_corrupt_entry_is_absent_and_dropped(self, tmp_path):
        """Undecodable entries read as absent and are removed."""
        with DependencyCache(tmp_path / "cache") as cache:
            cache._disk.set("a", {"format": 1, "owner": "a", "direct_deps": "oops"})
            assert cache.get("a") is None
            assert len(cache) == 0

    def test_old_format_is_absent(self, tmp_path):
        """Records from another format version read as absent."""
        with DependencyCache(tmp_path / "cache") as cache:
            cache._disk.set("a", {"format": 0, "owner": "a", "direct_deps": [], "fingerprint": "x"})
            assert cache.get("a") is None

    def test_foreign_owner_is_absent(self, memory_cache):
        """A record stored under the wrong identity reads as absent."""
        memory_cache.put("a", DependencyRecord.create("b", [], "v1"))
        assert memory_cache.get("a") is None

    def test_unusable_directory_falls_back_to_memory(self, tmp_path):
        """An unusable directory falls back to memory."""
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file in the way")
        cache = DependencyCache(blocker / "cache")
        assert not cache.persistent
        cache.put("a", DependencyRecord.create("a", [], "v1"))
        assert cache.get("a") is not None

    def test_stats(self, disk_cache, memory_cache):
        """stats reports persistence and size."""
        disk_cache.put("a", DependencyRecord.create("a", [], "v1"))
        stats = disk_cache.stats()
        assert stats["persistent"] is True
        assert stats["size"] == 1
        assert memory_cache.stats() == {"persistent": False, "size": 0}


class TestDependencyRecord:
    """Test DependencyRecord construction and serialization."""

    def test_create_strips_self_and_duplicates(self):
        """create drops self references and repeats."""
        record = DependencyRecord.create("a", ["b", "a", "c", "b"], "v1")
        assert record.direct_deps == ("b", "c")

    def test_round_trip_dict(self):
        """to_dict output loads back through from_dict."""
        record = DependencyRecord.create("a", ["b"], "v1")
        assert DependencyRecord.from_dict(record.to_dict()) == record

    def test_from_dict_rejects_garbage(self):
        """Malformed dicts raise."""
        with pytest.raises(ValueError):
            DependencyRecord.from_dict(["not", "a", "dict"])
