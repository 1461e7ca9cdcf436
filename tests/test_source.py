"""Tests for the concrete asset sources."""

import json

import pytest

from asset_refgraph.exceptions import AssetLookupError, SourceUnavailableError
from asset_refgraph.source import AssetEntry, AssetSource, InMemoryAssetSource, ManifestAssetSource


def _write_manifest(path, assets):
    path.write_text(json.dumps({"assets": assets}))
    return path


class TestInMemoryAssetSource:
    """Test the in-memory source."""

    def test_protocol(self):
        """The source satisfies the AssetSource protocol."""
        assert isinstance(InMemoryAssetSource(), AssetSource)

    def test_lookups(self):
        """Dependencies and paths are returned as stored."""
        source = InMemoryAssetSource([AssetEntry("g1", path="Assets/a.mat", deps=("g2",))])
        assert source.list_all_identities() == ["g1"]
        assert source.get_direct_dependencies("g1") == ["g2"]
        assert source.get_display_path("g1") == "Assets/a.mat"

    def test_unknown_identity_raises_lookup_error(self):
        """Unknown identities raise AssetLookupError."""
        source = InMemoryAssetSource()
        with pytest.raises(LookupError):
            source.get_direct_dependencies("nope")
        with pytest.raises(AssetLookupError):
            source.get_fingerprint("nope")

    def test_display_path_falls_back_to_identity(self):
        """Assets without a path display as their identity."""
        assert InMemoryAssetSource().get_display_path("g9") == "g9"

    def test_fingerprint_tracks_content(self):
        """The fingerprint follows content unless one is given."""
        a = AssetEntry("g1", path="p", deps=("x",))
        b = AssetEntry("g1", path="p", deps=("y",))
        assert a.effective_fingerprint() != b.effective_fingerprint()
        assert a.effective_fingerprint() == AssetEntry("g1", path="p", deps=("x",)).effective_fingerprint()
        assert AssetEntry("g1", fingerprint="v3").effective_fingerprint() == "v3"


class TestManifestAssetSource:
    """Test the JSON manifest source."""

    def test_load(self, tmp_path):
        """A manifest loads ids, paths and deps."""
        manifest = _write_manifest(
            tmp_path / "assets.json",
            [
                {"id": "g1", "path": "Assets/UI/Button.prefab", "deps": ["g2"], "fingerprint": 7},
                {"id": "g2", "path": "Assets/UI/Atlas.png"},
            ],
        )
        source = ManifestAssetSource(manifest)
        assert source.list_all_identities() == ["g1", "g2"]
        assert source.get_direct_dependencies("g1") == ["g2"]
        assert source.get_direct_dependencies("g2") == []
        assert source.get_fingerprint("g1") == "7"

    def test_missing_file(self, tmp_path):
        """A missing file is SourceUnavailableError."""
        with pytest.raises(SourceUnavailableError):
            ManifestAssetSource(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        """Invalid JSON is SourceUnavailableError."""
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        with pytest.raises(SourceUnavailableError):
            ManifestAssetSource(bad)

    @pytest.mark.parametrize(
        "payload",
        [
            {"items": []},
            {"assets": [{"path": "no id"}]},
            {"assets": [{"id": "g1", "deps": "g2"}]},
            {"assets": ["g1"]},
        ],
    )
    def test_malformed_manifest(self, tmp_path, payload):
        """Structurally wrong manifests are SourceUnavailableError."""
        path = tmp_path / "m.json"
        path.write_text(json.dumps(payload))
        with pytest.raises(SourceUnavailableError):
            ManifestAssetSource(path)
