# tests/unit/test_local_catalog.py
"""Tests for LocalFileCatalog."""

import json
import os
import tempfile
from datetime import UTC, datetime

import pytest

from storage_lifecycle.storage.base import AccessTier, ContentCategory
from storage_lifecycle.storage.local_provider import LocalFileCatalog


class TestPathTraversal:
    """Verify _get_path rejects path traversal attempts."""

    def setup_method(self):
        self.tmpdir = os.path.realpath(tempfile.mkdtemp())
        self.catalog = LocalFileCatalog(base_path=self.tmpdir)

    def test_traversal_with_dotdot(self):
        with pytest.raises(ValueError, match="Path traversal detected"):
            self.catalog._get_path("../../../etc/passwd")

    def test_traversal_with_absolute(self):
        with pytest.raises(ValueError, match="Path traversal detected"):
            self.catalog._get_path("/etc/passwd")

    def test_normal_key_succeeds(self):
        path = self.catalog._get_path("audio/ep1.mp3")
        assert str(path).startswith(self.tmpdir)

    def test_metadata_traversal(self):
        with pytest.raises(ValueError, match="Path traversal detected"):
            self.catalog._get_metadata_path("../../../etc/passwd")


class TestLocalCatalog:
    """Round trips through the sidecar metadata."""

    @pytest.fixture
    def local(self, tmp_path):
        return LocalFileCatalog(base_path=str(tmp_path))

    def test_put_and_get_metadata(self, local):
        modified = datetime(2026, 1, 1, tzinfo=UTC)
        local.put("audio/ep1.mp3", b"x" * 100, content_type="audio/mpeg", last_modified=modified)

        record = local.get_metadata("audio/ep1.mp3")

        assert record.size_bytes == 100
        assert record.content_category is ContentCategory.AUDIO
        assert record.current_tier is AccessTier.HOT
        assert record.last_modified == modified
        assert record.is_transient is False

    def test_list_all_is_sorted_and_skips_sidecars(self, local):
        local.put("b.txt", b"b", content_type="text/plain")
        local.put("a/nested.txt", b"a", content_type="text/plain")

        assert local.list_all() == ["a/nested.txt", "b.txt"]

    def test_missing_object_returns_none(self, local):
        assert local.get_metadata("nope.bin") is None

    def test_corrupt_sidecar_returns_none(self, local, tmp_path):
        local.put("a.bin", b"a")
        (tmp_path / "a.bin.meta.json").write_text("{not json")

        assert local.get_metadata("a.bin") is None

    def test_invalid_tier_returns_none(self, local, tmp_path):
        local.put("a.bin", b"a")
        meta_path = tmp_path / "a.bin.meta.json"
        meta = json.loads(meta_path.read_text())
        meta["access_tier"] = "Lukewarm"
        meta_path.write_text(json.dumps(meta))

        assert local.get_metadata("a.bin") is None

    def test_untiered_object(self, local):
        local.put("a.bin", b"a", tier=None)
        assert local.get_metadata("a.bin").current_tier is None

    def test_delete(self, local):
        local.put("tmp/x", b"x", is_transient=True)

        assert local.delete("tmp/x") is True
        assert local.list_all() == []
        assert local.delete("tmp/x") is False

    def test_set_tier(self, local):
        local.put("a.mp3", b"a", content_type="audio/mpeg")

        assert local.set_tier("a.mp3", AccessTier.COOL) is True
        assert local.get_metadata("a.mp3").current_tier is AccessTier.COOL

    def test_set_tier_is_idempotent(self, local):
        local.put("a.mp3", b"a", content_type="audio/mpeg", tier=AccessTier.COOL)

        assert local.set_tier("a.mp3", AccessTier.COOL) is True
        assert local.get_metadata("a.mp3").current_tier is AccessTier.COOL

    def test_set_tag_preserves_others(self, local):
        local.put("a.txt", b"a", content_type="text/plain", tags={"owner": "feeds"})

        assert local.set_tag("a.txt", "compressed", "true") is True
        assert local.get_metadata("a.txt").tags == {"owner": "feeds", "compressed": "true"}

    def test_mutations_on_missing_object_fail(self, local):
        assert local.set_tier("ghost", AccessTier.COOL) is False
        assert local.set_tag("ghost", "k", "v") is False

    def test_cleanup(self, local):
        local.put("a.bin", b"a")
        local.cleanup()
        assert local.list_all() == []
