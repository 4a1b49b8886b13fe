# tests/unit/test_catalog_factory.py
"""Tests for the file catalog factory singleton."""

from unittest.mock import patch

import pytest

from storage_lifecycle.storage.factory import get_file_catalog, reset_file_catalog, set_file_catalog
from storage_lifecycle.storage.local_provider import LocalFileCatalog
from tests.conftest import FakeFileCatalog


@pytest.fixture(autouse=True)
def fresh_factory():
    reset_file_catalog()
    yield
    reset_file_catalog()


class TestGetFileCatalog:
    def test_local_by_name(self, tmp_path):
        catalog = get_file_catalog("local", base_path=str(tmp_path))
        assert isinstance(catalog, LocalFileCatalog)

    def test_default_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STORAGE_PROVIDER", "LOCAL")
        catalog = get_file_catalog(base_path=str(tmp_path))
        assert catalog.name == "local"

    def test_singleton(self, tmp_path):
        first = get_file_catalog("local", base_path=str(tmp_path))
        assert get_file_catalog("local") is first

    def test_s3(self):
        with patch("storage_lifecycle.storage.s3_provider.boto3.client"):
            catalog = get_file_catalog("s3", bucket="media")
        assert catalog.name == "s3"

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown storage provider"):
            get_file_catalog("ftp")

    def test_set_custom_catalog(self):
        fake = FakeFileCatalog()
        set_file_catalog(fake)
        assert get_file_catalog() is fake
