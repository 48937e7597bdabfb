"""Tests for the directory-backed object store."""

import pytest

from supplyhub.infrastructure.adapters.local_object_store import LocalObjectStore


class TestLocalObjectStore:

    def test_upload_and_delete(self, tmp_path):
        store = LocalObjectStore(tmp_path)
        url = store.upload(b"png-bytes", "inventory/1/image.png")
        target = tmp_path / "inventory" / "1" / "image.png"
        assert target.read_bytes() == b"png-bytes"
        assert url.startswith("file://")

        store.delete("inventory/1/image.png")
        assert not target.exists()

    def test_delete_missing_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LocalObjectStore(tmp_path).delete("inventory/9/image.png")

    def test_paths_cannot_escape_root(self, tmp_path):
        store = LocalObjectStore(tmp_path / "uploads")
        with pytest.raises(ValueError, match="escapes the store root"):
            store.upload(b"x", "../outside.png")
