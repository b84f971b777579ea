"""Tests for object storage helpers and the local backend."""
import uuid

import pytest

from fitcoach.core.storage import (
    LocalObjectStorage,
    StorageError,
    build_upload_key,
    get_extension_from_content_type,
    is_video_content_type,
    upload_key_prefix,
)


class TestContentTypes:
    """Tests for MIME type helpers."""

    @pytest.mark.parametrize("content_type", ["video/mp4", "video/quicktime", " Video/WebM "])
    def test_video_types_accepted(self, content_type):
        assert is_video_content_type(content_type) is True

    @pytest.mark.parametrize("content_type", ["image/png", "application/pdf", "", None])
    def test_other_types_rejected(self, content_type):
        assert is_video_content_type(content_type) is False

    def test_known_extensions(self):
        assert get_extension_from_content_type("video/mp4") == "mp4"
        assert get_extension_from_content_type("video/quicktime") == "mov"

    def test_unknown_subtype_used_as_extension(self):
        assert get_extension_from_content_type("video/3gpp; codecs=avc1") == "3gpp"

    @pytest.mark.parametrize("content_type", ["video/../../evil", "video/x-flv", "video/a b", "video/"])
    def test_unsafe_subtype_falls_back_to_bin(self, content_type):
        assert get_extension_from_content_type(content_type) == "bin"


class TestUploadKeys:
    """Tests for object key layout."""

    def test_key_lives_under_client_and_assignment(self):
        client_id, assignment_id = uuid.uuid4(), uuid.uuid4()

        key = build_upload_key(client_id, assignment_id, "video/mp4")

        assert key.startswith(upload_key_prefix(client_id, assignment_id))
        assert key.startswith(f"uploads/{client_id.hex}/{assignment_id.hex}/")
        assert key.endswith(".mp4")

    def test_keys_are_unique(self):
        client_id, assignment_id = uuid.uuid4(), uuid.uuid4()

        first = build_upload_key(client_id, assignment_id, "video/mp4")
        second = build_upload_key(client_id, assignment_id, "video/mp4")

        assert first != second

    def test_key_for_odd_subtype_stays_under_prefix(self):
        client_id, assignment_id = uuid.uuid4(), uuid.uuid4()

        key = build_upload_key(client_id, assignment_id, "video/../../evil")

        assert ".." not in key
        assert key.startswith(upload_key_prefix(client_id, assignment_id))
        assert key.endswith(".bin")


class TestLocalObjectStorage:
    """Tests for the filesystem backend."""

    async def test_presign_put_returns_route_url(self, tmp_path):
        storage = LocalObjectStorage(root=str(tmp_path), base_url="/uploads/")

        url = await storage.presign_put("uploads/a/b/c.mp4", "video/mp4", 60)

        assert url == "/uploads/uploads/a/b/c.mp4"
        assert (tmp_path / "uploads" / "a" / "b").is_dir()

    async def test_write_and_delete(self, tmp_path):
        storage = LocalObjectStorage(root=str(tmp_path), base_url="/uploads")
        key = "uploads/a/b/c.mp4"

        await storage.write(key, b"video-bytes")
        assert storage.resolve(key).read_bytes() == b"video-bytes"

        await storage.delete(key)
        assert not storage.resolve(key).exists()

    async def test_delete_missing_object_is_noop(self, tmp_path):
        storage = LocalObjectStorage(root=str(tmp_path), base_url="/uploads")

        await storage.delete("uploads/missing.mp4")

    async def test_path_traversal_rejected(self, tmp_path):
        storage = LocalObjectStorage(root=str(tmp_path / "root"), base_url="/uploads")

        with pytest.raises(StorageError):
            await storage.write("../escape.mp4", b"x")
