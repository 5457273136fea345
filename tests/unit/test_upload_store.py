"""
Unit tests for the upload store.
"""

from io import BytesIO

import pytest
from werkzeug.datastructures import FileStorage

from propertysite.exceptions import UploadError
from propertysite.uploads.store import UploadStore


def make_upload(name="photo.jpg", content=b"\xff\xd8data\xff\xd9", content_type="image/jpeg"):
    return FileStorage(stream=BytesIO(content), filename=name, content_type=content_type)


def stored_files(store: UploadStore):
    return sorted(p.name for p in store.directory.iterdir())


class TestSaveAll:
    """Tests for UploadStore.save_all."""

    def test_saves_valid_images(self, upload_store, jpeg_bytes):
        saved = upload_store.save_all([
            make_upload("front.jpg", jpeg_bytes),
            make_upload("yard.PNG", b"png", "image/png"),
        ])
        assert len(saved) == 2
        assert saved[0].original_name == "front.jpg"
        assert saved[0].size == len(jpeg_bytes)
        assert saved[0].path == f"/uploads/{saved[0].filename}"
        assert saved[1].filename.endswith(".png")
        assert (upload_store.directory / saved[0].filename).read_bytes() == jpeg_bytes

    def test_names_are_unique(self, upload_store):
        saved = upload_store.save_all([make_upload("same.jpg") for _ in range(5)])
        assert len({item.filename for item in saved}) == 5

    def test_to_dict_uses_form_keys(self, upload_store):
        item = upload_store.save_all([make_upload()])[0]
        data = item.to_dict()
        assert set(data) == {"filename", "originalName", "path", "size"}

    def test_rejects_disallowed_extension(self, upload_store):
        with pytest.raises(UploadError, match="Only image files are allowed"):
            upload_store.save_all([make_upload("notes.txt", b"hello", "text/plain")])
        assert stored_files(upload_store) == []

    def test_rejects_mismatched_content_type(self, upload_store):
        with pytest.raises(UploadError):
            upload_store.save_all([make_upload("fake.jpg", b"hello", "text/plain")])

    def test_rejects_oversize_file(self, tmp_path):
        store = UploadStore(str(tmp_path / "small"), max_size=10)
        with pytest.raises(UploadError, match="too large"):
            store.save_all([make_upload(content=b"x" * 11)])

    def test_rejects_more_than_twenty(self, upload_store):
        with pytest.raises(UploadError, match="Too many files"):
            upload_store.save_all([make_upload(f"{i}.jpg") for i in range(21)])
        assert stored_files(upload_store) == []

    def test_accepts_exactly_twenty(self, upload_store):
        saved = upload_store.save_all([make_upload(f"{i}.jpg") for i in range(20)])
        assert len(saved) == 20

    def test_one_bad_file_rejects_whole_batch(self, upload_store):
        with pytest.raises(UploadError):
            upload_store.save_all([make_upload("ok.jpg"), make_upload("bad.exe", b"MZ", "application/octet-stream")])
        assert stored_files(upload_store) == []

    def test_empty_request(self, upload_store):
        with pytest.raises(UploadError, match="No files"):
            upload_store.save_all([])


class TestResolveAndDiscard:
    """Tests for reading and removing staged uploads."""

    def test_read_round_trip(self, upload_store, jpeg_bytes):
        item = upload_store.save_all([make_upload(content=jpeg_bytes)])[0]
        assert upload_store.read(item.path) == jpeg_bytes

    def test_resolve_rejects_traversal(self, upload_store):
        with pytest.raises(UploadError):
            upload_store.resolve("/uploads/../secrets.txt")
        with pytest.raises(UploadError):
            upload_store.resolve("/uploads/")

    def test_discard_removes_files(self, upload_store):
        saved = upload_store.save_all([make_upload(), make_upload()])
        assert upload_store.discard(item.path for item in saved) == 2
        assert stored_files(upload_store) == []

    def test_discard_swallows_failures(self, upload_store):
        assert upload_store.discard(["/uploads/missing.jpg", "/uploads/../x"]) == 0
