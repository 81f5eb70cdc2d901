"""Tests for local image storage."""

import pytest

from shopping_planner.blob_storage import BlobStorage


@pytest.fixture
def blobs(tmp_path):
    return BlobStorage(tmp_path / "images")


@pytest.fixture
def image_file(tmp_path):
    path = tmp_path / "Store.PNG"
    path.write_bytes(b"\x89PNG")
    return path


class TestBlobStorage:
    """Tests for BlobStorage."""

    def test_creates_root(self, tmp_path):
        """The root directory is created."""
        BlobStorage(tmp_path / "a" / "images")
        assert (tmp_path / "a" / "images").is_dir()

    def test_put_and_get_url(self, blobs, image_file):
        """Stored files get a new ID and a file URL."""
        blob_id = blobs.put(image_file)
        assert blob_id.endswith(".png")
        assert (blobs.root / blob_id).read_bytes() == b"\x89PNG"

        url = blobs.get_url(blob_id)
        assert url.startswith("file://")
        assert url.endswith(blob_id)

    def test_put_twice_gives_new_ids(self, blobs, image_file):
        """Each put stores a separate blob."""
        assert blobs.put(image_file) != blobs.put(image_file)

    def test_get_url_missing(self, blobs):
        """Unknown blobs have no URL."""
        assert blobs.get_url("missing.png") is None

    def test_delete(self, blobs, image_file):
        """Deleted blobs are gone; deleting again is a no-op."""
        blob_id = blobs.put(image_file)
        blobs.delete(blob_id)
        blobs.delete(blob_id)
        assert blobs.get_url(blob_id) is None

    def test_upload_url(self, blobs):
        """Upload URLs point at fresh paths inside the root."""
        first = blobs.generate_upload_url()
        second = blobs.generate_upload_url()
        assert first != second
        assert first.startswith(blobs.root.resolve().as_uri())

    @pytest.mark.parametrize("blob_id", ["", "../secret", "a/b", ".hidden"])
    def test_rejects_unsafe_ids(self, blobs, blob_id):
        """IDs can't point outside the root."""
        with pytest.raises(ValueError):
            blobs.get_url(blob_id)
