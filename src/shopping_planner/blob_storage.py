"""Local file storage for store images."""

import logging
import shutil
from pathlib import Path
from uuid import uuid4

logger = logging.getLogger(__name__)


class BlobStorage:
    """Stores image files under an ``images`` directory, addressed by opaque IDs."""

    def __init__(self, root: Path):
        """Initialize blob storage.

        Args:
            root: Directory holding the blobs. Created if missing.
        """
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, blob_id: str) -> Path:
        # Blob IDs are generated here; refuse anything that could escape root
        if not blob_id or "/" in blob_id or "\\" in blob_id or blob_id.startswith("."):
            raise ValueError(f"Invalid blob ID: {blob_id!r}")
        return self.root / blob_id

    def generate_upload_url(self) -> str:
        """Reserve a new blob ID and return the URL to write its content to."""
        blob_id = uuid4().hex
        return self._path(blob_id).resolve().as_uri()

    def put(self, source: Path) -> str:
        """Copy a local file into storage.

        Args:
            source: File to copy

        Returns:
            The new blob ID
        """
        blob_id = f"{uuid4().hex}{source.suffix.lower()}"
        shutil.copyfile(source, self._path(blob_id))
        logger.info("Stored image %s from %s", blob_id, source)
        return blob_id

    def get_url(self, blob_id: str) -> str | None:
        """Get a URL for a blob, or None if it doesn't exist."""
        path = self._path(blob_id)
        if not path.exists():
            return None
        return path.resolve().as_uri()

    def delete(self, blob_id: str) -> None:
        """Delete a blob. Deleting a missing blob is a no-op."""
        path = self._path(blob_id)
        if path.exists():
            path.unlink()
            logger.info("Deleted image %s", blob_id)
