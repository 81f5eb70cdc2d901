"""Data persistence for Shopping Planner.

This module provides a small document store with support for JSON (default) or
SQLite backends. Use create_data_store() to get the appropriate backend based on
configuration.

Every call reads or writes a single document. There are no multi-document
transactions: callers that touch several documents issue one call per document.
"""

import json
import logging
from datetime import date, datetime, time
from enum import Enum
from pathlib import Path
from typing import Any, Protocol
from uuid import UUID, uuid4

from .errors import NotFoundError
from .models import Collection

logger = logging.getLogger(__name__)

Document = dict[str, Any]


class BackendType(str, Enum):
    """Data storage backend types."""

    JSON = "json"
    SQLITE = "sqlite"


class DataStoreProtocol(Protocol):
    """Protocol defining the document store interface."""

    data_dir: Path

    def get(self, collection: Collection | str, doc_id: UUID | str) -> Document | None: ...
    def query(self, collection: Collection | str, profile_id: str) -> list[Document]: ...
    def insert(self, collection: Collection | str, doc: Document) -> UUID: ...
    def patch(
        self, collection: Collection | str, doc_id: UUID | str, fields: Document
    ) -> None: ...
    def delete(self, collection: Collection | str, doc_id: UUID | str) -> None: ...


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for our data types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, date):
            return obj.isoformat()
        if isinstance(obj, time):
            return obj.isoformat()
        if isinstance(obj, (set, frozenset)):
            return sorted(str(v) for v in obj)
        return super().default(obj)


def to_document(data: dict[str, Any]) -> Document:
    """Convert a dict with rich values (UUIDs, sets) into plain JSON values."""
    return json.loads(json.dumps(data, cls=JSONEncoder))


def collection_name(collection: Collection | str) -> str:
    """Validate and return the storage name of a collection."""
    return Collection(collection).value


class DataStore:
    """Manages JSON file persistence, one file per collection."""

    def __init__(self, data_dir: Path | None = None):
        """Initialize data store.

        Args:
            data_dir: Directory for data files. Defaults to ./data
        """
        self.data_dir = data_dir or Path.cwd() / "data"
        self._ensure_directories()

    def _ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        (self.data_dir / "images").mkdir(exist_ok=True)

    def _collection_path(self, collection: Collection | str) -> Path:
        """Path to a collection file."""
        return self.data_dir / f"{collection_name(collection)}.json"

    def _load(self, collection: Collection | str) -> list[Document]:
        path = self._collection_path(collection)
        if not path.exists():
            return []

        with open(path) as f:
            data = json.load(f)

        return data.get("documents", [])

    def _save(self, collection: Collection | str, documents: list[Document]) -> None:
        path = self._collection_path(collection)
        payload = {
            "last_updated": datetime.now(),
            "documents": documents,
        }

        with open(path, "w") as f:
            json.dump(payload, f, cls=JSONEncoder, indent=2)

    # --- Document Operations ---

    def get(self, collection: Collection | str, doc_id: UUID | str) -> Document | None:
        """Get a document by ID.

        Args:
            collection: Collection to read from
            doc_id: Document ID

        Returns:
            The document, or None if it doesn't exist
        """
        key = str(doc_id)
        for doc in self._load(collection):
            if doc.get("id") == key:
                return doc
        return None

    def query(self, collection: Collection | str, profile_id: str) -> list[Document]:
        """Get all documents of a profile, in insertion order.

        Args:
            collection: Collection to read from
            profile_id: Profile partition key

        Returns:
            Matching documents
        """
        return [doc for doc in self._load(collection) if doc.get("profile_id") == profile_id]

    def insert(self, collection: Collection | str, doc: Document) -> UUID:
        """Insert a new document.

        Args:
            collection: Collection to write to
            doc: Document fields; an ``id`` is generated when missing

        Returns:
            ID of the inserted document
        """
        doc = to_document(doc)
        doc_id = UUID(doc["id"]) if doc.get("id") else uuid4()
        doc["id"] = str(doc_id)

        documents = self._load(collection)
        documents.append(doc)
        self._save(collection, documents)

        logger.debug("Inserted %s/%s", collection_name(collection), doc_id)
        return doc_id

    def patch(self, collection: Collection | str, doc_id: UUID | str, fields: Document) -> None:
        """Update some fields of a document.

        Args:
            collection: Collection to write to
            doc_id: Document ID
            fields: Fields to overwrite; a value of None removes the field

        Raises:
            NotFoundError: If the document doesn't exist
        """
        key = str(doc_id)
        documents = self._load(collection)

        for doc in documents:
            if doc.get("id") == key:
                for name, value in to_document(fields).items():
                    if value is None:
                        doc.pop(name, None)
                    else:
                        doc[name] = value
                self._save(collection, documents)
                logger.debug("Patched %s/%s: %s", collection_name(collection), key, sorted(fields))
                return

        raise NotFoundError(Collection(collection).label, doc_id)

    def delete(self, collection: Collection | str, doc_id: UUID | str) -> None:
        """Delete a document.

        Args:
            collection: Collection to write to
            doc_id: Document ID

        Raises:
            NotFoundError: If the document doesn't exist
        """
        key = str(doc_id)
        documents = self._load(collection)
        remaining = [doc for doc in documents if doc.get("id") != key]

        if len(remaining) == len(documents):
            raise NotFoundError(Collection(collection).label, doc_id)

        self._save(collection, remaining)
        logger.debug("Deleted %s/%s", collection_name(collection), key)


def create_data_store(
    backend: BackendType = BackendType.JSON,
    data_dir: Path | None = None,
    db_path: Path | None = None,
) -> DataStoreProtocol:
    """Create a data store with the specified backend.

    Args:
        backend: Which backend to use (json or sqlite)
        data_dir: Directory for data files (used by JSON backend, also used
                  as base path for SQLite if db_path not specified)
        db_path: Path to SQLite database file (only used by SQLite backend)

    Returns:
        A DataStore or SQLiteStore instance

    Example:
        # Use JSON backend (default)
        store = create_data_store()

        # Use SQLite with custom path
        store = create_data_store(
            BackendType.SQLITE,
            db_path=Path("./my_data/shopping.db")
        )
    """
    if backend == BackendType.SQLITE:
        from .sqlite_store import SQLiteStore

        if db_path is None and data_dir is not None:
            db_path = data_dir / "shopping.db"

        return SQLiteStore(db_path=db_path)
    else:
        return DataStore(data_dir=data_dir)
