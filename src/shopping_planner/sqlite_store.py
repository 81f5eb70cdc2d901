"""SQLite-based data persistence for Shopping Planner.

This module provides SQLite database storage as an alternative to JSON files.
It implements the same interface as DataStore for seamless switching.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from uuid import UUID, uuid4

from .data_store import Document, JSONEncoder, collection_name, to_document
from .errors import NotFoundError
from .models import Collection

logger = logging.getLogger(__name__)


def adapt_uuid(uuid_val: UUID) -> str:
    """Adapt UUID to string for SQLite."""
    return str(uuid_val)


def adapt_datetime(dt: datetime) -> str:
    """Adapt datetime to ISO string for SQLite."""
    return dt.isoformat()


def convert_datetime(value: bytes) -> datetime:
    """Convert ISO string back to datetime from SQLite."""
    return datetime.fromisoformat(value.decode())


# Register adapters and converters
sqlite3.register_adapter(UUID, adapt_uuid)
sqlite3.register_adapter(datetime, adapt_datetime)
sqlite3.register_converter("DATETIME", convert_datetime)


class SQLiteStore:
    """Manages SQLite database persistence for shopping planner documents."""

    SCHEMA_VERSION = 1

    def __init__(self, db_path: Path | None = None):
        """Initialize SQLite store.

        Args:
            db_path: Path to the SQLite database file. Defaults to ./data/shopping.db
        """
        if db_path is None:
            db_path = Path.cwd() / "data" / "shopping.db"
        self.db_path = db_path
        self.data_dir = db_path.parent
        self._ensure_directories()
        self._init_database()

    def _ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        # Store images live next to the database
        (self.data_dir / "images").mkdir(exist_ok=True)

    @contextmanager
    def _get_connection(self):
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(
            self.db_path,
            detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
        )
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_database(self) -> None:
        """Initialize database schema if not exists."""
        with self._get_connection() as conn:
            conn.executescript("""
                -- Schema version tracking
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                );

                -- All documents, partitioned by collection and profile
                CREATE TABLE IF NOT EXISTS documents (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    collection TEXT NOT NULL,
                    profile_id TEXT,
                    body TEXT NOT NULL,
                    created_at DATETIME NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_documents_profile
                    ON documents(collection, profile_id);
            """)

            row = conn.execute("SELECT version FROM schema_version").fetchone()
            if row is None:
                conn.execute(
                    "INSERT INTO schema_version (version) VALUES (?)",
                    (self.SCHEMA_VERSION,),
                )

    def _row_to_document(self, row: sqlite3.Row) -> Document:
        return json.loads(row["body"])

    # --- Document Operations ---

    def get(self, collection: Collection | str, doc_id: UUID | str) -> Document | None:
        """Get a document by ID.

        Args:
            collection: Collection to read from
            doc_id: Document ID

        Returns:
            The document, or None if it doesn't exist
        """
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT body FROM documents WHERE collection = ? AND id = ?",
                (collection_name(collection), str(doc_id)),
            ).fetchone()

        return self._row_to_document(row) if row else None

    def query(self, collection: Collection | str, profile_id: str) -> list[Document]:
        """Get all documents of a profile, in insertion order.

        Args:
            collection: Collection to read from
            profile_id: Profile partition key

        Returns:
            Matching documents
        """
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT body FROM documents WHERE collection = ? AND profile_id = ? "
                "ORDER BY seq",
                (collection_name(collection), profile_id),
            ).fetchall()

        return [self._row_to_document(row) for row in rows]

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

        with self._get_connection() as conn:
            conn.execute(
                """INSERT INTO documents (id, collection, profile_id, body, created_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (
                    doc_id,
                    collection_name(collection),
                    doc.get("profile_id"),
                    json.dumps(doc, cls=JSONEncoder),
                    datetime.now(),
                ),
            )

        logger.debug("Inserted %s/%s", collection_name(collection), doc_id)
        return doc_id

    def patch(self, collection: Collection | str, doc_id: UUID | str, fields: Document) -> None:
        """Update some fields of a document in one transaction.

        Args:
            collection: Collection to write to
            doc_id: Document ID
            fields: Fields to overwrite; a value of None removes the field

        Raises:
            NotFoundError: If the document doesn't exist
        """
        name = collection_name(collection)

        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT body FROM documents WHERE collection = ? AND id = ?",
                (name, str(doc_id)),
            ).fetchone()
            if row is None:
                raise NotFoundError(Collection(collection).label, doc_id)

            doc = self._row_to_document(row)
            for key, value in to_document(fields).items():
                if value is None:
                    doc.pop(key, None)
                else:
                    doc[key] = value

            conn.execute(
                "UPDATE documents SET body = ? WHERE collection = ? AND id = ?",
                (json.dumps(doc, cls=JSONEncoder), name, str(doc_id)),
            )

        logger.debug("Patched %s/%s: %s", name, doc_id, sorted(fields))

    def delete(self, collection: Collection | str, doc_id: UUID | str) -> None:
        """Delete a document.

        Args:
            collection: Collection to write to
            doc_id: Document ID

        Raises:
            NotFoundError: If the document doesn't exist
        """
        name = collection_name(collection)

        with self._get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM documents WHERE collection = ? AND id = ?",
                (name, str(doc_id)),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(Collection(collection).label, doc_id)

        logger.debug("Deleted %s/%s", name, doc_id)
