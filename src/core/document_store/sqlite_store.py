"""
SQLite document store implementation.

Clean, efficient implementation using aiosqlite. Every collection shares one
table; documents are stored as JSON text.
"""

import json
import re
from pathlib import Path
from typing import Any

import aiosqlite

from src.core.document_store.base import DocumentStore, field_matches
from src.utils.exceptions import DocumentStoreError
from src.utils.keys import generate_store_id
from src.utils.logger import get_logger

logger = get_logger(__name__)


class SQLiteDocumentStore(DocumentStore):
    """
    SQLite-based document store.

    Features:
    - Fast local storage
    - Single-key atomic writes (INSERT OR REPLACE)
    - WAL journal so readers don't block the reconciler's writes
    """

    def __init__(self, db_path: str = "data/palimpsest.db"):
        """
        Initialize SQLite document store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None

        # Ensure directory exists
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self) -> None:
        """Establish connection to SQLite."""
        if self.connection is None:
            self.connection = await aiosqlite.connect(self.db_path)
            await self.connection.execute("PRAGMA journal_mode = WAL")
            await self.connection.commit()

    async def initialize(self) -> None:
        """Initialize database schema."""
        await self.connect()

        await self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS documents (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                collection TEXT NOT NULL,
                key TEXT NOT NULL,
                body TEXT NOT NULL,
                UNIQUE (collection, key)
            )
        """
        )
        await self.connection.execute(
            "CREATE INDEX IF NOT EXISTS idx_documents_collection ON documents(collection)"
        )
        await self.connection.commit()
        logger.debug(f"SQLite document store ready at {self.db_path}")

    async def close(self) -> None:
        """Close the database connection."""
        if self.connection is not None:
            await self.connection.close()
            self.connection = None

    async def _rows(self, collection: str) -> list[tuple[str, dict[str, Any]]]:
        """All (key, document) pairs of a collection in insertion order."""
        await self.connect()
        cursor = await self.connection.execute(
            "SELECT key, body FROM documents WHERE collection = ? ORDER BY seq",
            (collection,),
        )
        rows = await cursor.fetchall()
        await cursor.close()
        return [(key, json.loads(body)) for key, body in rows]

    # ═══════════════════════════════════════════════════════════
    # READS
    # ═══════════════════════════════════════════════════════════

    async def list_keys(self, collection: str) -> list[str]:
        try:
            await self.connect()
            cursor = await self.connection.execute(
                "SELECT key FROM documents WHERE collection = ? ORDER BY seq",
                (collection,),
            )
            rows = await cursor.fetchall()
            await cursor.close()
            return [row[0] for row in rows]
        except aiosqlite.Error as e:
            raise DocumentStoreError(
                f"Failed to list {collection}: {e}", context={"collection": collection}
            ) from e

    async def get(self, collection: str, key: str) -> dict[str, Any] | None:
        try:
            await self.connect()
            cursor = await self.connection.execute(
                "SELECT body FROM documents WHERE collection = ? AND key = ?",
                (collection, key),
            )
            row = await cursor.fetchone()
            await cursor.close()
        except aiosqlite.Error as e:
            raise DocumentStoreError(
                f"Failed to get {collection}/{key}: {e}",
                context={"collection": collection, "key": key},
            ) from e

        if row is None:
            return None
        return json.loads(row[0])

    async def list_matching_keys(
        self, collection: str, key_pattern: str, field: str
    ) -> list[Any]:
        try:
            pattern = re.compile(key_pattern)
            rows = await self._rows(collection)
        except re.error as e:
            raise DocumentStoreError(
                f"Invalid key pattern {key_pattern!r}: {e}",
                context={"collection": collection, "pattern": key_pattern},
            ) from e
        except aiosqlite.Error as e:
            raise DocumentStoreError(
                f"Failed to scan {collection}: {e}", context={"collection": collection}
            ) from e

        return [doc[field] for key, doc in rows if pattern.fullmatch(key) and field in doc]

    # ═══════════════════════════════════════════════════════════
    # WRITES
    # ═══════════════════════════════════════════════════════════

    async def put(self, collection: str, key: str, document: dict[str, Any]) -> None:
        stored = dict(document)
        stored.setdefault("_id", generate_store_id())
        try:
            body = json.dumps(stored)
        except (TypeError, ValueError) as e:
            raise DocumentStoreError(
                f"Document for {collection}/{key} is not JSON serializable: {e}",
                context={"collection": collection, "key": key},
            ) from e

        try:
            await self.connect()
            # Upsert keeps the row's original seq so listing order stays stable
            await self.connection.execute(
                """
                INSERT INTO documents (collection, key, body) VALUES (?, ?, ?)
                ON CONFLICT (collection, key) DO UPDATE SET body = excluded.body
                """,
                (collection, key, body),
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            raise DocumentStoreError(
                f"Failed to put {collection}/{key}: {e}",
                context={"collection": collection, "key": key},
            ) from e

    async def delete(self, collection: str, key: str) -> None:
        try:
            await self.connect()
            await self.connection.execute(
                "DELETE FROM documents WHERE collection = ? AND key = ?",
                (collection, key),
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            raise DocumentStoreError(
                f"Failed to delete {collection}/{key}: {e}",
                context={"collection": collection, "key": key},
            ) from e

    async def delete_by_field(self, collection: str, field: str, value: Any) -> int:
        try:
            rows = await self._rows(collection)
            doomed = [key for key, doc in rows if field_matches(doc, field, value)]
            for key in doomed:
                await self.connection.execute(
                    "DELETE FROM documents WHERE collection = ? AND key = ?",
                    (collection, key),
                )
            await self.connection.commit()
            return len(doomed)
        except aiosqlite.Error as e:
            raise DocumentStoreError(
                f"Failed to delete from {collection} where {field}={value}: {e}",
                context={"collection": collection, "field": field},
            ) from e
