"""SQLite-backed store of chunk bodies, keyed by chunk ID."""

import logging
import sqlite3
from collections.abc import Iterable
from pathlib import Path

from src.models.chunk import Chunk
from src.storage.database import get_connection, initialize_database

logger = logging.getLogger(__name__)

# Stay well below SQLITE_MAX_VARIABLE_NUMBER on older builds (999).
_MAX_PARAMS_PER_QUERY = 500

_UPSERT_SQL = """
    INSERT OR REPLACE INTO chunks
        (id, title, section, chunk_index, content, source_page_url, page_number, updated_at)
    VALUES (?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
"""


class ChunkStore:
    """Persists chunk bodies and serves batched lookups by ID.

    Every call opens its own connection; the database runs in WAL mode, so
    queries may run while an index build is writing and never observe a
    partially written record.

    Args:
        db_path: Path to the SQLite database file. The schema is created
                 on construction if missing.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        initialize_database(self._db_path)

    def save(self, chunk: Chunk) -> None:
        """Insert or replace a single chunk, keyed by its ID."""
        self.save_many([chunk])

    def save_many(self, chunks: Iterable[Chunk]) -> int:
        """Insert or replace chunks in one transaction.

        Args:
            chunks: Chunks to upsert.

        Returns:
            Number of chunks written.
        """
        rows = [
            (
                c.id,
                c.title,
                c.section,
                c.chunk_index,
                c.content,
                c.source_page_url,
                c.page_number,
            )
            for c in chunks
        ]
        if not rows:
            return 0

        conn = get_connection(self._db_path)
        try:
            with conn:
                conn.executemany(_UPSERT_SQL, rows)
        finally:
            conn.close()
        return len(rows)

    def get_by_ids(self, ids: Iterable[str], preserve_order: bool = False) -> list[Chunk]:
        """Fetch the chunks matching a set of IDs in one batched lookup.

        Unknown IDs are omitted. Empty and repeated IDs are ignored.

        Args:
            ids: Chunk IDs to fetch.
            preserve_order: If True, results follow the order of ``ids``.
                Otherwise the order is unspecified.

        Returns:
            The matching chunks, each at most once.
        """
        id_list = list(dict.fromkeys(i for i in ids if i))
        if not id_list:
            return []

        by_id: dict[str, Chunk] = {}
        conn = get_connection(self._db_path)
        try:
            for offset in range(0, len(id_list), _MAX_PARAMS_PER_QUERY):
                batch = id_list[offset : offset + _MAX_PARAMS_PER_QUERY]
                placeholders = ", ".join("?" for _ in batch)
                cursor = conn.execute(
                    "SELECT id, title, section, chunk_index, content, source_page_url, page_number "
                    f"FROM chunks WHERE id IN ({placeholders})",
                    batch,
                )
                for row in cursor.fetchall():
                    by_id[row["id"]] = _row_to_chunk(row)
        finally:
            conn.close()

        logger.debug("Chunk lookup: requested=%d found=%d", len(id_list), len(by_id))

        if preserve_order:
            return [by_id[i] for i in id_list if i in by_id]
        return list(by_id.values())

    def ids_for_title(self, title: str) -> list[str]:
        """Return the IDs of every stored chunk of one document title."""
        conn = get_connection(self._db_path)
        try:
            rows = conn.execute("SELECT id FROM chunks WHERE title = ? ORDER BY id", (title,)).fetchall()
        finally:
            conn.close()
        return [row["id"] for row in rows]

    def delete(self, ids: Iterable[str]) -> int:
        """Delete chunks by ID.

        Returns:
            Number of rows removed.
        """
        id_list = list(dict.fromkeys(i for i in ids if i))
        if not id_list:
            return 0

        removed = 0
        conn = get_connection(self._db_path)
        try:
            with conn:
                for offset in range(0, len(id_list), _MAX_PARAMS_PER_QUERY):
                    batch = id_list[offset : offset + _MAX_PARAMS_PER_QUERY]
                    placeholders = ", ".join("?" for _ in batch)
                    cursor = conn.execute(f"DELETE FROM chunks WHERE id IN ({placeholders})", batch)
                    removed += cursor.rowcount
        finally:
            conn.close()
        return removed

    def count(self) -> int:
        """Return the number of stored chunks."""
        conn = get_connection(self._db_path)
        try:
            return conn.execute("SELECT COUNT(*) FROM chunks").fetchone()[0]
        finally:
            conn.close()


def _row_to_chunk(row: sqlite3.Row) -> Chunk:
    return Chunk(
        id=row["id"],
        title=row["title"],
        section=row["section"] or "",
        chunk_index=row["chunk_index"] or 0,
        content=row["content"],
        source_page_url=row["source_page_url"] or "",
        page_number=row["page_number"],
    )
