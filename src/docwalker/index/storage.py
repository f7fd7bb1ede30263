"""SQLite store for discovered source records."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

from docwalker.config import ChunkConfig
from docwalker.models import SourceRecord
from docwalker.utils.files import compute_sha256

LOGGER = logging.getLogger(__name__)


class SQLiteRecordStore:
    """Indexing sink that persists source records for the text indexer."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self._conn = sqlite3.connect(self.db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.execute("PRAGMA synchronous=NORMAL;")
        self._ensure_schema()

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def close(self) -> None:
        self._conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        try:
            yield self._conn
            self._conn.commit()
        except Exception:
            self._conn.rollback()
            raise

    def _ensure_schema(self) -> None:
        with self.transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS sources (
                    id INTEGER PRIMARY KEY,
                    path TEXT NOT NULL UNIQUE,
                    format TEXT NOT NULL,
                    input_filter TEXT,
                    display_style TEXT,
                    sha256 TEXT NOT NULL,
                    mtime REAL NOT NULL,
                    size INTEGER NOT NULL,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
            conn.execute(
                """
                CREATE TRIGGER IF NOT EXISTS sources_updated
                AFTER UPDATE ON sources
                BEGIN
                    UPDATE sources SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id;
                END;
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS index_info (
                    key TEXT PRIMARY KEY,
                    value INTEGER NOT NULL
                )
                """
            )

    def submit(self, record: SourceRecord) -> str:
        """Insert or refresh a record.

        Paths that cannot be stored as UTF-8 text (undecodable file names)
        are logged and not stored.

        Returns:
            'inserted', 'updated', 'skipped' when nothing changed, or 'failed'.
        """
        path = record.source_path
        try:
            str(path).encode("utf-8")
        except UnicodeEncodeError:
            LOGGER.error("Cannot store document with undecodable name %r", str(path))
            return "failed"

        stat = path.stat()
        values = (
            record.format.value,
            str(record.input_filter.path) if record.input_filter else None,
            str(record.display_style.path) if record.display_style else None,
            compute_sha256(path),
        )

        conn = self._conn
        existing = conn.execute(
            "SELECT id, format, input_filter, display_style, sha256 FROM sources WHERE path = ?",
            (str(path),),
        ).fetchone()

        if existing and tuple(existing)[1:] == values:
            return "skipped"

        if existing:
            conn.execute(
                """
                UPDATE sources
                SET format = ?, input_filter = ?, display_style = ?, sha256 = ?, mtime = ?, size = ?
                WHERE id = ?
                """,
                (*values, stat.st_mtime, stat.st_size, existing["id"]),
            )
            return "updated"

        conn.execute(
            """
            INSERT INTO sources(path, format, input_filter, display_style, sha256, mtime, size)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (str(path), *values, stat.st_mtime, stat.st_size),
        )
        return "inserted"

    def save_chunk_config(self, config: ChunkConfig) -> None:
        with self.transaction() as conn:
            conn.executemany(
                "INSERT OR REPLACE INTO index_info(key, value) VALUES (?, ?)",
                list(config.as_dict().items()),
            )

    def load_chunk_config(self) -> ChunkConfig | None:
        rows = self._conn.execute("SELECT key, value FROM index_info").fetchall()
        values = {row["key"]: row["value"] for row in rows}
        if "chunk_size" not in values or "chunk_overlap" not in values:
            return None
        return ChunkConfig.from_values(values["chunk_size"], values["chunk_overlap"])

    def list_records(self) -> List[dict]:
        rows = self._conn.execute(
            """
            SELECT path, format, input_filter, display_style, sha256, size
            FROM sources
            ORDER BY path
            """
        ).fetchall()
        return [dict(row) for row in rows]

    def remove_missing_files(self) -> int:
        """Remove records whose files no longer exist."""
        with self.transaction() as conn:
            rows = conn.execute("SELECT id, path FROM sources").fetchall()
            missing = [row for row in rows if not Path(row["path"]).exists()]
            for row in missing:
                conn.execute("DELETE FROM sources WHERE id = ?", (row["id"],))
        return len(missing)
