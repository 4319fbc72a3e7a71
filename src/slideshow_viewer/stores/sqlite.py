"""SQLite-backed ProjectStore."""

import sqlite3
import threading
from pathlib import Path

from slideshow_viewer.models import SlideshowMetadata, StoredProject, now_millis
from slideshow_viewer.store import check_page

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS projects (
    article_id TEXT PRIMARY KEY,
    nonce TEXT NOT NULL,
    title TEXT NOT NULL DEFAULT '',
    thumbnail TEXT NOT NULL DEFAULT '',
    viewed_at INTEGER NOT NULL,
    is_favorite INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_projects_viewed_at ON projects(viewed_at);
CREATE INDEX IF NOT EXISTS idx_projects_is_favorite ON projects(is_favorite);
"""


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Open the database (":memory:" allowed) and create the schema."""
    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    # Autocommit mode; writes open their own BEGIN IMMEDIATE transaction.
    conn = sqlite3.connect(str(db_path), isolation_level=None, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.executescript(SCHEMA_SQL)
    return conn


def _row_to_project(row: sqlite3.Row) -> StoredProject:
    return StoredProject(
        article_id=row["article_id"],
        nonce=row["nonce"],
        title=row["title"],
        thumbnail=row["thumbnail"],
        viewed_at=row["viewed_at"],
        is_favorite=bool(row["is_favorite"]),
    )


class SqliteProjectStore:
    """Bookmarks in a single SQLite table keyed by article_id."""

    def __init__(self, db_path: str | Path) -> None:
        self._conn = connect(db_path)
        self._lock = threading.Lock()

    def close(self) -> None:
        self._conn.close()

    def upsert(
        self, metadata: SlideshowMetadata, viewed_at: int | None = None
    ) -> StoredProject:
        viewed_at = now_millis() if viewed_at is None else viewed_at
        with self._lock:
            self._conn.execute("BEGIN IMMEDIATE")
            try:
                self._conn.execute(
                    """
                    INSERT INTO projects (article_id, nonce, title, thumbnail, viewed_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(article_id) DO UPDATE SET
                        nonce = excluded.nonce,
                        title = excluded.title,
                        thumbnail = excluded.thumbnail,
                        viewed_at = excluded.viewed_at
                    """,
                    (
                        metadata.article_id,
                        metadata.nonce,
                        metadata.title,
                        metadata.thumbnail,
                        viewed_at,
                    ),
                )
                row = self._conn.execute(
                    "SELECT * FROM projects WHERE article_id = ?",
                    (metadata.article_id,),
                ).fetchone()
                self._conn.execute("COMMIT")
            except Exception:
                self._conn.execute("ROLLBACK")
                raise
        return _row_to_project(row)

    def get(self, article_id: str) -> StoredProject | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM projects WHERE article_id = ?", (article_id,)
            ).fetchone()
        return _row_to_project(row) if row else None

    def toggle_favorite(self, article_id: str) -> bool:
        """Flip the favorite flag; unknown ids return False and change nothing."""
        with self._lock:
            self._conn.execute("BEGIN IMMEDIATE")
            try:
                self._conn.execute(
                    "UPDATE projects SET is_favorite = 1 - is_favorite WHERE article_id = ?",
                    (article_id,),
                )
                row = self._conn.execute(
                    "SELECT is_favorite FROM projects WHERE article_id = ?",
                    (article_id,),
                ).fetchone()
                self._conn.execute("COMMIT")
            except Exception:
                self._conn.execute("ROLLBACK")
                raise
        return bool(row and row["is_favorite"])

    def get_favorite_flag(self, article_id: str) -> bool:
        with self._lock:
            row = self._conn.execute(
                "SELECT is_favorite FROM projects WHERE article_id = ?", (article_id,)
            ).fetchone()
        return bool(row and row["is_favorite"])

    def list_recents(self, limit: int, offset: int = 0) -> list[StoredProject]:
        check_page(limit, offset)
        with self._lock:
            rows = self._conn.execute(
                "SELECT * FROM projects ORDER BY viewed_at DESC LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
        return [_row_to_project(row) for row in rows]

    def list_favorites(self) -> list[StoredProject]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT * FROM projects WHERE is_favorite = 1 ORDER BY viewed_at DESC"
            ).fetchall()
        return [_row_to_project(row) for row in rows]
