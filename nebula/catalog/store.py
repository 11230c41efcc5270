"""SQLite-backed catalog store.

One row per package in ``catalog_assets``. ``package_name`` carries a UNIQUE
constraint, so uniqueness is enforced by the engine rather than by callers.
Listing is ordered by the autoincrement row id, which keeps pages stable
across identical queries and puts new packages at the end.
"""

from __future__ import annotations

import json
import logging
import math
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from nebula.catalog.models import PAGE_SIZE, CatalogPage, CatalogRecord
from nebula.errors import BadRequestError, PackageConflictError

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS catalog_assets (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  package_name TEXT NOT NULL UNIQUE,
  title TEXT,
  description TEXT,
  author TEXT,
  image TEXT,
  tags TEXT,              -- JSON, nullable
  version TEXT,
  background_image TEXT,
  background_video TEXT,
  payload TEXT,
  type TEXT NOT NULL,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);
"""

_COLUMNS = (
    "package_name",
    "title",
    "description",
    "author",
    "image",
    "tags",
    "version",
    "background_image",
    "background_video",
    "payload",
    "type",
)


class CatalogStore:
    """Durable table of package records keyed by ``package_name``."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = str(db_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def initialize(self) -> None:
        """Create the table if it does not exist yet."""
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(SCHEMA)
            conn.commit()

    # ------------------------------------------------------------------
    # Row conversion
    # ------------------------------------------------------------------

    @staticmethod
    def _record_from_row(row: sqlite3.Row) -> CatalogRecord:
        tags = json.loads(row["tags"]) if row["tags"] is not None else None
        return CatalogRecord(
            package_name=row["package_name"],
            title=row["title"] or "",
            description=row["description"] or "",
            author=row["author"] or "",
            image=row["image"] or "",
            tags=tags,
            version=row["version"] or "",
            background_image=row["background_image"],
            background_video=row["background_video"],
            payload=row["payload"] or "",
            type=row["type"],
        )

    @staticmethod
    def _record_to_row(record: CatalogRecord) -> tuple:
        return (
            record.package_name,
            record.title,
            record.description,
            record.author,
            record.image,
            json.dumps(record.tags) if record.tags is not None else None,
            record.version,
            record.background_image,
            record.background_video,
            record.payload,
            record.type.value,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def count(self) -> int:
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM catalog_assets").fetchone()[0]

    def list(self, page: int = 1) -> CatalogPage:
        """Return page *page* (1-based) of at most ``PAGE_SIZE`` records.

        A page past the end is empty, not an error.
        """
        if page < 1:
            raise BadRequestError("Page must be a positive number!")
        offset = (page - 1) * PAGE_SIZE
        with self._connect() as conn:
            # Count and page come from one snapshot.
            conn.execute("BEGIN")
            try:
                total = conn.execute("SELECT COUNT(*) FROM catalog_assets").fetchone()[0]
                rows = []
                # Offsets past the end may not fit in an SQLite INTEGER.
                if offset < total:
                    rows = conn.execute(
                        f"SELECT {', '.join(_COLUMNS)} FROM catalog_assets "
                        "ORDER BY id LIMIT ? OFFSET ?",
                        (PAGE_SIZE, offset),
                    ).fetchall()
            finally:
                conn.commit()
        return CatalogPage(
            items=[self._record_from_row(r) for r in rows],
            page=page,
            total_pages=math.ceil(total / PAGE_SIZE),
            total_count=total,
        )

    def get(self, package_name: str) -> Optional[CatalogRecord]:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM catalog_assets WHERE package_name = ?",
                (package_name,),
            ).fetchone()
        return self._record_from_row(row) if row else None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, record: CatalogRecord) -> CatalogRecord:
        """Insert *record*; raises :class:`PackageConflictError` on a duplicate name."""
        now = datetime.now(timezone.utc).isoformat()
        placeholders = ", ".join("?" for _ in range(len(_COLUMNS) + 2))
        try:
            with self._connect() as conn:
                conn.execute(
                    f"INSERT INTO catalog_assets ({', '.join(_COLUMNS)}, created_at, updated_at) "
                    f"VALUES ({placeholders})",
                    self._record_to_row(record) + (now, now),
                )
                conn.commit()
        except sqlite3.IntegrityError as exc:
            raise PackageConflictError("Package already exists!") from exc
        logger.debug("Inserted catalog record %s", record.package_name)
        return record

    def delete(self, package_name: str) -> bool:
        """Remove a record. Only used to roll back a half-finished create."""
        with self._connect() as conn:
            cur = conn.execute(
                "DELETE FROM catalog_assets WHERE package_name = ?", (package_name,)
            )
            conn.commit()
        return cur.rowcount > 0
