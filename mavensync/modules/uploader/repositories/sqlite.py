"""SQLite-backed upload store, the default backend."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Optional, Union

from mavensync.modules.uploader.repositories.base import IdempotencyStore
from mavensync.modules.uploader.util import StoreError, StoreInitError, StoreWriteError
from mavensync.modules.uploader.util.constants import UploaderConstant

log = logging.getLogger(__name__)

TABLE = UploaderConstant.STORE_TABLE

SCHEMA_STATEMENT = f"""
    CREATE TABLE IF NOT EXISTS {TABLE} (
        url TEXT PRIMARY KEY,
        mtime INTEGER NOT NULL
    );
"""


class SqliteIdempotencyStore(IdempotencyStore):
    """One connection per call so worker threads never share a cursor."""

    def __init__(self, db_path: Union[str, Path], *, timeout: float = 30.0) -> None:
        self.db_path = Path(db_path)
        self.timeout = timeout
        self.init_schema()

    def connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path, timeout=self.timeout)

    def init_schema(self) -> None:
        try:
            if self.db_path.parent and not self.db_path.parent.exists():
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with closing(self.connect()) as conn:
                conn.execute("PRAGMA journal_mode = WAL;")
                with conn:
                    conn.execute(SCHEMA_STATEMENT)
        except (sqlite3.Error, OSError) as exc:
            raise StoreInitError(f"cannot open upload store {self.db_path}: {exc}") from exc
        log.info("Upload store ready at %s", self.db_path)

    def get(self, url: str) -> Optional[int]:
        try:
            with closing(self.connect()) as conn:
                row = conn.execute(f"SELECT mtime FROM {TABLE} WHERE url = ?;", (url,)).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"lookup failed for {url}: {exc}") from exc
        return int(row[0]) if row else None

    def put(self, url: str, mtime: int) -> None:
        try:
            with closing(self.connect()) as conn, conn:
                conn.execute(
                    f"""
                    INSERT INTO {TABLE} (url, mtime) VALUES (?, ?)
                    ON CONFLICT(url) DO UPDATE SET mtime = excluded.mtime;
                    """,
                    (url, int(mtime)),
                )
        except sqlite3.Error as exc:
            raise StoreWriteError(f"upsert failed for {url}: {exc}") from exc

    def count(self) -> int:
        with closing(self.connect()) as conn:
            return int(conn.execute(f"SELECT COUNT(*) FROM {TABLE};").fetchone()[0])
