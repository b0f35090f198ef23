"""MySQL-backed upload store for teams sharing state across machines."""

from __future__ import annotations

import hashlib
import logging
from contextlib import contextmanager
from typing import Callable, Optional

import pymysql

from mavensync.db import mysql_connection
from mavensync.modules.uploader.repositories.base import IdempotencyStore
from mavensync.modules.uploader.util import StoreError, StoreInitError, StoreWriteError
from mavensync.modules.uploader.util.constants import UploaderConstant
from mavensync.settings import Settings

log = logging.getLogger(__name__)

TABLE = UploaderConstant.STORE_TABLE


def url_key(url: str) -> str:
    # URLs can exceed InnoDB's index length, so the primary key is a digest.
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


class MySQLIdempotencyStore(IdempotencyStore):
    """Same table contract as the SQLite store, keyed by ``sha256(url)``."""

    def __init__(
        self,
        settings: Settings,
        connection_factory: Optional[Callable[[Settings], "pymysql.connections.Connection"]] = None,
    ) -> None:
        self.settings = settings
        self._connect = connection_factory or mysql_connection
        self.init_schema()

    @contextmanager
    def _conn(self):
        conn = self._connect(self.settings)
        try:
            yield conn
        finally:
            conn.close()

    def init_schema(self) -> None:
        sql = (
            f"CREATE TABLE IF NOT EXISTS {TABLE} ("
            "url_hash CHAR(64) NOT NULL PRIMARY KEY, "
            "url TEXT NOT NULL, "
            "mtime BIGINT NOT NULL"
            ") DEFAULT CHARSET=utf8mb4"
        )
        try:
            with self._conn() as conn, conn.cursor() as cur:
                cur.execute(sql)
                conn.commit()
        except (pymysql.MySQLError, ValueError) as exc:
            raise StoreInitError(f"cannot prepare MySQL upload store: {exc}") from exc
        log.info("Upload store ready in MySQL table %s", TABLE)

    def get(self, url: str) -> Optional[int]:
        sql = f"SELECT mtime FROM {TABLE} WHERE url_hash = %s"
        try:
            with self._conn() as conn, conn.cursor() as cur:
                cur.execute(sql, (url_key(url),))
                row = cur.fetchone()
        except pymysql.MySQLError as exc:
            raise StoreError(f"lookup failed for {url}: {exc}") from exc
        if not row:
            return None
        value = row["mtime"] if isinstance(row, dict) else row[0]
        return int(value)

    def put(self, url: str, mtime: int) -> None:
        sql = (
            f"INSERT INTO {TABLE} (url_hash, url, mtime) VALUES (%s, %s, %s) "
            "ON DUPLICATE KEY UPDATE mtime = VALUES(mtime)"
        )
        try:
            with self._conn() as conn, conn.cursor() as cur:
                cur.execute(sql, (url_key(url), url, int(mtime)))
                conn.commit()
        except pymysql.MySQLError as exc:
            raise StoreWriteError(f"upsert failed for {url}: {exc}") from exc
