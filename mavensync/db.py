"""Database helpers for the MySQL upload store."""

from __future__ import annotations

from urllib.parse import unquote, urlparse

import pymysql
from pymysql.connections import Connection

from mavensync.settings import Settings


def _parse_database_url(url: str) -> dict:
    parsed = urlparse(url)
    if not parsed.scheme.startswith("mysql") or not parsed.hostname:
        raise ValueError(f"Unsupported database url: {url}")
    return {
        "host": parsed.hostname,
        "port": parsed.port or 3306,
        "user": unquote(parsed.username or ""),
        "password": unquote(parsed.password or ""),
        "db": parsed.path.lstrip("/") or None,
    }


def build_mysql_dsn(settings: Settings) -> dict:
    """Return kwargs for pymysql based on shared DB settings."""
    if settings.database_url:
        # Users can supply a full mysql:// URL when preferred.
        kwargs = _parse_database_url(settings.database_url)
    else:
        kwargs = {
            "host": settings.db_host,
            "port": settings.db_port,
            "user": settings.db_user,
            "password": settings.db_password,
            "db": settings.db_name,
        }
    kwargs.update(
        charset=settings.db_charset,
        cursorclass=pymysql.cursors.DictCursor,
        autocommit=False,
    )
    return kwargs


def mysql_connection(settings: Settings) -> Connection:
    """Create a raw pymysql connection."""
    return pymysql.connect(**build_mysql_dsn(settings))
