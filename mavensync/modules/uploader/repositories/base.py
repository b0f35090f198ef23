"""Repository contract for upload state persistence."""

from __future__ import annotations

from typing import Optional


class IdempotencyStore:
    """Durable ``remote url -> last uploaded mtime`` map.

    Every call is one short transaction; callers never hold a store
    transaction across network I/O.
    """

    def get(self, url: str) -> Optional[int]:
        raise NotImplementedError

    def put(self, url: str, mtime: int) -> None:
        raise NotImplementedError

    def close(self) -> None:
        return None

    def __enter__(self) -> "IdempotencyStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
