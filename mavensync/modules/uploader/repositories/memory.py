"""In-memory store implementation."""

from __future__ import annotations

import threading
from typing import Dict, Optional

from mavensync.modules.uploader.repositories.base import IdempotencyStore


class InMemoryIdempotencyStore(IdempotencyStore):
    """Simple storage for dry runs and tests; forgotten on exit."""

    def __init__(self) -> None:
        self.records: Dict[str, int] = {}
        self._lock = threading.Lock()

    def get(self, url: str) -> Optional[int]:
        with self._lock:
            return self.records.get(url)

    def put(self, url: str, mtime: int) -> None:
        with self._lock:
            self.records[url] = int(mtime)
