"""Repository exports."""

from .base import IdempotencyStore
from .memory import InMemoryIdempotencyStore
from .sqlite import SqliteIdempotencyStore

__all__ = ["IdempotencyStore", "InMemoryIdempotencyStore", "SqliteIdempotencyStore"]
