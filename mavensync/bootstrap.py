"""Wire settings into a ready-to-run sync pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

import httpx

from mavensync.modules.uploader.observer import LoggingObserver, OutcomeSink, SyncObserver
from mavensync.modules.uploader.remote import NexusClient
from mavensync.modules.uploader.repositories import (
    IdempotencyStore,
    InMemoryIdempotencyStore,
    SqliteIdempotencyStore,
)
from mavensync.modules.uploader.scanner import (
    ArtifactFilter,
    CoordinateResolver,
    ScanDeduplicator,
    TreeScanner,
)
from mavensync.modules.uploader.service import SyncPipeline, UploadWorkerPool
from .settings import Settings

log = logging.getLogger(__name__)


def build_store(settings: Settings) -> IdempotencyStore:
    """Open the configured store; raises StoreInitError when it cannot."""
    backend = settings.store_backend
    if backend == "memory":
        log.warning("Using in-memory upload store, state is lost on exit")
        return InMemoryIdempotencyStore()
    if backend == "mysql":
        from mavensync.modules.uploader.repositories.mysql import MySQLIdempotencyStore

        return MySQLIdempotencyStore(settings)
    return SqliteIdempotencyStore(settings.nexus_db_path)


@dataclass
class ServiceContainer:
    """Container that wires plain-Python services with shared settings."""

    settings: Settings
    store: Optional[IdempotencyStore] = None
    http_client: Optional[httpx.Client] = None
    observers: Iterable[SyncObserver] = ()
    keep_events: bool = False

    sink: OutcomeSink = field(init=False)
    client: NexusClient = field(init=False)
    resolver: CoordinateResolver = field(init=False)
    artifact_filter: ArtifactFilter = field(init=False)
    deduplicator: ScanDeduplicator = field(init=False)
    scanner: TreeScanner = field(init=False)
    pool: UploadWorkerPool = field(init=False)
    pipeline: SyncPipeline = field(init=False)

    def __post_init__(self) -> None:
        settings = self.settings
        # the store comes first: nothing is scanned when it cannot be opened
        if self.store is None:
            self.store = build_store(settings)
        self.sink = OutcomeSink(
            [LoggingObserver(), *self.observers],
            keep_events=self.keep_events,
        )
        self.client = NexusClient(settings, client=self.http_client)
        self.resolver = CoordinateResolver.from_name(settings.resolve_strategy)
        self.artifact_filter = ArtifactFilter(settings.exclude_keywords, settings.nexus_max_size)
        self.deduplicator = ScanDeduplicator()
        self.scanner = TreeScanner(
            Path(settings.nexus_dir),
            resolver=self.resolver,
            artifact_filter=self.artifact_filter,
            deduplicator=self.deduplicator,
            sink=self.sink,
            follow_symlinks=settings.follow_symlinks,
        )
        self.pool = UploadWorkerPool(
            client=self.client,
            store=self.store,
            sink=self.sink,
            release_url=settings.release_base_url,
            snapshot_url=settings.snapshot_base_url,
            force=settings.nexus_force,
            workers=settings.upload_workers,
        )
        self.pipeline = SyncPipeline(scanner=self.scanner, pool=self.pool, sink=self.sink)

    def close(self) -> None:
        self.client.close()
        if self.store is not None:
            self.store.close()
