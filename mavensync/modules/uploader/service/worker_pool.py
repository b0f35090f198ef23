"""Upload workers draining the artifact queue.

Each file goes through the same three checks, cheapest first:

1. the local store already holds this file's mtime for the target url;
2. the remote answers HEAD with 2xx (recorded, then skipped);
3. PUT the bytes, and record the mtime only after a 2xx response.

A failed file is logged and left unrecorded, so the next run retries it.
"""

from __future__ import annotations

import logging
import threading
from queue import Empty, Queue
from typing import List, Optional

import httpx

from mavensync.modules.uploader.domain import (
    ArtifactCoordinate,
    ArtifactFile,
    EventKind,
    FileOutcome,
    FileResult,
    ResolvedArtifact,
    SyncEvent,
)
from mavensync.modules.uploader.observer import OutcomeSink
from mavensync.modules.uploader.remote import NexusClient
from mavensync.modules.uploader.repositories import IdempotencyStore
from mavensync.modules.uploader.util import StoreError
from mavensync.modules.uploader.util.constants import UploaderConstant

_STOP = object()


def _normalize_base(url: str) -> str:
    return url.rstrip("/") + "/"


class UploadWorker(threading.Thread):
    """Worker thread that processes artifacts until it sees the stop marker."""

    def __init__(self, *, index: int, pool: "UploadWorkerPool", queue: Queue) -> None:
        super().__init__(name=f"UploadWorker-{index}", daemon=True)
        self.pool = pool
        self.queue = queue
        self.log = logging.getLogger(self.__class__.__name__)

    def run(self) -> None:
        while True:
            item = self.queue.get()
            try:
                if item is _STOP:
                    return
                self.pool.process_artifact(item)
            except Exception:  # noqa: BLE001
                self.log.exception("Unexpected failure while processing %s", item)
            finally:
                self.queue.task_done()


class UploadWorkerPool:
    """Fixed-size pool applying the store/probe/transfer protocol per file."""

    def __init__(
        self,
        *,
        client: NexusClient,
        store: IdempotencyStore,
        sink: OutcomeSink,
        release_url: str,
        snapshot_url: Optional[str] = None,
        force: bool = False,
        workers: int = 4,
        queue: Optional[Queue] = None,
    ) -> None:
        self.client = client
        self.store = store
        self.sink = sink
        self.release_url = _normalize_base(release_url)
        self.snapshot_url = _normalize_base(snapshot_url) if snapshot_url else None
        self.force = force
        self.workers = max(1, int(workers))
        self.queue: Queue = queue if queue is not None else Queue()
        self._threads: List[UploadWorker] = []
        self._cancelled = threading.Event()
        self.log = logging.getLogger(self.__class__.__name__)

    # ------------------------------------------------------------------ lifecycle
    def start(self) -> None:
        if self._threads:
            raise RuntimeError("pool already started")
        for index in range(self.workers):
            thread = UploadWorker(index=index, pool=self, queue=self.queue)
            self._threads.append(thread)
            thread.start()
        self.log.info("Started %d upload workers", self.workers)

    def cancel_pending(self) -> int:
        """Drop every queued artifact and stop in-flight ones after their current file.

        Returns how many queued artifacts were dropped.
        """
        self._cancelled.set()
        dropped = 0
        while True:
            try:
                self.queue.get_nowait()
            except Empty:
                return dropped
            self.queue.task_done()
            dropped += 1

    def shutdown(self) -> None:
        """Let workers finish everything queued so far, then wait for them."""
        for _ in self._threads:
            self.queue.put(_STOP)
        for thread in self._threads:
            thread.join()
        self._threads.clear()

    # ------------------------------------------------------------------ protocol
    def base_url(self, coordinate: ArtifactCoordinate) -> str:
        if coordinate.is_snapshot and self.snapshot_url:
            return self.snapshot_url
        return self.release_url

    def target_url(self, coordinate: ArtifactCoordinate, item: ArtifactFile) -> str:
        return self.base_url(coordinate) + coordinate.relative_url(item.remote_suffix)

    def process_artifact(self, artifact: ResolvedArtifact) -> List[FileResult]:
        results = []
        for item in artifact.files:
            if self._cancelled.is_set():
                return results
            try:
                result = self.process_file(artifact.coordinate, item)
            except Exception as exc:  # noqa: BLE001
                self.log.exception("Unexpected failure on %s", item.local_path)
                result = FileResult(
                    url=self.target_url(artifact.coordinate, item),
                    outcome=FileOutcome.FAILED,
                    detail=f"{type(exc).__name__}: {exc}",
                )
            self._report(artifact.coordinate, item, result)
            results.append(result)
        self.sink.emit(
            SyncEvent(
                EventKind.ARTIFACT_DONE,
                str(artifact.coordinate),
                coordinate=artifact.coordinate,
                position_increment=1,
            )
        )
        return results

    def process_file(self, coordinate: ArtifactCoordinate, item: ArtifactFile) -> FileResult:
        url = self.target_url(coordinate, item)
        try:
            mtime = int(item.local_path.stat().st_mtime)
        except OSError as exc:
            return FileResult(url, FileOutcome.FAILED, detail=f"cannot stat {item.local_path}: {exc}")

        if not self.force:
            if self._stored_mtime(url) == mtime:
                return FileResult(url, FileOutcome.SKIPPED_LOCAL, mtime=mtime)
            if self._remote_has(url):
                self._record(coordinate, url, mtime)
                return FileResult(url, FileOutcome.SKIPPED_REMOTE, mtime=mtime)

        try:
            data = item.local_path.read_bytes()
        except OSError as exc:
            return FileResult(url, FileOutcome.FAILED, mtime=mtime, detail=f"cannot read: {exc}")

        try:
            response = self.client.upload(url, data)
        except httpx.HTTPError as exc:
            return FileResult(url, FileOutcome.FAILED, mtime=mtime, detail=f"network error: {exc}")

        if not response.is_success:
            body = response.text[: UploaderConstant.RESPONSE_BODY_LIMIT]
            return FileResult(
                url,
                FileOutcome.FAILED,
                mtime=mtime,
                status_code=response.status_code,
                detail=f"HTTP {response.status_code}: {body}",
            )

        self._record(coordinate, url, mtime)
        return FileResult(url, FileOutcome.UPLOADED, mtime=mtime, status_code=response.status_code)

    # ------------------------------------------------------------------ helpers
    def _stored_mtime(self, url: str) -> Optional[int]:
        try:
            return self.store.get(url)
        except StoreError as exc:
            self.sink.emit(SyncEvent(EventKind.STORE_ERROR, url, url=url, detail=str(exc)))
            return None

    def _remote_has(self, url: str) -> bool:
        try:
            return self.client.exists(url)
        except httpx.HTTPError as exc:
            self.log.debug("HEAD %s failed, will upload: %s", url, exc)
            return False

    def _record(self, coordinate: ArtifactCoordinate, url: str, mtime: int) -> None:
        try:
            self.store.put(url, mtime)
        except StoreError as exc:
            # the next run re-uploads or re-probes this file
            self.sink.emit(
                SyncEvent(
                    EventKind.STORE_ERROR,
                    url,
                    coordinate=coordinate,
                    url=url,
                    detail=str(exc),
                )
            )

    def _report(self, coordinate: ArtifactCoordinate, item: ArtifactFile, result: FileResult) -> None:
        name = coordinate.file_name(item.remote_suffix)
        self.sink.emit(
            SyncEvent(
                EventKind.FILE,
                name,
                coordinate=coordinate,
                url=result.url,
                outcome=result.outcome,
                detail=result.detail or None,
                quiet=item.is_checksum and result.ok,
            )
        )
