"""Scanner thread plus upload pool, wired for one run."""

from __future__ import annotations

import logging
import threading
import time

from mavensync.modules.uploader.domain import EventKind, RunSummary, SyncEvent
from mavensync.modules.uploader.observer import OutcomeSink
from mavensync.modules.uploader.scanner import TreeScanner

from .worker_pool import UploadWorkerPool

log = logging.getLogger(__name__)


class SyncPipeline:
    """Run the scanner concurrently with the workers until the queue drains."""

    def __init__(self, *, scanner: TreeScanner, pool: UploadWorkerPool, sink: OutcomeSink) -> None:
        self.scanner = scanner
        self.pool = pool
        self.sink = sink

    def _scan(self) -> None:
        try:
            self.scanner.feed(self.pool.queue)
        except Exception as exc:  # noqa: BLE001
            log.exception("Scanner stopped early")
            self.sink.emit(SyncEvent(EventKind.SCAN_ERROR, f"scan aborted: {exc}"))

    def _wait(self, scan_thread: threading.Thread) -> None:
        scan_thread.join()

    def cancel(self) -> None:
        """Stop scanning and drop queued work; in-flight files still complete."""
        self.scanner.stop()
        dropped = self.pool.cancel_pending()
        log.warning("Interrupted, dropped %d queued artifacts", dropped)

    def run(self) -> RunSummary:
        start_time = time.time()
        self.pool.start()
        scan_thread = threading.Thread(target=self._scan, name="TreeScanner", daemon=True)
        scan_thread.start()
        try:
            self._wait(scan_thread)
        except KeyboardInterrupt:
            self.cancel()
            raise
        finally:
            self.pool.shutdown()
        summary = self.sink.summary
        log.info("Sync finished in %.2fs: %s", time.time() - start_time, summary.describe())
        return summary
