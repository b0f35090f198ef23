"""Outcome sink shared by the scanner and the upload workers."""

from __future__ import annotations

import logging
import threading
from typing import Iterable, List, Optional, Protocol

from mavensync.modules.uploader.domain import EventKind, FileOutcome, RunSummary, SyncEvent

log = logging.getLogger(__name__)


class SyncObserver(Protocol):
    """Receives every event; progress displays implement this."""

    def notify(self, event: SyncEvent) -> None:  # pragma: no cover - interface
        ...


class LoggingObserver:
    """Default observer that writes each event to the log."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.log = logger or logging.getLogger("mavensync.outcome")

    def notify(self, event: SyncEvent) -> None:
        if event.kind is EventKind.FILE:
            if event.outcome is FileOutcome.FAILED:
                self.log.warning("[failed] %s %s", event.message, event.detail or "")
            elif event.quiet:
                self.log.debug("[%s] %s", event.outcome.value, event.message)
            else:
                self.log.info("[%s] %s", event.outcome.value, event.message)
        elif event.kind is EventKind.REJECTED:
            self.log.info("[rejected] %s", event.message)
        elif event.kind is EventKind.SCAN_ERROR:
            self.log.warning("[scan] %s", event.message)
        elif event.kind is EventKind.STORE_ERROR:
            self.log.error("[store] %s %s", event.message, event.detail or "")
        else:
            self.log.debug("[%s] %s", event.kind.value, event.message)


class OutcomeSink:
    """Collects a RunSummary and fans events out to observers."""

    def __init__(self, observers: Iterable[SyncObserver] = (), *, keep_events: bool = False) -> None:
        self.observers: List[SyncObserver] = list(observers)
        self.summary = RunSummary()
        self.keep_events = keep_events
        self.events: List[SyncEvent] = []
        self._lock = threading.Lock()

    def emit(self, event: SyncEvent) -> None:
        with self._lock:
            self._account(event)
            if self.keep_events:
                self.events.append(event)
        for observer in self.observers:
            try:
                observer.notify(event)
            except Exception:  # noqa: BLE001
                log.exception("Observer %r raised for %s", observer, event.kind.value)

    def _account(self, event: SyncEvent) -> None:
        summary = self.summary
        if event.kind is EventKind.QUEUED:
            summary.queued += 1
        elif event.kind is EventKind.REJECTED:
            summary.rejected += 1
        elif event.kind is EventKind.SCAN_ERROR:
            summary.scan_errors += 1
        elif event.kind is EventKind.STORE_ERROR:
            summary.store_errors += 1
        elif event.kind is EventKind.ARTIFACT_DONE:
            summary.artifacts_done += 1
        elif event.kind is EventKind.FILE and event.outcome is not None:
            summary.outcomes[event.outcome] += 1
            if event.outcome is FileOutcome.FAILED and event.url:
                summary.failed_urls.append(event.url)

    def file_events(self, outcome: Optional[FileOutcome] = None) -> List[SyncEvent]:
        with self._lock:
            return [
                e
                for e in self.events
                if e.kind is EventKind.FILE and (outcome is None or e.outcome is outcome)
            ]
