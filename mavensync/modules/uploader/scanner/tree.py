"""Walk the local tree and feed admitted artifacts to the upload queue."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from queue import Queue
from typing import Iterator, Optional, Set

from mavensync.modules.uploader.domain import EventKind, ResolvedArtifact, SyncEvent
from mavensync.modules.uploader.observer import OutcomeSink
from mavensync.modules.uploader.util import ResolutionError
from mavensync.modules.uploader.util.constants import UploaderConstant

from .dedup import ScanDeduplicator
from .filter import ArtifactFilter
from .resolver import CoordinateResolver


def is_descriptor(file_name: str) -> bool:
    return (
        file_name.endswith(UploaderConstant.DESCRIPTOR_EXTENSION)
        or file_name == UploaderConstant.DESCRIPTOR_NAME
    )


class TreeScanner:
    """Single-pass walk over ``root`` yielding artifacts ready for upload."""

    def __init__(
        self,
        root: Path,
        *,
        resolver: CoordinateResolver,
        artifact_filter: ArtifactFilter,
        deduplicator: ScanDeduplicator,
        sink: OutcomeSink,
        follow_symlinks: bool = False,
    ) -> None:
        self.root = Path(root)
        self.resolver = resolver
        self.artifact_filter = artifact_filter
        self.deduplicator = deduplicator
        self.sink = sink
        self.follow_symlinks = follow_symlinks
        self._stopped = threading.Event()
        self.log = logging.getLogger(self.__class__.__name__)

    def _on_walk_error(self, exc: OSError) -> None:
        self.log.debug("Walk error: %s", exc)
        self.sink.emit(
            SyncEvent(EventKind.SCAN_ERROR, f"cannot read {exc.filename}: {exc.strerror or exc}")
        )

    def _descriptor_paths(self) -> Iterator[Path]:
        visited: Set[str] = set()
        for dirpath, dirnames, filenames in os.walk(
            self.root, onerror=self._on_walk_error, followlinks=self.follow_symlinks
        ):
            if self.follow_symlinks:
                real = os.path.realpath(dirpath)
                if real in visited:
                    dirnames[:] = []
                    continue
                visited.add(real)
            dirnames.sort()
            # a named descriptor wins over pom.xml for the same coordinate
            for name in sorted(filenames, key=lambda n: (n == UploaderConstant.DESCRIPTOR_NAME, n)):
                if is_descriptor(name):
                    yield Path(dirpath, name)

    def _accept(self, path: Path) -> Optional[ResolvedArtifact]:
        try:
            if not path.is_file():
                return None
            if not self.deduplicator.try_claim(path):
                return None
            artifact = self.resolver.resolve(path, self.root)
            if not self.deduplicator.try_claim_coordinate(artifact.coordinate):
                self.log.debug("Skipping %s, %s already claimed", path, artifact.coordinate)
                return None
        except ResolutionError as exc:
            self.log.info("Skipping descriptor %s", exc)
            self.sink.emit(SyncEvent(EventKind.SCAN_ERROR, str(exc), detail=exc.reason.value))
            return None
        except OSError as exc:
            self.sink.emit(SyncEvent(EventKind.SCAN_ERROR, f"cannot resolve {path}: {exc}"))
            return None

        rejection = self.artifact_filter.check(artifact)
        if rejection is not None:
            self.sink.emit(
                SyncEvent(
                    EventKind.REJECTED,
                    f"{artifact.coordinate} {rejection}",
                    coordinate=artifact.coordinate,
                    detail=rejection.reason,
                )
            )
            return None
        return artifact

    def stop(self) -> None:
        """Ask a running scan to stop before its next descriptor."""
        self._stopped.set()

    def scan(self) -> Iterator[ResolvedArtifact]:
        self.log.info("Scanning %s", self.root)
        for path in self._descriptor_paths():
            if self._stopped.is_set():
                self.log.info("Scan stopped")
                return
            artifact = self._accept(path)
            if artifact is not None:
                yield artifact

    def feed(self, queue: "Queue[ResolvedArtifact]") -> int:
        """Put every admitted artifact on ``queue``; returns how many were queued."""
        count = 0
        for artifact in self.scan():
            self.sink.emit(
                SyncEvent(
                    EventKind.QUEUED,
                    str(artifact.coordinate),
                    coordinate=artifact.coordinate,
                    length_increment=1,
                )
            )
            queue.put(artifact)
            count += 1
        self.log.info("Scan finished, %d artifacts queued", count)
        return count
