"""Run outcomes reported by the scanner and the upload workers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .artifact import ArtifactCoordinate


class FileOutcome(str, Enum):
    SKIPPED_LOCAL = "skipped_local"
    SKIPPED_REMOTE = "skipped_remote"
    UPLOADED = "uploaded"
    FAILED = "failed"


class EventKind(str, Enum):
    QUEUED = "queued"
    REJECTED = "rejected"
    SCAN_ERROR = "scan_error"
    FILE = "file"
    STORE_ERROR = "store_error"
    ARTIFACT_DONE = "artifact_done"


@dataclass(frozen=True)
class FilterRejection:
    """Why an artifact was kept out of the upload queue."""

    reason: str
    detail: str

    def __str__(self) -> str:
        return f"{self.reason}: {self.detail}"


@dataclass(frozen=True)
class SyncEvent:
    kind: EventKind
    message: str
    coordinate: Optional[ArtifactCoordinate] = None
    url: Optional[str] = None
    outcome: Optional[FileOutcome] = None
    detail: Optional[str] = None
    quiet: bool = False
    length_increment: int = 0
    position_increment: int = 0


@dataclass
class FileResult:
    url: str
    outcome: FileOutcome
    mtime: Optional[int] = None
    status_code: Optional[int] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is not FileOutcome.FAILED


@dataclass
class RunSummary:
    queued: int = 0
    rejected: int = 0
    scan_errors: int = 0
    store_errors: int = 0
    artifacts_done: int = 0
    outcomes: Dict[FileOutcome, int] = field(
        default_factory=lambda: {outcome: 0 for outcome in FileOutcome}
    )
    failed_urls: List[str] = field(default_factory=list)

    def count(self, outcome: FileOutcome) -> int:
        return self.outcomes.get(outcome, 0)

    @property
    def uploaded(self) -> int:
        return self.count(FileOutcome.UPLOADED)

    @property
    def failed(self) -> int:
        return self.count(FileOutcome.FAILED)

    def describe(self) -> str:
        return (
            f"artifacts={self.artifacts_done}/{self.queued} rejected={self.rejected} "
            f"uploaded={self.uploaded} "
            f"skipped_local={self.count(FileOutcome.SKIPPED_LOCAL)} "
            f"skipped_remote={self.count(FileOutcome.SKIPPED_REMOTE)} "
            f"failed={self.failed} scan_errors={self.scan_errors} "
            f"store_errors={self.store_errors}"
        )
