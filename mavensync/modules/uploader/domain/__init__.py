from .artifact import ArtifactCoordinate, ArtifactFile, ResolvedArtifact
from .outcomes import (
    EventKind,
    FileOutcome,
    FileResult,
    FilterRejection,
    RunSummary,
    SyncEvent,
)

__all__ = [
    "ArtifactCoordinate",
    "ArtifactFile",
    "ResolvedArtifact",
    "EventKind",
    "FileOutcome",
    "FileResult",
    "FilterRejection",
    "RunSummary",
    "SyncEvent",
]
