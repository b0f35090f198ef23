"""Exceptions raised by the uploader pipeline."""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class UploaderError(Exception):
    """Base class for uploader failures."""


class ResolutionErrorReason(str, Enum):
    NOT_UNDER_ROOT = "not_under_root"
    TOO_SHALLOW = "too_shallow"


class ResolutionError(UploaderError):
    """A descriptor path could not be turned into a coordinate."""

    def __init__(self, reason: ResolutionErrorReason, path: Path, detail: str = "") -> None:
        self.reason = reason
        self.path = path
        message = f"{reason.value}: {path}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class StoreError(UploaderError):
    """Upload state store failure."""


class StoreInitError(StoreError):
    """The store could not be opened or created."""


class StoreWriteError(StoreError):
    """An upsert into the store did not commit."""
