"""Utility modules for the uploader."""

from .constants import UploaderConstant
from .exceptions import (
    ResolutionError,
    ResolutionErrorReason,
    StoreError,
    StoreInitError,
    StoreWriteError,
    UploaderError,
)

__all__ = [
    "UploaderConstant",
    "ResolutionError",
    "ResolutionErrorReason",
    "StoreError",
    "StoreInitError",
    "StoreWriteError",
    "UploaderError",
]
