from .dedup import ScanDeduplicator
from .filter import ArtifactFilter
from .resolver import (
    CoordinateResolver,
    PackagingProbeStrategy,
    PrefixScanStrategy,
    read_packaging,
)
from .tree import TreeScanner, is_descriptor

__all__ = [
    "ScanDeduplicator",
    "ArtifactFilter",
    "CoordinateResolver",
    "PackagingProbeStrategy",
    "PrefixScanStrategy",
    "read_packaging",
    "TreeScanner",
    "is_descriptor",
]
