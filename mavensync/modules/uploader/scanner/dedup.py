"""Per-run guard against queueing the same descriptor or coordinate twice."""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Set, Union

from mavensync.modules.uploader.domain import ArtifactCoordinate


class ScanDeduplicator:
    def __init__(self) -> None:
        self._claimed: Set[str] = set()
        self._coordinates: Set[ArtifactCoordinate] = set()
        self._lock = threading.Lock()

    @staticmethod
    def _key(path: Union[str, Path]) -> str:
        return os.path.realpath(path)

    def try_claim(self, path: Union[str, Path]) -> bool:
        """Return True the first time a canonical path is seen in this run."""
        key = self._key(path)
        with self._lock:
            if key in self._claimed:
                return False
            self._claimed.add(key)
            return True

    def try_claim_coordinate(self, coordinate: ArtifactCoordinate) -> bool:
        """Return True the first time a coordinate is seen in this run.

        ``pom.xml`` and ``<artifactId>-<version>.pom`` in one version directory
        resolve to the same coordinate and the same target urls.
        """
        with self._lock:
            if coordinate in self._coordinates:
                return False
            self._coordinates.add(coordinate)
            return True

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        with self._lock:
            return self._key(path) in self._claimed

    def __len__(self) -> int:
        with self._lock:
            return len(self._claimed)
