"""Exclusion keyword and size gate for resolved artifacts."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from mavensync.modules.uploader.domain import FilterRejection, ResolvedArtifact
from mavensync.modules.uploader.util.constants import UploaderConstant

log = logging.getLogger(__name__)


class ArtifactFilter:
    """Admit or reject whole artifacts.

    An oversize binary rejects the entire artifact, descriptor included, so a
    remote never ends up with a pom whose jar was held back.
    """

    REASON_EXCLUDED = "excluded"
    REASON_OVERSIZE = "oversize"

    def __init__(self, exclude_keywords: Iterable[str] = (), max_size_mb: int = 100) -> None:
        self.exclude_keywords = [kw for kw in exclude_keywords if kw]
        self.max_size_mb = max_size_mb

    def check(self, artifact: ResolvedArtifact) -> Optional[FilterRejection]:
        coord = artifact.coordinate
        for keyword in self.exclude_keywords:
            if keyword in coord.artifact_id or keyword in coord.group_id:
                return FilterRejection(self.REASON_EXCLUDED, f"keyword '{keyword}' matches {coord}")

        for item in artifact.binaries:
            try:
                size = item.local_path.stat().st_size
            except OSError as exc:
                log.debug("Cannot stat %s: %s", item.local_path, exc)
                continue
            size_mb = size // UploaderConstant.MIB
            if size_mb > self.max_size_mb:
                return FilterRejection(
                    self.REASON_OVERSIZE,
                    f"{item.local_path.name} is {size_mb} MiB (limit {self.max_size_mb} MiB)",
                )
        return None

    def admit(self, artifact: ResolvedArtifact) -> bool:
        return self.check(artifact) is None
