"""Domain objects describing artifacts found in a local Maven tree."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from mavensync.modules.uploader.util.constants import UploaderConstant


@dataclass(frozen=True)
class ArtifactCoordinate:
    """Represents a Maven group/artifact/version coordinate."""

    group_id: str
    artifact_id: str
    version: str

    def __post_init__(self) -> None:
        for name in ("group_id", "artifact_id", "version"):
            if not getattr(self, name):
                raise ValueError(f"{name} must not be empty")

    @property
    def is_snapshot(self) -> bool:
        return self.version.endswith(UploaderConstant.SNAPSHOT_SUFFIX)

    @property
    def group_path(self) -> str:
        return self.group_id.replace(".", "/")

    @property
    def prefix(self) -> str:
        return f"{self.artifact_id}-{self.version}"

    def file_name(self, remote_suffix: str) -> str:
        return f"{self.prefix}.{remote_suffix}"

    def relative_url(self, remote_suffix: str) -> str:
        return "/".join(
            [
                self.group_path,
                self.artifact_id,
                self.version,
                self.file_name(remote_suffix),
            ]
        )

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


@dataclass(frozen=True)
class ArtifactFile:
    """One file of an artifact.

    ``remote_suffix`` is everything after ``<artifactId>-<version>`` and its
    separator, so ``lib-1.0-sources.jar`` uploads as ``lib-1.0.sources.jar``.
    """

    local_path: Path
    remote_suffix: str

    @property
    def is_binary(self) -> bool:
        return self.remote_suffix in UploaderConstant.BINARY_SUFFIXES

    @property
    def is_checksum(self) -> bool:
        return self.remote_suffix.endswith(UploaderConstant.CHECKSUM_EXTENSIONS)


@dataclass(frozen=True)
class ResolvedArtifact:
    """A coordinate plus the files that belong to it, descriptor first."""

    coordinate: ArtifactCoordinate
    descriptor: Path
    files: Tuple[ArtifactFile, ...]

    @property
    def binaries(self) -> Tuple[ArtifactFile, ...]:
        return tuple(f for f in self.files if f.is_binary)

    def __str__(self) -> str:
        return str(self.coordinate)
