"""Turn descriptor paths from a local Maven tree into resolved artifacts."""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Protocol

from mavensync.modules.uploader.domain import ArtifactCoordinate, ArtifactFile, ResolvedArtifact
from mavensync.modules.uploader.util import ResolutionError, ResolutionErrorReason
from mavensync.modules.uploader.util.constants import UploaderConstant

log = logging.getLogger(__name__)


class FileDiscoveryStrategy(Protocol):
    """Finds the non-descriptor files that belong to a coordinate."""

    name: str

    def discover(self, coordinate: ArtifactCoordinate, descriptor: Path) -> List[ArtifactFile]:  # pragma: no cover - interface
        ...


def _is_marker(file_name: str) -> bool:
    if any(fragment in file_name for fragment in UploaderConstant.MARKER_FRAGMENTS):
        return True
    return file_name.endswith(UploaderConstant.MARKER_SUFFIXES)


class PrefixScanStrategy:
    """Collect every sibling file named ``<artifactId>-<version>[.-]<tail>``.

    Picks up classifier jars, checksums and signatures alongside the main
    binary, at the cost of trusting whatever lives in the version directory.
    """

    name = "prefix"

    def discover(self, coordinate: ArtifactCoordinate, descriptor: Path) -> List[ArtifactFile]:
        prefix = coordinate.prefix
        files: List[ArtifactFile] = []
        try:
            entries = sorted(os.scandir(descriptor.parent), key=lambda e: e.name)
        except OSError as exc:
            log.warning("Cannot list %s: %s", descriptor.parent, exc)
            return files

        for entry in entries:
            name = entry.name
            if not name.startswith(prefix) or _is_marker(name):
                continue
            separator, tail = name[len(prefix):len(prefix) + 1], name[len(prefix) + 1:]
            if separator not in (".", "-") or not tail:
                continue
            if tail == UploaderConstant.DESCRIPTOR_SUFFIX:
                # the descriptor is added by the resolver itself
                continue
            try:
                if not entry.is_file():
                    continue
            except OSError:
                continue
            files.append(ArtifactFile(Path(entry.path), tail))
        return files


class PackagingProbeStrategy:
    """Read ``<packaging>`` and probe a fixed list of binary extensions."""

    name = "packaging"

    def discover(self, coordinate: ArtifactCoordinate, descriptor: Path) -> List[ArtifactFile]:
        packaging = read_packaging(descriptor)
        candidates = [packaging, *UploaderConstant.PROBE_EXTENSIONS]
        seen = set()
        for ext in candidates:
            if ext in seen:
                continue
            seen.add(ext)
            path = descriptor.parent / coordinate.file_name(ext)
            if path.is_file():
                return [ArtifactFile(path, ext)]
        return []


def read_packaging(descriptor: Path) -> str:
    """Return the descriptor's ``<packaging>`` value, ``jar`` when missing."""
    try:
        root = ET.parse(descriptor).getroot()
    except (ET.ParseError, OSError) as exc:
        log.debug("Cannot parse %s, assuming jar packaging: %s", descriptor, exc)
        return UploaderConstant.DEFAULT_PACKAGING
    for child in root:
        if not isinstance(child.tag, str):
            continue
        if child.tag.rsplit("}", 1)[-1] == "packaging":
            value = (child.text or "").strip()
            return value or UploaderConstant.DEFAULT_PACKAGING
    return UploaderConstant.DEFAULT_PACKAGING


STRATEGIES = {
    PrefixScanStrategy.name: PrefixScanStrategy,
    PackagingProbeStrategy.name: PackagingProbeStrategy,
}


class CoordinateResolver:
    """Map ``root/g1/.../artifactId/version/descriptor`` to a ResolvedArtifact."""

    def __init__(self, strategy: FileDiscoveryStrategy | None = None) -> None:
        self.strategy = strategy or PrefixScanStrategy()

    @classmethod
    def from_name(cls, name: str) -> "CoordinateResolver":
        try:
            return cls(STRATEGIES[name]())
        except KeyError:
            raise ValueError(f"Unknown resolve strategy: {name}") from None

    def resolve(self, descriptor: Path, root: Path) -> ResolvedArtifact:
        abs_descriptor = Path(os.path.realpath(descriptor))
        abs_root = Path(os.path.realpath(root))
        try:
            relative = abs_descriptor.relative_to(abs_root)
        except ValueError:
            raise ResolutionError(ResolutionErrorReason.NOT_UNDER_ROOT, abs_descriptor) from None

        parts = relative.parts
        if len(parts) < UploaderConstant.MIN_PATH_SEGMENTS:
            raise ResolutionError(
                ResolutionErrorReason.TOO_SHALLOW,
                abs_descriptor,
                f"{len(parts)} segments",
            )

        coordinate = ArtifactCoordinate(
            group_id=".".join(parts[:-3]),
            artifact_id=parts[-3],
            version=parts[-2],
        )
        files = [ArtifactFile(abs_descriptor, UploaderConstant.DESCRIPTOR_SUFFIX)]
        files.extend(self.strategy.discover(coordinate, abs_descriptor))
        return ResolvedArtifact(coordinate=coordinate, descriptor=abs_descriptor, files=tuple(files))
