"""Constants shared across the uploader module."""

from __future__ import annotations


class UploaderConstant:
    SNAPSHOT_SUFFIX = "-SNAPSHOT"

    DESCRIPTOR_SUFFIX = "pom"
    DESCRIPTOR_EXTENSION = ".pom"
    DESCRIPTOR_NAME = "pom.xml"

    BINARY_SUFFIXES = ("jar", "war")
    CHECKSUM_EXTENSIONS = (".sha1", ".md5", ".sha256", ".sha512")

    # Maven's local-repository bookkeeping, never uploaded.
    MARKER_FRAGMENTS = ("_remote.repositories",)
    MARKER_SUFFIXES = (".lastUpdated", ".lock", ".part")

    DEFAULT_PACKAGING = "jar"
    PROBE_EXTENSIONS = ("jar", "war", "aar", "tar.gz")

    MIB = 1024 * 1024
    MIN_PATH_SEGMENTS = 4

    STORE_TABLE = "uploads_v1"
    RESPONSE_BODY_LIMIT = 500
