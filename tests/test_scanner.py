import os
from queue import Queue

import pytest

from conftest import write_artifact
from mavensync.modules.uploader.domain import EventKind
from mavensync.modules.uploader.observer import OutcomeSink
from mavensync.modules.uploader.scanner import (
    ArtifactFilter,
    CoordinateResolver,
    ScanDeduplicator,
    TreeScanner,
    is_descriptor,
)


def _scanner(root, *, exclude=(), follow_symlinks=False):
    sink = OutcomeSink(keep_events=True)
    scanner = TreeScanner(
        root,
        resolver=CoordinateResolver(),
        artifact_filter=ArtifactFilter(exclude),
        deduplicator=ScanDeduplicator(),
        sink=sink,
        follow_symlinks=follow_symlinks,
    )
    return scanner, sink


def test_descriptor_names():
    assert is_descriptor("lib-1.0.pom")
    assert is_descriptor("pom.xml")
    assert not is_descriptor("lib-1.0.pom.sha1")
    assert not is_descriptor("pom.xml.bak")


def test_scan_queues_every_artifact(repo_root):
    write_artifact(repo_root, "com.example", "lib", "1.0")
    write_artifact(repo_root, "com.example", "lib", "1.1")
    write_artifact(repo_root, "org.acme.tools", "cli", "2.0-SNAPSHOT")
    scanner, sink = _scanner(repo_root)
    queue = Queue()

    count = scanner.feed(queue)

    assert count == 3
    coords = sorted(str(queue.get().coordinate) for _ in range(3))
    assert coords == [
        "com.example:lib:1.0",
        "com.example:lib:1.1",
        "org.acme.tools:cli:2.0-SNAPSHOT",
    ]
    assert sink.summary.queued == 3
    assert sum(e.length_increment for e in sink.events) == 3


def test_shallow_descriptor_is_reported_and_skipped(repo_root):
    write_artifact(repo_root, "com.example", "lib", "1.0")
    (repo_root / "stray.pom").write_text("<project/>")
    scanner, sink = _scanner(repo_root)

    artifacts = list(scanner.scan())

    assert [str(a.coordinate) for a in artifacts] == ["com.example:lib:1.0"]
    assert sink.summary.scan_errors == 1
    scan_errors = [e for e in sink.events if e.kind is EventKind.SCAN_ERROR]
    assert scan_errors[0].detail == "too_shallow"


def test_excluded_artifact_is_reported_not_queued(repo_root):
    write_artifact(repo_root, "com.example", "lib", "1.0")
    write_artifact(repo_root, "com.example", "lib-test", "1.0")
    scanner, sink = _scanner(repo_root, exclude=["test"])

    artifacts = list(scanner.scan())

    assert [a.coordinate.artifact_id for a in artifacts] == ["lib"]
    assert sink.summary.rejected == 1


def test_symlinked_descriptor_is_claimed_once(repo_root):
    directory = write_artifact(repo_root, "com.example", "lib", "1.0")
    alias = repo_root / "com" / "example" / "lib" / "current"
    alias.mkdir()
    os.symlink(directory / "lib-1.0.pom", alias / "lib-1.0.pom")
    scanner, _ = _scanner(repo_root)

    artifacts = list(scanner.scan())

    assert len(artifacts) == 1


def test_symlink_cycle_terminates(repo_root):
    directory = write_artifact(repo_root, "com.example", "lib", "1.0")
    os.symlink(repo_root / "com", directory / "loop")
    scanner, _ = _scanner(repo_root, follow_symlinks=True)

    artifacts = list(scanner.scan())

    assert [str(a.coordinate) for a in artifacts] == ["com.example:lib:1.0"]


@pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
def test_unreadable_directory_does_not_abort_scan(repo_root):
    write_artifact(repo_root, "com.example", "lib", "1.0")
    locked = repo_root / "org" / "secret"
    write_artifact(repo_root, "org.secret", "hidden", "1.0")
    locked.chmod(0)
    try:
        scanner, sink = _scanner(repo_root)
        artifacts = list(scanner.scan())
    finally:
        locked.chmod(0o755)

    assert [str(a.coordinate) for a in artifacts] == ["com.example:lib:1.0"]
    assert sink.summary.scan_errors == 1


def test_named_descriptor_wins_over_pom_xml(repo_root):
    directory = write_artifact(repo_root, "com.example", "zeta", "1.0")
    (directory / "pom.xml").write_text("<project/>")
    scanner, _ = _scanner(repo_root)

    artifacts = list(scanner.scan())

    assert len(artifacts) == 1
    assert artifacts[0].descriptor.name == "zeta-1.0.pom"


def test_stopped_scanner_yields_nothing_more(repo_root):
    write_artifact(repo_root, "com.example", "a", "1.0")
    write_artifact(repo_root, "com.example", "b", "1.0")
    scanner, _ = _scanner(repo_root)

    found = scanner.scan()
    first = next(found)
    scanner.stop()

    assert str(first.coordinate) == "com.example:a:1.0"
    assert list(found) == []
