import threading
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import httpx
import pytest

from mavensync.settings import Settings, get_settings

RELEASE_URL = "https://repo.example.com/repository/releases"
SNAPSHOT_URL = "https://repo.example.com/repository/snapshots"

_ENV_KEYS = (
    "NEXUS_URL",
    "NEXUS_SNAPSHOT_URL",
    "NEXUS_USERNAME",
    "NEXUS_PASSWORD",
    "NEXUS_DIR",
    "NEXUS_FORCE",
    "NEXUS_EXCLUDE",
    "NEXUS_MAX_SIZE",
    "NEXUS_DB_PATH",
    "STORE_BACKEND",
    "RESOLVE_STRATEGY",
    "UPLOAD_WORKERS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeRepository:
    """Maven-layout HTTP repository answering HEAD/PUT from memory."""

    def __init__(self, delay: float = 0.0) -> None:
        self.objects: Dict[str, bytes] = {}
        self.calls: List[Tuple[str, str]] = []
        self.put_status: Dict[str, int] = {}
        self.broken: Set[str] = set()
        self.auth_headers: Set[Optional[str]] = set()
        self.delay = delay
        self.in_flight: Set[str] = set()
        self.overlaps: List[str] = []
        self._lock = threading.Lock()

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        with self._lock:
            self.calls.append((request.method, url))
            self.auth_headers.add(request.headers.get("authorization"))
            if url in self.in_flight:
                self.overlaps.append(url)
            self.in_flight.add(url)
        try:
            if url in self.broken:
                raise httpx.ConnectError("connection refused", request=request)
            if self.delay:
                threading.Event().wait(self.delay)
            if request.method == "HEAD":
                return httpx.Response(200 if url in self.objects else 404)
            if request.method == "PUT":
                status = self.put_status.get(url, 201)
                if 200 <= status < 300:
                    with self._lock:
                        self.objects[url] = request.content
                    return httpx.Response(status)
                return httpx.Response(status, text="write denied")
            return httpx.Response(405)
        finally:
            with self._lock:
                self.in_flight.discard(url)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def urls(self, method: str) -> List[str]:
        return [url for m, url in self.calls if m == method]


@pytest.fixture
def fake_repo():
    return FakeRepository()


@pytest.fixture
def repo_root(tmp_path):
    root = tmp_path / "m2"
    root.mkdir()
    return root


@pytest.fixture
def make_settings(tmp_path, repo_root):
    def _build(**overrides) -> Settings:
        defaults = {
            "nexus_url": RELEASE_URL,
            "nexus_username": "deployer",
            "nexus_password": "secret",
            "nexus_dir": str(repo_root),
            "nexus_db_path": str(tmp_path / "state" / "uploader_state.db"),
            "upload_workers": 2,
        }
        defaults.update(overrides)
        return Settings(_env_file=None, **defaults)

    return _build


def write_artifact(
    root: Path,
    group: str,
    artifact: str,
    version: str,
    files: Optional[Dict[str, bytes]] = None,
) -> Path:
    """Create ``root/<group path>/<artifact>/<version>/<artifact>-<version>.<suffix>`` files."""
    directory = root.joinpath(*group.split("."), artifact, version)
    directory.mkdir(parents=True, exist_ok=True)
    if files is None:
        files = {"pom": b"<project/>", "jar": b"PK\x03\x04"}
    for suffix, content in files.items():
        (directory / f"{artifact}-{version}.{suffix}").write_bytes(content)
    return directory
