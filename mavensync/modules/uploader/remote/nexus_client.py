"""HTTP client to push artifacts into a Maven-layout repository."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import httpx

from mavensync.settings import Settings


class NexusClient:
    """Authenticated HEAD/PUT against Nexus (or any Maven-layout HTTP repo)."""

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None) -> None:
        self.settings = settings
        self.log = logging.getLogger(self.__class__.__name__)
        auth: Optional[Tuple[str, str]] = settings.credentials
        self._auth = auth
        self._client = client or httpx.Client(
            timeout=settings.http_timeout,
            verify=settings.http_verify,
        )

    def exists(self, url: str) -> bool:
        """True when the repository answers HEAD with a 2xx status."""
        response = self._client.head(url, auth=self._auth)
        self.log.debug("HEAD %s -> %s", url, response.status_code)
        return response.is_success

    def upload(self, url: str, data: bytes) -> httpx.Response:
        """PUT raw bytes; the caller inspects the returned status."""
        response = self._client.put(url, content=data, auth=self._auth)
        self.log.debug("PUT %s (%d bytes) -> %s", url, len(data), response.status_code)
        return response

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "NexusClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
