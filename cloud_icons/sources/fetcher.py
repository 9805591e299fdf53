"""Archive download helpers.

Streams a provider's zip archive straight to disk. Each download is a single
GET attempt; failures propagate to the caller.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import httpx
from loguru import logger

from cloud_icons.config import ARCHIVE, TIMEOUTS


def _is_http_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme.lower() in {"http", "https"} and bool(parsed.netloc)


@dataclass(frozen=True)
class DownloadResult:
    path: Path
    size_bytes: int
    sha256: str
    content_type: Optional[str]


class ArchiveFetcher:
    """Download remote archives to local files."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        max_bytes: int = ARCHIVE.MAX_DOWNLOAD_BYTES,
        timeout_seconds: int = TIMEOUTS.DOWNLOAD,
        connect_timeout_seconds: int = TIMEOUTS.CONNECT,
    ):
        self.max_bytes = max_bytes
        self.timeout_seconds = timeout_seconds
        self.connect_timeout_seconds = connect_timeout_seconds
        self._client = client
        self._owns_client = client is None

    def _client_or_default(self) -> httpx.AsyncClient:
        if self._client is None:
            timeout = httpx.Timeout(
                timeout=self.timeout_seconds,
                connect=self.connect_timeout_seconds,
            )
            self._client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ArchiveFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def download(self, url: str, dest_path: Path) -> DownloadResult:
        """Stream `url` into `dest_path`, replacing any existing file.

        Raises:
            ValueError: For non-http(s) URLs or archives over `max_bytes`.
            httpx.HTTPError: For transport failures and non-2xx responses.
        """
        if not _is_http_url(url):
            raise ValueError("Only http(s) URLs are allowed")

        logger.info(f"Downloading {url}...")

        tmp_path = dest_path.with_suffix(dest_path.suffix + ".tmp")
        tmp_path.parent.mkdir(parents=True, exist_ok=True)

        h = hashlib.sha256()
        total = 0
        content_type: Optional[str] = None

        client = self._client_or_default()
        try:
            async with client.stream("GET", url) as resp:
                resp.raise_for_status()
                content_type = resp.headers.get("content-type")
                declared_len = resp.headers.get("content-length")
                if declared_len is not None:
                    try:
                        declared_bytes = int(declared_len)
                    except (TypeError, ValueError):
                        declared_bytes = None
                    if declared_bytes is not None and declared_bytes > self.max_bytes:
                        raise ValueError("Archive exceeds max size")

                with open(tmp_path, "wb") as f:
                    async for chunk in resp.aiter_bytes(chunk_size=1024 * 256):
                        if not chunk:
                            continue
                        total += len(chunk)
                        if total > self.max_bytes:
                            raise ValueError("Archive exceeds max size")
                        h.update(chunk)
                        f.write(chunk)
                    f.flush()

            tmp_path.replace(dest_path)
        except Exception:
            try:
                if tmp_path.exists():
                    tmp_path.unlink()
            except OSError:
                logger.warning(f"Could not remove partial download {tmp_path}")
            raise

        logger.debug(f"Downloaded {total} bytes to {dest_path}")
        return DownloadResult(path=dest_path, size_bytes=total, sha256=h.hexdigest(), content_type=content_type)
