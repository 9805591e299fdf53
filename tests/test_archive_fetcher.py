"""Tests for archive downloads."""

import hashlib
from pathlib import Path

import httpx
import pytest

from cloud_icons.sources.fetcher import ArchiveFetcher


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.unit
@pytest.mark.asyncio
async def test_download_streams_archive_to_destination(tmp_path: Path):
    payload = b"PK\x05\x06" + b"\x00" * 18

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert str(request.url) == "https://example.com/icons.zip"
        return httpx.Response(200, content=payload, headers={"content-type": "application/zip"})

    fetcher = ArchiveFetcher(client=_client(handler), max_bytes=10_000)
    dest = tmp_path / "source" / "aws.zip"

    result = await fetcher.download("https://example.com/icons.zip", dest)

    assert dest.read_bytes() == payload
    assert result.path == dest
    assert result.size_bytes == len(payload)
    assert result.sha256 == hashlib.sha256(payload).hexdigest()
    assert result.content_type == "application/zip"
    assert not dest.with_suffix(".zip.tmp").exists()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_download_replaces_existing_archive(tmp_path: Path):
    dest = tmp_path / "aws.zip"
    dest.write_bytes(b"stale")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"fresh")

    fetcher = ArchiveFetcher(client=_client(handler), max_bytes=10_000)
    await fetcher.download("https://example.com/icons.zip", dest)

    assert dest.read_bytes() == b"fresh"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_download_rejects_non_http_urls(tmp_path: Path):
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    fetcher = ArchiveFetcher(client=_client(handler))

    with pytest.raises(ValueError, match="Only http"):
        await fetcher.download("ftp://example.com/icons.zip", tmp_path / "aws.zip")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_download_enforces_max_size_and_cleans_up(tmp_path: Path):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"x" * 2048)

    fetcher = ArchiveFetcher(client=_client(handler), max_bytes=1024)
    dest = tmp_path / "aws.zip"

    with pytest.raises(ValueError, match="exceeds max size"):
        await fetcher.download("https://example.com/icons.zip", dest)

    assert not dest.exists()
    assert list(tmp_path.iterdir()) == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_download_propagates_http_errors(tmp_path: Path):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, content=b"not found")

    fetcher = ArchiveFetcher(client=_client(handler))
    dest = tmp_path / "aws.zip"

    with pytest.raises(httpx.HTTPStatusError):
        await fetcher.download("https://example.com/missing.zip", dest)

    assert not dest.exists()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_close_leaves_injected_client_open():
    client = _client(lambda request: httpx.Response(200))

    async with ArchiveFetcher(client=client):
        pass

    assert client.is_closed is False
    await client.aclose()
