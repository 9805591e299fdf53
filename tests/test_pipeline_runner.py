"""Integration tests for the build pipeline against local fixtures."""

import io
import json
import zipfile
from pathlib import Path
from typing import Dict, List

import httpx
import pytest

from cloud_icons.icons.iconset import IconEntry, IconSet
from cloud_icons.pipeline import runner
from cloud_icons.pipeline.runner import build_all, build_provider, clean_icon_set
from cloud_icons.providers import BuildConfig, ProviderConfig
from cloud_icons.sources.fetcher import ArchiveFetcher

NS = 'xmlns="http://www.w3.org/2000/svg"'

GOOD_SVG = f'<svg {NS} viewBox="0 0 64 64"><title>EC2</title><path d="M0 0h64v64H0z" fill="#FF9900"/></svg>'
NO_SHAPES_SVG = f'<svg {NS} viewBox="0 0 64 64"><metadata/></svg>'


def _make_zip_bytes(entries: Dict[str, str]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buf.getvalue()


def _fetcher(archives: Dict[str, bytes], requests: List[str]) -> ArchiveFetcher:
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        requests.append(url)
        if url not in archives:
            return httpx.Response(404)
        return httpx.Response(200, content=archives[url])

    return ArchiveFetcher(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def _config(tmp_path: Path, **providers: ProviderConfig) -> BuildConfig:
    return BuildConfig(source_root=tmp_path / "source", dist_root=tmp_path / "dist", providers=providers)


def _write_source(config: BuildConfig, provider: str, files: Dict[str, str]) -> None:
    for rel, content in files.items():
        path = config.source_dir(provider) / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_build_provider_exports_cleaned_icons_with_aliases(tmp_path: Path):
    config = _config(
        tmp_path,
        aws=ProviderConfig(
            name="aws",
            source_url="https://example.com/aws.zip",
            aliases={"EC2 Instance.svg": "compute", "Lambda.svg": "serverless"},
        ),
    )
    _write_source(config, "aws", {"Compute/EC2 Instance.svg": GOOD_SVG, "S3.svg": GOOD_SVG})
    config.dist_root.mkdir(parents=True)

    result = await build_provider("aws", config, _fetcher({}, []))

    data = json.loads((config.dist_root / "aws-icons.json").read_text(encoding="utf-8"))
    assert data["prefix"] == "aws"
    assert sorted(data["icons"]) == ["compute-ec2-instance", "s3"]
    assert data["icons"]["s3"]["body"] == '<path d="M0 0h64v64H0z" fill="#FF9900" />'
    assert data["aliases"] == {"compute": {"parent": "compute-ec2-instance"}}
    assert data["width"] == 64

    assert result.skipped is False
    assert result.icon_count == 2
    assert result.alias_count == 1
    assert result.missing_aliases == ["serverless"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_failing_icon_is_dropped_and_build_continues(tmp_path: Path):
    config = _config(tmp_path, gcp=ProviderConfig(name="gcp", source_url="https://example.com/gcp.zip"))
    _write_source(config, "gcp", {"good.svg": GOOD_SVG, "bad.svg": NO_SHAPES_SVG})

    result = await build_provider("gcp", config, _fetcher({}, []))

    data = json.loads((config.dist_root / "gcp-icons.json").read_text(encoding="utf-8"))
    assert list(data["icons"]) == ["good"]
    assert result.failed_icons == ["bad"]
    assert result.icon_count == 1


@pytest.mark.integration
@pytest.mark.asyncio
async def test_empty_archive_skips_provider_without_output(tmp_path: Path):
    requests: List[str] = []
    config = _config(tmp_path, azure=ProviderConfig(name="azure", source_url="https://example.com/azure.zip"))
    fetcher = _fetcher({"https://example.com/azure.zip": _make_zip_bytes({})}, requests)

    result = await build_provider("azure", config, fetcher)

    assert result.skipped is True
    assert requests == ["https://example.com/azure.zip"]
    assert not (config.dist_root / "azure-icons.json").exists()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_download_failure_propagates(tmp_path: Path):
    config = _config(tmp_path, aws=ProviderConfig(name="aws", source_url="https://example.com/aws.zip"))

    with pytest.raises(httpx.HTTPStatusError):
        await build_provider("aws", config, _fetcher({}, []))


@pytest.mark.integration
@pytest.mark.asyncio
async def test_build_all_runs_providers_in_order_and_reuses_sources(tmp_path: Path):
    requests: List[str] = []
    archives = {
        "https://example.com/aws.zip": _make_zip_bytes({"Arch/EC2.svg": GOOD_SVG}),
        "https://example.com/azure.zip": _make_zip_bytes({"vm.svg": GOOD_SVG}),
        "https://example.com/gcp.zip": _make_zip_bytes({}),
    }
    config = _config(
        tmp_path,
        aws=ProviderConfig(name="aws", source_url="https://example.com/aws.zip"),
        azure=ProviderConfig(name="azure", source_url="https://example.com/azure.zip"),
        gcp=ProviderConfig(name="gcp", source_url="https://example.com/gcp.zip"),
    )
    fetcher = _fetcher(archives, requests)

    context = await build_all(config, fetcher=fetcher)

    assert list(context.results) == ["aws", "azure", "gcp"]
    assert context.built_providers == ["aws", "azure"]
    assert context.skipped_providers == ["gcp"]
    assert list(context.checkpoints) == ["start", "aws_complete", "azure_complete", "gcp_complete", "end"]
    assert requests == list(archives)
    assert (config.dist_root / "aws-icons.json").exists()
    assert (config.dist_root / "azure-icons.json").exists()

    # Populated source directories are reused without a download
    requests.clear()
    await build_all(config, fetcher=fetcher, providers=["aws", "azure"])
    assert requests == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_clean_icon_set_waits_for_every_icon(tmp_path: Path):
    icon_set = IconSet("aws")
    for name in ("a", "b", "c"):
        icon_set.set_icon(name, IconEntry(body='<title>x</title><path d="M0 0h1v1z" />', width=24, height=24))
    icon_set.set_alias("alias-a", "a")

    failed = await clean_icon_set(icon_set)

    assert failed == []
    for entry in icon_set.icons.values():
        assert "<title>" not in entry.body
        assert 'fill="currentColor"' in entry.body
    assert icon_set.aliases == {"alias-a": "a"}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_clean_icon_set_removes_failures_and_their_aliases(monkeypatch):
    def fake_clean(svg):
        if svg.root.find("circle") is not None:
            raise RuntimeError("boom")

    monkeypatch.setattr(runner, "_clean_svg", fake_clean)

    icon_set = IconSet("aws")
    icon_set.set_icon("ok", IconEntry(body='<path d="M0 0h1v1z" />'))
    icon_set.set_icon("broken", IconEntry(body='<circle r="1" />'))
    icon_set.set_alias("round", "broken")

    failed = await clean_icon_set(icon_set)

    assert failed == ["broken"]
    assert icon_set.list() == ["ok"]
    assert icon_set.aliases == {}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_root_presentation_attributes_survive_the_build(tmp_path: Path):
    config = _config(tmp_path, aws=ProviderConfig(name="aws", source_url="https://example.com/aws.zip"))
    _write_source(
        config,
        "aws",
        {"line.svg": f'<svg {NS} viewBox="0 0 24 24" fill="none" stroke="#FF9900"><path d="M2 2L22 22"/></svg>'},
    )

    await build_provider("aws", config, _fetcher({}, []))

    data = json.loads((config.dist_root / "aws-icons.json").read_text(encoding="utf-8"))
    assert data["icons"]["line"]["body"] == '<g fill="none" stroke="#FF9900"><path d="M2 2L22 22" /></g>'


@pytest.mark.integration
@pytest.mark.asyncio
async def test_alias_conflicts_are_reported_apart_from_misses(tmp_path: Path):
    config = _config(
        tmp_path,
        azure=ProviderConfig(
            name="azure",
            source_url="https://example.com/azure.zip",
            aliases={"VM.svg": "storage", "Functions.svg": "functions"},
        ),
    )
    _write_source(config, "azure", {"vm.svg": GOOD_SVG, "storage.svg": GOOD_SVG})

    result = await build_provider("azure", config, _fetcher({}, []))

    assert result.conflicting_aliases == ["storage"]
    assert result.missing_aliases == ["functions"]
    assert result.to_dict()["conflicting_aliases"] == ["storage"]
