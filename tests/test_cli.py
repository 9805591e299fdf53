"""Tests for the command line entry point."""

import json
from pathlib import Path

import pytest

from cloud_icons.cli import build_parser, main

SVG = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 32 32"><path d="M0 0h32v32H0z"/></svg>'


def _write_config(tmp_path: Path) -> Path:
    path = tmp_path / "naming.json"
    path.write_text(
        json.dumps(
            {
                "aws": {"sourceUrl": "https://example.com/aws.zip", "aliases": {"S3.svg": "storage"}},
                "gcp": {"sourceUrl": "https://example.com/gcp.zip"},
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.mark.unit
def test_parser_rejects_unknown_provider():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--provider", "oracle"])


@pytest.mark.unit
def test_main_returns_2_for_missing_config(tmp_path: Path):
    assert main(["--config", str(tmp_path / "missing.json")]) == 2


@pytest.mark.unit
def test_main_returns_2_for_invalid_config(tmp_path: Path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"aws": {}}), encoding="utf-8")

    assert main(["--config", str(path)]) == 2


@pytest.mark.integration
def test_main_builds_selected_provider_from_local_sources(tmp_path: Path):
    source = tmp_path / "source"
    dist = tmp_path / "dist"
    (source / "aws").mkdir(parents=True)
    (source / "aws" / "S3.svg").write_text(SVG, encoding="utf-8")

    code = main(
        [
            "--config",
            str(_write_config(tmp_path)),
            "--source-dir",
            str(source),
            "--dist-dir",
            str(dist),
            "--provider",
            "aws",
            "--summary",
        ]
    )

    assert code == 0
    data = json.loads((dist / "aws-icons.json").read_text(encoding="utf-8"))
    assert data["aliases"] == {"storage": {"parent": "s3"}}
    assert not (dist / "gcp-icons.json").exists()

    summary = json.loads((dist / "build_summary.json").read_text(encoding="utf-8"))
    assert list(summary["results"]) == ["aws"]
    assert summary["results"]["aws"]["icon_count"] == 1
