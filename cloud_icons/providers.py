"""
Provider Configuration
======================
Loads the naming conventions document and turns it into an explicit
`BuildConfig` value that is passed to every pipeline stage.

The document maps each provider name to its archive URL, an optional
filename -> alias mapping and an optional flatten flag:

    {"aws": {"sourceUrl": "https://...", "aliases": {"EC2 Instance.svg": "compute"}}}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger

from cloud_icons.config import ARCHIVE, PATHS, TIMEOUTS
from cloud_icons.utils.schema_validation import validate_naming_conventions


# Build order is fixed
PROVIDERS = ("aws", "azure", "gcp")

DEFAULT_NAMING_CONVENTIONS = Path(__file__).resolve().parent / "naming_conventions.json"


@dataclass(frozen=True)
class ProviderConfig:
    name: str
    source_url: str
    aliases: Dict[str, str] = field(default_factory=dict)
    flatten: bool = False


@dataclass(frozen=True)
class BuildConfig:
    """Immutable settings for one build run."""

    source_root: Path
    dist_root: Path
    providers: Dict[str, ProviderConfig]
    download_timeout_seconds: int = TIMEOUTS.DOWNLOAD
    connect_timeout_seconds: int = TIMEOUTS.CONNECT
    max_download_bytes: int = ARCHIVE.MAX_DOWNLOAD_BYTES
    max_zip_files: int = ARCHIVE.MAX_ZIP_FILES
    max_zip_total_bytes: int = ARCHIVE.MAX_ZIP_TOTAL_MB * 1024 * 1024

    def provider(self, name: str) -> ProviderConfig:
        try:
            return self.providers[name]
        except KeyError:
            raise ValueError(f"Unknown provider: {name}") from None

    def source_dir(self, name: str) -> Path:
        return self.source_root / name


def load_naming_conventions(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Read and validate a naming conventions document.

    Args:
        path: Document path. Defaults to the packaged naming_conventions.json.

    Raises:
        FileNotFoundError: When the document is missing.
        ValueError: When the document is not valid JSON or fails validation.
    """
    doc_path = Path(path).expanduser() if path else DEFAULT_NAMING_CONVENTIONS
    if not doc_path.exists():
        raise FileNotFoundError(f"Naming conventions not found: {doc_path}")

    try:
        document = json.loads(doc_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse naming conventions {doc_path}: {e}")

    validate_naming_conventions(document)
    logger.debug(f"Loaded naming conventions from {doc_path}")
    return document


def load_provider_table(document: Dict[str, Any]) -> Dict[str, ProviderConfig]:
    """Build the provider table in fixed build order.

    Providers missing from the document are left out.
    """
    table: Dict[str, ProviderConfig] = {}
    for name in PROVIDERS:
        entry = document.get(name)
        if not isinstance(entry, dict):
            continue
        aliases = entry.get("aliases") or {}
        table[name] = ProviderConfig(
            name=name,
            source_url=str(entry["sourceUrl"]),
            aliases={str(k): str(v) for k, v in aliases.items()},
            flatten=bool(entry.get("flatten", False)),
        )
    return table


def load_build_config(
    config_path: Optional[Union[str, Path]] = None,
    *,
    source_root: Optional[Union[str, Path]] = None,
    dist_root: Optional[Union[str, Path]] = None,
) -> BuildConfig:
    """Load everything a build run needs, once, at startup."""
    document = load_naming_conventions(config_path)
    return BuildConfig(
        source_root=Path(source_root or PATHS.SOURCE_DIR).expanduser().resolve(),
        dist_root=Path(dist_root or PATHS.DIST_DIR).expanduser().resolve(),
        providers=load_provider_table(document),
    )
