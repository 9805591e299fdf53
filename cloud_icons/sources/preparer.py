"""Source preparation.

Guarantees `source/<provider>/` exists and is populated before import. An
empty directory triggers a download of the provider archive and extraction
into that directory; a populated one is left untouched, so re-runs never hit
the network.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from loguru import logger

from cloud_icons.config import ARCHIVE
from cloud_icons.providers import ProviderConfig
from cloud_icons.sources.fetcher import ArchiveFetcher
from cloud_icons.utils.zip_safety import extract_zip_file_safely


def is_directory_empty(path: Path) -> bool:
    """Return True when `path` is missing or has no entries."""
    if not path.is_dir():
        return True
    return next(path.iterdir(), None) is None


def _unique_destination(root: Path, name: str) -> Path:
    candidate = root / name
    if not candidate.exists():
        return candidate
    stem, suffix = Path(name).stem, Path(name).suffix
    n = 2
    while True:
        candidate = root / f"{stem}-{n}{suffix}"
        if not candidate.exists():
            return candidate
        n += 1


def flatten_svg_tree(root: Path) -> int:
    """Move nested SVG files into `root` and drop emptied directories.

    Name collisions get a numeric suffix (`icon.svg`, `icon-2.svg`, ...).

    Returns:
        Number of files moved.
    """
    nested = sorted(
        p for p in root.rglob("*")
        if p.is_file() and p.suffix.lower() == ".svg" and p.parent != root
    )

    moved = 0
    for src in nested:
        dest = _unique_destination(root, src.name)
        shutil.move(str(src), str(dest))
        moved += 1

    # Deepest first so parents are empty by the time they are visited
    for directory in sorted((p for p in root.rglob("*") if p.is_dir()), key=lambda p: len(p.parts), reverse=True):
        if is_directory_empty(directory):
            directory.rmdir()

    logger.debug(f"Flattened {moved} SVG files into {root}")
    return moved


async def prepare_source(
    provider: ProviderConfig,
    source_root: Path,
    fetcher: ArchiveFetcher,
    *,
    max_files: int = ARCHIVE.MAX_ZIP_FILES,
    max_total_uncompressed_bytes: int = ARCHIVE.MAX_ZIP_TOTAL_MB * 1024 * 1024,
) -> Path:
    """Ensure the provider's source directory exists and is populated.

    Download and extraction errors propagate; nothing is retried. A truncated
    extraction leaves the directory empty so the next run fetches again.

    Returns:
        The provider source directory.

    Raises:
        ValueError: When the archive hits the extraction limits.
    """
    provider_dir = source_root / provider.name
    provider_dir.mkdir(parents=True, exist_ok=True)

    if not is_directory_empty(provider_dir):
        logger.debug(f"Using existing {provider.name} sources in {provider_dir}")
        return provider_dir

    logger.info(f"Fetching official {provider.name} icons...")
    zip_path = source_root / f"{provider.name}.zip"
    await fetcher.download(provider.source_url, zip_path)

    logger.info(f"Extracting {provider.name} icons...")
    result = await asyncio.to_thread(
        extract_zip_file_safely,
        zip_path=zip_path,
        dest_dir=provider_dir,
        max_files=max_files,
        max_total_uncompressed_bytes=max_total_uncompressed_bytes,
    )
    logger.info(
        f"Extracted {len(result.extracted_paths)} files for {provider.name} "
        f"({result.skipped_entries} entries skipped)"
    )

    if result.truncated:
        # A partial tree would count as populated and never be fetched again
        shutil.rmtree(provider_dir)
        provider_dir.mkdir(parents=True, exist_ok=True)
        raise ValueError(f"Archive extraction truncated for {provider.name}: archive exceeds extraction limits")

    if provider.flatten:
        flatten_svg_tree(provider_dir)

    return provider_dir
