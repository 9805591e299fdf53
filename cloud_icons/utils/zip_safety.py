"""ZIP safety utilities.

This module extracts provider icon archives into the source tree.

Threat model:
- Zip-slip path traversal ("../" paths, absolute paths, backslashes)
- Zip bombs (many files, huge uncompressed totals)
- Symlinks (writing outside destination via link entries)
- Encrypted entries (cannot be inspected safely)

The archive's internal directory structure is preserved verbatim under the
destination, and existing files are overwritten.
"""

from __future__ import annotations

import io
import shutil
import stat
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import List, Optional

from loguru import logger


@dataclass(frozen=True)
class ZipExtractionResult:
    extracted_paths: List[Path]
    skipped_entries: int
    truncated: bool


def _is_symlink(info: zipfile.ZipInfo) -> bool:
    # On Unix-like systems, external_attr stores the POSIX mode in the top 16 bits.
    # ZIPs created on Windows may not carry POSIX mode bits reliably.
    mode = (int(info.external_attr) >> 16) & 0o170000
    return mode == stat.S_IFLNK


def _is_encrypted(info: zipfile.ZipInfo) -> bool:
    # General purpose bit 0 indicates encryption.
    return bool(int(info.flag_bits) & 0x1)


def _safe_member_relpath(name: str) -> Optional[PurePosixPath]:
    # Normalize separators to avoid Windows-style traversal.
    normalized = (name or "").replace("\\", "/")
    if not normalized:
        return None

    p = PurePosixPath(normalized)

    if p.is_absolute():
        return None

    parts = p.parts
    if any(part == ".." for part in parts):
        return None

    if parts and parts[0] == ".":
        return None

    return p


def _check_limits(max_files: int, max_total_uncompressed_bytes: int) -> None:
    if max_files <= 0:
        raise ValueError("max_files must be > 0")
    if max_total_uncompressed_bytes <= 0:
        raise ValueError("max_total_uncompressed_bytes must be > 0")


def _extract_members(
    zf: zipfile.ZipFile,
    *,
    dest_dir: Path,
    max_files: int,
    max_total_uncompressed_bytes: int,
    max_filename_length: int,
) -> ZipExtractionResult:
    dest_dir = dest_dir.resolve()
    dest_dir.mkdir(parents=True, exist_ok=True)

    extracted: List[Path] = []
    skipped = 0
    truncated = False
    total_uncompressed = 0

    for info in zf.infolist():
        if info.is_dir():
            skipped += 1
            continue

        if _is_encrypted(info) or _is_symlink(info):
            skipped += 1
            continue

        rel = _safe_member_relpath(info.filename)
        if rel is None:
            skipped += 1
            continue

        if any(len(part) > max_filename_length for part in rel.parts):
            skipped += 1
            continue

        size = int(info.file_size)
        if size < 0:
            skipped += 1
            continue

        if len(extracted) >= max_files:
            truncated = True
            break

        if total_uncompressed + size > max_total_uncompressed_bytes:
            truncated = True
            break

        out_path = (dest_dir / Path(*rel.parts)).resolve()
        if not out_path.is_relative_to(dest_dir):
            skipped += 1
            continue

        out_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with zf.open(info) as src, open(out_path, "wb") as dst:
                shutil.copyfileobj(src, dst, length=1024 * 1024)
        except OSError as e:
            logger.warning(f"Failed to extract {info.filename}: {e}")
            skipped += 1
            continue

        extracted.append(out_path)
        total_uncompressed += size

    if truncated:
        logger.warning(
            f"Extraction into {dest_dir} truncated after {len(extracted)} files "
            f"({total_uncompressed} bytes)"
        )

    return ZipExtractionResult(extracted_paths=extracted, skipped_entries=skipped, truncated=truncated)


def extract_zip_file_safely(
    *,
    zip_path: Path,
    dest_dir: Path,
    max_files: int,
    max_total_uncompressed_bytes: int,
    max_filename_length: int = 255,
) -> ZipExtractionResult:
    """Safely extract a ZIP archive stored on disk.

    Args:
        zip_path: Path to the archive.
        dest_dir: Directory into which files will be extracted. Existing files
            with the same relative path are overwritten.
        max_files: Hard cap on number of extracted files.
        max_total_uncompressed_bytes: Hard cap on sum of extracted file sizes.
        max_filename_length: Cap on individual path component lengths.

    Returns:
        ZipExtractionResult

    Raises:
        zipfile.BadZipFile: When the file is not a valid ZIP.
        FileNotFoundError: When zip_path does not exist.
        ValueError: When limits are invalid.
    """
    _check_limits(max_files, max_total_uncompressed_bytes)

    with zipfile.ZipFile(zip_path) as zf:
        return _extract_members(
            zf,
            dest_dir=dest_dir,
            max_files=max_files,
            max_total_uncompressed_bytes=max_total_uncompressed_bytes,
            max_filename_length=max_filename_length,
        )


def extract_zip_bytes_safely(
    *,
    content: bytes,
    dest_dir: Path,
    max_files: int,
    max_total_uncompressed_bytes: int,
    max_filename_length: int = 255,
) -> ZipExtractionResult:
    """Safely extract a ZIP archive provided as bytes.

    Same behavior as `extract_zip_file_safely`.

    Raises:
        zipfile.BadZipFile: When content is not a valid ZIP.
        ValueError: When limits are invalid.
    """
    _check_limits(max_files, max_total_uncompressed_bytes)

    with zipfile.ZipFile(io.BytesIO(content)) as zf:
        return _extract_members(
            zf,
            dest_dir=dest_dir,
            max_files=max_files,
            max_total_uncompressed_bytes=max_total_uncompressed_bytes,
            max_filename_length=max_filename_length,
        )
