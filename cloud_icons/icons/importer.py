"""Directory importer.

Scans a tree of SVG files and builds an IconSet keyed by sanitized names.
Files in subdirectories get the subdirectory path folded into their key, so
`Compute/EC2 Instance.svg` becomes `compute-ec2-instance`.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Union

from loguru import logger

from cloud_icons.icons.iconset import IconSet
from cloud_icons.icons.svg import SVG

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")

IGNORED_DIRS = {"__MACOSX"}


def sanitize_keyword(value: str) -> str:
    """Turn a filename (or relative path) into an icon key.

    Strips a trailing `.svg`, lowercases, replaces every run of characters
    outside [a-z0-9] with a single `-` and trims leading/trailing dashes.

    >>> sanitize_keyword("EC2 Instance.svg")
    'ec2-instance'
    """
    name = value.strip()
    if name.lower().endswith(".svg"):
        name = name[: -len(".svg")]
    return _NON_ALNUM_RE.sub("-", name.lower()).strip("-")


def _is_ignored(relative_path: Path) -> bool:
    for part in relative_path.parts:
        if part in IGNORED_DIRS or part.startswith("."):
            return True
    return False


def _discover_svg_files(root: Path, include_subdirs: bool) -> List[Path]:
    pattern = root.rglob("*") if include_subdirs else root.glob("*")
    files = [
        p for p in pattern
        if p.is_file() and p.suffix.lower() == ".svg" and not _is_ignored(p.relative_to(root))
    ]
    return sorted(files, key=lambda p: p.relative_to(root).as_posix())


def import_directory(
    path: Union[str, Path],
    *,
    prefix: str,
    include_subdirs: bool = True,
) -> IconSet:
    """Import every SVG under `path` into a new IconSet.

    Unreadable or unparseable files are logged and skipped. When two files
    map to the same key, the first one in sorted path order wins.

    Raises:
        NotADirectoryError: When `path` is not a directory.
    """
    root = Path(path)
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    icon_set = IconSet(prefix)
    skipped = 0

    for file_path in _discover_svg_files(root, include_subdirs):
        rel = file_path.relative_to(root)
        keyword = sanitize_keyword(rel.as_posix())
        if not keyword:
            logger.debug(f"Skipping {rel}: empty icon name")
            skipped += 1
            continue

        if icon_set.exists(keyword):
            logger.warning(f"Duplicate icon name '{keyword}' from {rel}, keeping the first one")
            skipped += 1
            continue

        try:
            content = file_path.read_text(encoding="utf-8", errors="replace")
            svg = SVG(content)
        except (OSError, ValueError) as e:
            logger.warning(f"Skipping {rel}: {e}")
            skipped += 1
            continue

        icon_set.from_svg(keyword, svg)

    logger.info(f"Imported {icon_set.count()} icons from {root} ({skipped} skipped)")
    return icon_set
