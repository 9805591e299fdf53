"""Provider source acquisition: archive download, extraction and preparation."""

from .fetcher import ArchiveFetcher, DownloadResult
from .preparer import flatten_svg_tree, is_directory_empty, prepare_source

__all__ = [
    "ArchiveFetcher",
    "DownloadResult",
    "flatten_svg_tree",
    "is_directory_empty",
    "prepare_source",
]
