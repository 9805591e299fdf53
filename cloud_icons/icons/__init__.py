"""Icon set model, directory import and SVG cleanup."""

from .cleanup import cleanup_svg, optimize_svg
from .colors import ColorParseResult, keep_color, parse_colors
from .iconset import IconEntry, IconSet
from .importer import import_directory, sanitize_keyword
from .svg import SVG, ViewBox

__all__ = [
    "SVG",
    "ViewBox",
    "IconEntry",
    "IconSet",
    "import_directory",
    "sanitize_keyword",
    "cleanup_svg",
    "optimize_svg",
    "parse_colors",
    "keep_color",
    "ColorParseResult",
]
