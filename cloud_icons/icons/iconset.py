"""In-memory icon set.

Icons are keyed by sanitized names and store the SVG body (root children)
plus the viewBox. Aliases point at icons (or other aliases) by name. The
export format is the Iconify icon set JSON structure:

    {
      "prefix": "aws",
      "icons": {"ec2-instance": {"body": "<path .../>", "width": 64, "height": 64}},
      "aliases": {"compute": {"parent": "ec2-instance"}},
      "width": 64,
      "height": 64,
      "lastModified": 1700000000
    }
"""

from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Literal, Optional, Tuple

from cloud_icons.icons.svg import SVG

EntryType = Literal["icon", "alias"]

DEFAULT_SIZE = 16


@dataclass
class IconEntry:
    body: str
    left: float = 0
    top: float = 0
    width: float = DEFAULT_SIZE
    height: float = DEFAULT_SIZE


def _number(value: float) -> Any:
    return int(value) if float(value).is_integer() else value


class IconSet:
    """Named icons with aliases, exportable to a single JSON document."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.icons: Dict[str, IconEntry] = {}
        self.aliases: Dict[str, str] = {}
        self.last_modified: Optional[int] = None

    def entries(self) -> Iterator[Tuple[str, EntryType]]:
        """Yield (name, type) for icons, then aliases, each in sorted order."""
        for name in sorted(self.icons):
            yield name, "icon"
        for name in sorted(self.aliases):
            yield name, "alias"

    def list(self) -> List[str]:
        """Icon names in sorted order."""
        return sorted(self.icons)

    def exists(self, name: str) -> bool:
        return name in self.icons or name in self.aliases

    def resolve(self, name: str) -> Optional[str]:
        """Follow aliases to the icon name, or None for unknown names."""
        seen = set()
        while name in self.aliases:
            if name in seen:
                return None
            seen.add(name)
            name = self.aliases[name]
        return name if name in self.icons else None

    def set_icon(self, name: str, entry: IconEntry) -> None:
        self.icons[name] = entry
        self.aliases.pop(name, None)
        self._touch()

    def to_svg(self, name: str) -> Optional[SVG]:
        """Build a fresh SVG handle for an icon or alias."""
        target = self.resolve(name)
        if target is None:
            return None
        entry = self.icons[target]
        return SVG.from_body(entry.body, left=entry.left, top=entry.top, width=entry.width, height=entry.height)

    def from_svg(self, name: str, svg: SVG) -> None:
        """Store (or replace) an icon from an SVG handle."""
        vb = svg.viewbox
        self.set_icon(name, IconEntry(body=svg.get_body(), left=vb.left, top=vb.top, width=vb.width, height=vb.height))

    def remove(self, name: str) -> int:
        """Remove an icon or alias and every alias that depended on it.

        Returns:
            Number of removed entries.
        """
        if name in self.icons:
            del self.icons[name]
        elif name in self.aliases:
            del self.aliases[name]
        else:
            return 0

        removed = 1
        dangling = [alias for alias, parent in self.aliases.items() if parent == name]
        for alias in dangling:
            removed += self.remove(alias)
        self._touch()
        return removed

    def set_alias(self, alias: str, parent: str) -> bool:
        """Point `alias` at an existing icon or alias.

        Returns False when the parent does not exist or the alias would
        shadow an icon.
        """
        if not self.exists(parent) or alias in self.icons or alias == parent:
            return False
        self.aliases[alias] = parent
        self._touch()
        return True

    def count(self) -> int:
        """Number of icons, aliases excluded."""
        return len(self.icons)

    def _touch(self) -> None:
        self.last_modified = int(time.time())

    def _default_dimensions(self) -> Tuple[float, float]:
        if not self.icons:
            return DEFAULT_SIZE, DEFAULT_SIZE
        counts = Counter((e.width, e.height) for e in self.icons.values())
        # Ties resolve to the smallest size so exports are stable
        best = max(counts.items(), key=lambda kv: (kv[1], -kv[0][0], -kv[0][1]))
        return best[0]

    def export(self) -> Dict[str, Any]:
        """Plain JSON-compatible structure of the whole set."""
        width, height = self._default_dimensions()

        icons: Dict[str, Dict[str, Any]] = {}
        for name in sorted(self.icons):
            entry = self.icons[name]
            item: Dict[str, Any] = {"body": entry.body}
            if entry.left:
                item["left"] = _number(entry.left)
            if entry.top:
                item["top"] = _number(entry.top)
            if entry.width != width:
                item["width"] = _number(entry.width)
            if entry.height != height:
                item["height"] = _number(entry.height)
            icons[name] = item

        payload: Dict[str, Any] = {
            "prefix": self.prefix,
            "icons": icons,
        }
        if self.aliases:
            payload["aliases"] = {alias: {"parent": self.aliases[alias]} for alias in sorted(self.aliases)}
        payload["width"] = _number(width)
        payload["height"] = _number(height)
        if self.last_modified is not None:
            payload["lastModified"] = self.last_modified
        return payload
