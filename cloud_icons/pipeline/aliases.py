"""Alias resolution.

Maps configured `{filename: alias}` pairs onto icon keys. The filename is
sanitized with the importer's transform; an exact key match wins, otherwise
the first key (in sorted order) that contains the sanitized name is used.
Misses are logged and skipped; an alias that would shadow an icon is
recorded as a conflict instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from loguru import logger

from cloud_icons.icons.iconset import IconSet
from cloud_icons.icons.importer import sanitize_keyword


@dataclass
class AliasResolution:
    resolved: Dict[str, str] = field(default_factory=dict)
    fuzzy: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    conflicting: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "resolved": dict(self.resolved),
            "fuzzy": list(self.fuzzy),
            "missing": list(self.missing),
            "conflicting": list(self.conflicting),
        }


def find_alias_target(icon_set: IconSet, filename: str) -> Optional[str]:
    """Icon key a configured filename refers to, or None."""
    sane_name = sanitize_keyword(filename)
    if not sane_name:
        return None
    if sane_name in icon_set.icons:
        return sane_name
    return next((name for name in icon_set.list() if sane_name in name), None)


def resolve_aliases(icon_set: IconSet, aliases: Mapping[str, str]) -> AliasResolution:
    """Assign every alias whose target can be found."""
    resolution = AliasResolution()

    for filename, alias in aliases.items():
        target = find_alias_target(icon_set, filename)
        if target is None:
            logger.info(f"Alias not found: {alias} ({filename})")
            resolution.missing.append(alias)
            continue

        if not icon_set.set_alias(alias, target):
            logger.warning(f"Alias {alias} conflicts with an existing icon, skipping")
            resolution.conflicting.append(alias)
            continue

        resolution.resolved[alias] = target
        if target == sanitize_keyword(filename):
            logger.info(f"Alias: {alias} -> {target}")
        else:
            resolution.fuzzy.append(alias)
            logger.info(f"Alias (fuzzy): {alias} -> {target}")

    return resolution
