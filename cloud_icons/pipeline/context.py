"""Build run context.

A small, serializable record of one build run: checkpoints plus one result
per provider. The exported icon sets remain the source of truth; this only
summarizes what happened.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ProviderBuildResult:
    provider: str
    skipped: bool = False
    output_path: Optional[str] = None
    icon_count: int = 0
    alias_count: int = 0
    failed_icons: List[str] = field(default_factory=list)
    resolved_aliases: Dict[str, str] = field(default_factory=dict)
    missing_aliases: List[str] = field(default_factory=list)
    conflicting_aliases: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "skipped": self.skipped,
            "output_path": self.output_path,
            "icon_count": self.icon_count,
            "alias_count": self.alias_count,
            "failed_icons": list(self.failed_icons),
            "resolved_aliases": dict(self.resolved_aliases),
            "missing_aliases": list(self.missing_aliases),
            "conflicting_aliases": list(self.conflicting_aliases),
        }


@dataclass
class BuildContext:
    """Serializable state collected across provider builds."""

    dist_root: Path
    run_id: str = field(default_factory=lambda: uuid4().hex)
    created_at: str = field(default_factory=_utc_now_iso)

    checkpoints: Dict[str, str] = field(default_factory=dict)
    results: Dict[str, ProviderBuildResult] = field(default_factory=dict)

    def mark_checkpoint(self, name: str) -> None:
        if not name.strip():
            return
        self.checkpoints[name] = _utc_now_iso()

    def record_result(self, result: ProviderBuildResult) -> None:
        self.results[result.provider] = result

    @property
    def built_providers(self) -> List[str]:
        return [name for name, result in self.results.items() if not result.skipped]

    @property
    def skipped_providers(self) -> List[str]:
        return [name for name, result in self.results.items() if result.skipped]

    def to_payload(self) -> Dict[str, Any]:
        return {
            "schema_version": "1.0",
            "run_id": self.run_id,
            "created_at": self.created_at,
            "dist_root": str(self.dist_root),
            "checkpoints": dict(self.checkpoints),
            "results": {name: result.to_dict() for name, result in self.results.items()},
        }

    def write_json(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(self.to_payload(), indent=2, sort_keys=True) + "\n",
            encoding="utf-8",
        )
