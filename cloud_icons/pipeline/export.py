"""Icon set export."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from cloud_icons.icons.iconset import IconSet
from cloud_icons.utils.schema_validation import validate_icon_set_export


def output_path(dist_root: Path, provider: str) -> Path:
    return dist_root / f"{provider}-icons.json"


def write_json_atomic(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(
        json.dumps(payload, ensure_ascii=False, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    tmp_path.replace(path)


def export_icon_set(icon_set: IconSet, dist_root: Path, provider: str) -> Path:
    """Write `<provider>-icons.json`, overwriting any previous export.

    Raises:
        ValueError: When the exported structure fails schema validation.
    """
    payload = icon_set.export()
    validate_icon_set_export(payload)

    dest = output_path(dist_root, provider)
    write_json_atomic(dest, payload)
    return dest
