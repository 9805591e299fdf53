#!/usr/bin/env python3
"""Build the AWS, Azure and GCP icon sets.

Usage:
  python scripts/build_icons.py [--provider aws] [--summary]

It writes:
- dist/<provider>-icons.json
- dist/build_summary.json (with --summary)

Sources are downloaded into source/<provider>/ only when that directory is
empty.
"""

from __future__ import annotations

import sys
from pathlib import Path


ROOT_DIR = Path(__file__).resolve().parents[1]
root_str = str(ROOT_DIR)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from cloud_icons.cli import main  # noqa: E402


if __name__ == "__main__":
    raise SystemExit(main())
