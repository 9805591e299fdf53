"""Command line entry point for the icon build.

Exit code behavior:
- 0 when every selected provider was built or skipped
- 2 for configuration errors (missing or invalid naming conventions)
- Any other failure propagates and exits non-zero
"""

from __future__ import annotations

import argparse
import asyncio
from typing import List, Optional

from loguru import logger

from cloud_icons.providers import PROVIDERS, load_build_config
from cloud_icons.pipeline.runner import build_all


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build JSON icon sets from cloud provider icon archives")
    parser.add_argument(
        "--config",
        default=None,
        help="Naming conventions JSON. Default: the packaged naming_conventions.json",
    )
    parser.add_argument("--source-dir", default=None, help="Root for extracted sources. Default: ./source")
    parser.add_argument("--dist-dir", default=None, help="Output directory. Default: ./dist")
    parser.add_argument(
        "--provider",
        action="append",
        choices=PROVIDERS,
        default=None,
        help="Build only this provider (repeatable). Default: all",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Write build_summary.json into the output directory",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_build_config(args.config, source_root=args.source_dir, dist_root=args.dist_dir)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    context = asyncio.run(build_all(config, providers=args.provider))

    if args.summary:
        summary_path = config.dist_root / "build_summary.json"
        context.write_json(summary_path)
        logger.info(f"Summary: {summary_path}")

    for name, result in context.results.items():
        if result.skipped:
            logger.info(f"{name}: skipped")
        else:
            logger.info(f"{name}: {result.icon_count} icons, {result.alias_count} aliases")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
