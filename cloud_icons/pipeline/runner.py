"""Build pipeline runner.

Runs prepare -> import -> clean -> alias -> export for each provider, one
provider at a time. Per-icon cleanup within a provider runs concurrently and
is fully awaited before aliases are resolved.
"""

from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence

from loguru import logger

from cloud_icons.icons.cleanup import cleanup_svg, optimize_svg
from cloud_icons.icons.colors import keep_color, parse_colors
from cloud_icons.icons.iconset import IconSet
from cloud_icons.icons.importer import import_directory
from cloud_icons.icons.svg import SVG
from cloud_icons.pipeline.aliases import resolve_aliases
from cloud_icons.pipeline.context import BuildContext, ProviderBuildResult
from cloud_icons.pipeline.export import export_icon_set
from cloud_icons.providers import BuildConfig
from cloud_icons.sources.fetcher import ArchiveFetcher
from cloud_icons.sources.preparer import is_directory_empty, prepare_source
from cloud_icons.tracing import init_tracing, safe_set_span_attributes


def _clean_svg(svg: SVG) -> None:
    # Optimization assumes normalized markup; order matters
    cleanup_svg(svg)
    optimize_svg(svg)
    parse_colors(svg, callback=keep_color, default_color="currentColor")


async def clean_icon(icon_set: IconSet, name: str) -> bool:
    """Clean one icon in place; on any failure drop it from the set.

    Returns:
        True when the icon survived.
    """
    try:
        svg = icon_set.to_svg(name)
        if svg is None:
            raise KeyError(f"Icon not found: {name}")
        await asyncio.to_thread(_clean_svg, svg)
        icon_set.from_svg(name, svg)
        return True
    except Exception as e:
        logger.error(f"Error processing {name}: {e}")
        icon_set.remove(name)
        return False


async def clean_icon_set(icon_set: IconSet) -> List[str]:
    """Clean every icon (aliases are skipped) and wait for all of them.

    Returns:
        Names of the icons that failed and were removed.
    """
    names = [name for name, entry_type in icon_set.entries() if entry_type == "icon"]
    outcomes = await asyncio.gather(*(clean_icon(icon_set, name) for name in names))
    return [name for name, ok in zip(names, outcomes) if not ok]


async def build_provider(provider: str, config: BuildConfig, fetcher: ArchiveFetcher) -> ProviderBuildResult:
    """Build and export one provider's icon set.

    An empty source directory after preparation skips the provider without
    writing output. Download and extraction errors propagate.
    """
    logger.info(f"--- Building {provider} ---")
    provider_config = config.provider(provider)
    result = ProviderBuildResult(provider=provider)

    tracer = init_tracing()
    with tracer.start_as_current_span(f"build_provider.{provider}") as span:
        source_dir = await prepare_source(
            provider_config,
            config.source_root,
            fetcher,
            max_files=config.max_zip_files,
            max_total_uncompressed_bytes=config.max_zip_total_bytes,
        )

        if is_directory_empty(source_dir):
            logger.warning(f"Skipping {provider}: No source files.")
            result.skipped = True
            safe_set_span_attributes(span, {"provider": provider, "skipped": True})
            return result

        icon_set = await asyncio.to_thread(import_directory, source_dir, prefix=provider, include_subdirs=True)

        result.failed_icons = await clean_icon_set(icon_set)

        if provider_config.aliases:
            resolution = resolve_aliases(icon_set, provider_config.aliases)
            result.resolved_aliases = resolution.resolved
            result.missing_aliases = resolution.missing
            result.conflicting_aliases = resolution.conflicting

        dest = export_icon_set(icon_set, config.dist_root, provider)
        result.output_path = str(dest)
        result.icon_count = icon_set.count()
        result.alias_count = len(icon_set.aliases)

        safe_set_span_attributes(span, {"provider": provider, **result.to_dict()})

    logger.info(f"Generated {dest.name} with {result.icon_count} icons")
    if result.failed_icons:
        logger.warning(f"{provider}: {len(result.failed_icons)} icons failed cleanup and were dropped")
    return result


async def build_all(
    config: BuildConfig,
    *,
    fetcher: Optional[ArchiveFetcher] = None,
    providers: Optional[Sequence[str]] = None,
) -> BuildContext:
    """Build every configured provider strictly in order.

    Args:
        config: Run configuration.
        fetcher: Archive fetcher to use. When omitted one is created with the
            configured limits and closed at the end of the run.
        providers: Subset of providers to build. Build order is always the
            configured order.
    """
    config.source_root.mkdir(parents=True, exist_ok=True)
    config.dist_root.mkdir(parents=True, exist_ok=True)

    selected = [name for name in config.providers if providers is None or name in providers]
    context = BuildContext(dist_root=config.dist_root)
    context.mark_checkpoint("start")

    owned_fetcher = fetcher is None
    if fetcher is None:
        fetcher = ArchiveFetcher(
            max_bytes=config.max_download_bytes,
            timeout_seconds=config.download_timeout_seconds,
            connect_timeout_seconds=config.connect_timeout_seconds,
        )

    try:
        for name in selected:
            result = await build_provider(name, config, fetcher)
            context.record_result(result)
            context.mark_checkpoint(f"{name}_complete")
    finally:
        if owned_fetcher:
            await fetcher.close()

    context.mark_checkpoint("end")
    return context
