"""Build pipeline: per-icon cleanup, alias resolution, export and orchestration."""

from .aliases import AliasResolution, find_alias_target, resolve_aliases
from .context import BuildContext, ProviderBuildResult
from .export import export_icon_set
from .runner import build_all, build_provider, clean_icon, clean_icon_set

__all__ = [
    "AliasResolution",
    "find_alias_target",
    "resolve_aliases",
    "BuildContext",
    "ProviderBuildResult",
    "export_icon_set",
    "build_all",
    "build_provider",
    "clean_icon",
    "clean_icon_set",
]
