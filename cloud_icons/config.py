"""
Centralized Configuration
=========================
Centralized configuration values and constants for the cloud icons build.

This module provides:
- Path defaults for the source and output trees
- Timeout configuration for archive downloads
- Archive size limits
- Tracing settings

Provider-specific settings (source URLs, aliases) live in the naming
conventions document and are loaded by `cloud_icons.providers`.
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class PathsConfig:
    """Default locations, relative to the working directory."""

    # Raw extracted SVG trees, one directory per provider
    SOURCE_DIR: str = os.getenv("CLOUD_ICONS_SOURCE_DIR", "source")

    # Exported <provider>-icons.json artifacts
    DIST_DIR: str = os.getenv("CLOUD_ICONS_DIST_DIR", "dist")


@dataclass(frozen=True)
class TimeoutConfig:
    """Centralized timeout configuration in seconds."""

    # Provider archives are large (the AWS package is well over 100MB)
    DOWNLOAD: int = int(os.getenv("CLOUD_ICONS_DOWNLOAD_TIMEOUT", "300"))
    CONNECT: int = 30


@dataclass(frozen=True)
class ArchiveConfig:
    """Download and extraction limits."""

    MAX_DOWNLOAD_BYTES: int = int(os.getenv("CLOUD_ICONS_MAX_DOWNLOAD_BYTES", str(500 * 1024 * 1024)))
    MAX_ZIP_FILES: int = int(os.getenv("CLOUD_ICONS_MAX_ZIP_FILES", "50000"))
    MAX_ZIP_TOTAL_MB: int = int(os.getenv("CLOUD_ICONS_MAX_ZIP_TOTAL_MB", "2048"))


@dataclass(frozen=True)
class TracingConfig:
    """Tracing configuration."""

    SERVICE_NAME: str = "cloud-icons-build"
    OTLP_ENDPOINT: str = os.getenv("OTLP_ENDPOINT", "http://localhost:4318/v1/traces")
    ENABLED: bool = os.getenv("ENABLE_TRACING", "false").lower() == "true"


# Global singleton instances
PATHS = PathsConfig()
TIMEOUTS = TimeoutConfig()
ARCHIVE = ArchiveConfig()
TRACING = TracingConfig()
