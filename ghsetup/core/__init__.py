"""
Core functionality for ghsetup.

This package contains the foundational modules that the release resolver,
the installer and the CLI depend on.
"""

from .version import (
    CleanedVersion,
    SpecifierMode,
    VersionSpecifier,
    clean_version,
    try_clean_version,
)

from .platform import (
    PlatformDescriptor,
    detect_platform,
    clear_platform_cache,
)

from .tool_cache import (
    TOOL_NAME,
    InstalledVersion,
    ToolCache,
    check_cache,
)

from .runner import Runner, WorkflowCommandHandler

from .config import SetupConfig, load_config

from .exceptions import (
    GhSetupError,
    VersionError,
    InvalidVersionError,
    NotAnExactVersionError,
    PlatformError,
    UnsupportedPlatformError,
    UnsupportedExtensionError,
    ReleaseError,
    RegistryError,
    NoMatchingReleaseError,
    AssetNotFoundError,
    InstallError,
    DownloadError,
    ExtractionError,
    InsecureArchiveError,
    NoExecutableFoundError,
    VerificationError,
    ToolCacheError,
    CacheLockTimeout,
    ConfigError,
)

__all__ = [
    "CleanedVersion",
    "SpecifierMode",
    "VersionSpecifier",
    "clean_version",
    "try_clean_version",
    "PlatformDescriptor",
    "detect_platform",
    "clear_platform_cache",
    "TOOL_NAME",
    "InstalledVersion",
    "ToolCache",
    "check_cache",
    "Runner",
    "WorkflowCommandHandler",
    "SetupConfig",
    "load_config",
    "GhSetupError",
    "VersionError",
    "InvalidVersionError",
    "NotAnExactVersionError",
    "PlatformError",
    "UnsupportedPlatformError",
    "UnsupportedExtensionError",
    "ReleaseError",
    "RegistryError",
    "NoMatchingReleaseError",
    "AssetNotFoundError",
    "InstallError",
    "DownloadError",
    "ExtractionError",
    "InsecureArchiveError",
    "NoExecutableFoundError",
    "VerificationError",
    "ToolCacheError",
    "CacheLockTimeout",
    "ConfigError",
]
