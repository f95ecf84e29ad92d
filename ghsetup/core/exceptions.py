"""
Centralized exception hierarchy for ghsetup.

Every failure the setup pipeline can hit is one of these. None of them are
recovered from inside the pipeline; the CLI reports the message and exits.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class GhSetupError(Exception):
    """Base exception for all ghsetup errors."""

    pass


# ============================================================================
# Version Exceptions
# ============================================================================


class VersionError(GhSetupError):
    """Base exception for version parsing errors."""

    pass


class InvalidVersionError(VersionError):
    """Raised when a string cannot be normalized to a semantic version."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Invalid version: {version}")


class NotAnExactVersionError(VersionError):
    """Raised when an exact version is requested from 'stable' or 'latest'."""

    def __init__(self, requested: str):
        self.requested = requested
        super().__init__(f"Cannot get tag name for {requested}")


# ============================================================================
# Platform Exceptions
# ============================================================================


class PlatformError(GhSetupError):
    """Base exception for host environments outside the supported matrix."""

    pass


class UnsupportedPlatformError(PlatformError):
    """Raised when the host operating system has no gh build."""

    def __init__(self, system: str):
        self.system = system
        super().__init__(f"Unsupported platform: {system}")


class UnsupportedExtensionError(PlatformError):
    """Raised when an archive extension has no extractor."""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Unsupported extension: {extension}")


# ============================================================================
# Release Exceptions
# ============================================================================


class ReleaseError(GhSetupError):
    """Base exception for release resolution errors."""

    pass


class RegistryError(ReleaseError):
    """Raised when the release registry cannot be queried."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class NoMatchingReleaseError(ReleaseError):
    """Raised when no release satisfies the requested version."""

    pass


class AssetNotFoundError(ReleaseError):
    """Raised when a release has no asset with the expected name."""

    def __init__(self, asset_name: str):
        self.asset_name = asset_name
        super().__init__(f"Could not find a release asset for '{asset_name}'")


# ============================================================================
# Installation Exceptions
# ============================================================================


class InstallError(GhSetupError):
    """Base exception for installation errors."""

    pass


class DownloadError(InstallError):
    """Raised when an asset cannot be downloaded."""

    pass


class ExtractionError(InstallError):
    """Raised when a downloaded archive cannot be extracted."""

    pass


class InsecureArchiveError(ExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class NoExecutableFoundError(InstallError):
    """Raised when the extracted archive has no recognizable bin directory."""

    def __init__(self, extract_dir, asset_name: str):
        self.extract_dir = extract_dir
        self.asset_name = asset_name
        super().__init__(
            f"Could not find a bin directory for '{asset_name}' in {extract_dir}"
        )


class VerificationError(InstallError):
    """Raised when the installed executable does not report the expected version."""

    pass


# ============================================================================
# Cache Exceptions
# ============================================================================


class ToolCacheError(GhSetupError):
    """Base exception for tool cache errors."""

    pass


class CacheLockTimeout(ToolCacheError):
    """Raised when the cache entry lock cannot be acquired within timeout."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(GhSetupError):
    """Raised for missing or malformed configuration."""

    pass
