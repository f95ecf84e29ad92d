"""
Tool cache for extracted gh installations.

The cache uses the hosted-runner layout so entries written by other setup
steps on the same runner are found, and ours are found by them:

    <root>/<tool>/<version>/<arch>/          installation
    <root>/<tool>/<version>/<arch>.complete  marker, written last

An entry without its marker is an interrupted install and is ignored.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from filelock import FileLock, Timeout

from ghsetup.core.exceptions import CacheLockTimeout, InvalidVersionError
from ghsetup.core.filesystem import copy_tree, safe_rmtree
from ghsetup.core.platform import detect_platform
from ghsetup.core.version import CleanedVersion, clean_version

logger = logging.getLogger(__name__)

TOOL_NAME = "gh-cli"
COMPLETE_SUFFIX = ".complete"


@dataclass(frozen=True)
class InstalledVersion:
    """
    A usable installation.

    Attributes:
        version: Installed version
        path: Root of the cached installation; executables live in ``bin``
    """

    version: CleanedVersion
    path: Path

    @property
    def bin_dir(self) -> Path:
        return self.path / "bin"


class ToolCache:
    """
    Find and register tool installations.

    Example:
        >>> cache = ToolCache(Path("/opt/hostedtoolcache"))
        >>> cache.find("gh-cli", "2.40.0")
        PosixPath('/opt/hostedtoolcache/gh-cli/2.40.0/x64')
    """

    def __init__(
        self,
        root: Union[str, Path],
        arch: Optional[str] = None,
        lock_timeout: int = 60,
    ):
        """
        Initialize tool cache.

        Args:
            root: Cache root directory
            arch: Architecture key (default: host's)
            lock_timeout: Timeout in seconds for acquiring an entry lock
        """
        self.root = Path(root)
        self.arch = arch or detect_platform().cache_arch
        self.lock_timeout = lock_timeout

        logger.debug(f"Initialized tool cache at {self.root} ({self.arch})")

    def _entry_dir(self, tool: str, version: str, arch: str) -> Path:
        return self.root / tool / version / arch

    def _marker(self, tool: str, version: str, arch: str) -> Path:
        return self.root / tool / version / f"{arch}{COMPLETE_SUFFIX}"

    @contextmanager
    def _lock(self, tool: str, version: str, arch: str):
        """
        Exclusive lock on one cache entry.

        Raises:
            CacheLockTimeout: If lock cannot be acquired within timeout
        """
        lock_path = self.root / tool / version / f"{arch}.lock"
        lock_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with FileLock(lock_path, timeout=self.lock_timeout):
                logger.debug(f"Acquired cache lock {lock_path}")
                yield
        except Timeout as e:
            raise CacheLockTimeout(
                f"Could not acquire cache lock {lock_path} "
                f"within {self.lock_timeout} seconds"
            ) from e

    def find(
        self, tool: str, version: str, arch: Optional[str] = None
    ) -> Optional[Path]:
        """
        Look up a completed installation.

        Args:
            tool: Tool name
            version: Exact version (a leading 'v' is accepted)
            arch: Architecture key (default: the cache's)

        Returns:
            Installation directory, or None when not cached
        """
        arch = arch or self.arch
        try:
            version = clean_version(version).version_string
        except InvalidVersionError:
            logger.debug(f"Not an exact version, skipping cache lookup: {version}")
            return None

        entry = self._entry_dir(tool, version, arch)
        if entry.is_dir() and self._marker(tool, version, arch).is_file():
            logger.debug(f"Found {tool} {version} in tool cache: {entry}")
            return entry

        logger.debug(f"{tool} {version} ({arch}) not in tool cache")
        return None

    def cache_dir(
        self,
        source: Union[str, Path],
        exec_name: str,
        tool: str,
        version: str,
        arch: Optional[str] = None,
    ) -> Path:
        """
        Copy an extracted installation into the cache.

        Args:
            source: Directory to copy from
            exec_name: Executable expected under ``bin``
            tool: Tool name
            version: Exact version
            arch: Architecture key (default: the cache's)

        Returns:
            Cached installation directory

        Raises:
            InvalidVersionError: If version is not exact
            CacheLockTimeout: If another process holds the entry too long
        """
        arch = arch or self.arch
        version = clean_version(version).version_string
        entry = self._entry_dir(tool, version, arch)
        marker = self._marker(tool, version, arch)

        with self._lock(tool, version, arch):
            if marker.exists():
                marker.unlink()
            if entry.exists():
                logger.debug(f"Replacing incomplete cache entry {entry}")
                safe_rmtree(entry, require_prefix=self.root)

            logger.info(f"Caching {tool} {version} from {source}")
            copy_tree(source, entry)

            if not (entry / "bin" / exec_name).exists():
                logger.warning(f"{exec_name} not found in {entry / 'bin'}")

            marker.write_text("")

        return entry

    def list_versions(self, tool: str, arch: Optional[str] = None) -> List[str]:
        """
        Completed versions of ``tool``, oldest first.

        Example:
            >>> cache.list_versions("gh-cli")
            ['2.39.1', '2.40.0']
        """
        arch = arch or self.arch
        tool_dir = self.root / tool
        if not tool_dir.is_dir():
            return []

        versions = []
        for version_dir in tool_dir.iterdir():
            if not version_dir.is_dir():
                continue
            try:
                version = clean_version(version_dir.name)
            except InvalidVersionError:
                continue
            if self.find(tool, version.version_string, arch):
                versions.append(version)

        return [v.version_string for v in sorted(versions)]


def check_cache(cache: ToolCache, version: CleanedVersion) -> Optional[InstalledVersion]:
    """
    Cache lookup for the gh CLI.

    Args:
        cache: Tool cache to query
        version: Exact version to look for

    Returns:
        InstalledVersion when cached, else None
    """
    cached = cache.find(TOOL_NAME, version.version_string)
    if cached:
        logger.info("Found cached version.")
        return InstalledVersion(version=version, path=cached)
    return None


__all__ = [
    "TOOL_NAME",
    "InstalledVersion",
    "ToolCache",
    "check_cache",
]
