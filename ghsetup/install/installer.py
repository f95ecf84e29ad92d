"""
Release asset installation.

This module downloads a release asset, extracts it, finds the directory
that holds ``bin/``, and registers that directory in the tool cache.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ghsetup.core.download import download_tool
from ghsetup.core.exceptions import NoExecutableFoundError, UnsupportedExtensionError
from ghsetup.core.filesystem import extract_tar, extract_zip, unique_directory
from ghsetup.core.platform import TAR_GZ, ZIP, PlatformDescriptor
from ghsetup.core.tool_cache import TOOL_NAME, InstalledVersion, ToolCache
from ghsetup.core.version import CleanedVersion
from ghsetup.release.registry import ReleaseAsset

logger = logging.getLogger(__name__)


def asset_base_name(asset_name: str, extension: str) -> str:
    """
    Asset file name without its archive extension.

    Example:
        >>> asset_base_name("gh_2.40.0_linux_amd64.tar.gz", "tar.gz")
        'gh_2.40.0_linux_amd64'
    """
    suffix = f".{extension}"
    if asset_name.endswith(suffix):
        return asset_name[: -len(suffix)]
    return asset_name


def locate_tool_root(extract_dir: Path, asset_name: str, extension: str) -> Path:
    """
    Find the directory containing ``bin`` inside an extracted archive.

    Archives either put ``bin`` at the top level or wrap everything in one
    folder named after the asset. Only those two layouts are accepted.

    Args:
        extract_dir: Extraction root
        asset_name: Asset file name
        extension: Archive extension of the asset

    Returns:
        The directory whose ``bin`` subdirectory holds the executable

    Raises:
        NoExecutableFoundError: If neither layout matches
    """
    if (extract_dir / "bin").is_dir():
        return extract_dir

    nested = extract_dir / asset_base_name(asset_name, extension)
    if nested.is_dir() and (nested / "bin").is_dir():
        logger.debug(f"Using nested archive root {nested}")
        return nested

    raise NoExecutableFoundError(extract_dir, asset_name)


class Installer:
    """
    Installs gh release assets into the tool cache.

    Example:
        >>> installer = Installer(detect_platform(), ToolCache(cache_root), Path("/tmp"))
        >>> installed = installer.install(asset, clean_version("2.40.0"))
        >>> installed.bin_dir
        PosixPath('/opt/hostedtoolcache/gh-cli/2.40.0/x64/bin')
    """

    def __init__(
        self,
        platform: PlatformDescriptor,
        cache: ToolCache,
        temp_dir: Union[str, Path],
        token: Optional[str] = None,
        timeout: int = 30,
        max_retries: int = 3,
    ):
        """
        Initialize installer.

        Args:
            platform: Host platform
            cache: Tool cache to register installations in
            temp_dir: Scratch directory for downloads and extraction
            token: Optional credential for asset downloads
            timeout: HTTP timeout in seconds
            max_retries: Download attempts
        """
        self.platform = platform
        self.cache = cache
        self.temp_dir = Path(temp_dir)
        self.token = token
        self.timeout = timeout
        self.max_retries = max_retries

    def install(self, asset: ReleaseAsset, version: CleanedVersion) -> InstalledVersion:
        """
        Download, extract and cache one release asset.

        Args:
            asset: Asset to install
            version: Version the asset belongs to

        Returns:
            InstalledVersion pointing into the tool cache

        Raises:
            DownloadError: If the download fails
            ExtractionError: If the archive cannot be extracted
            UnsupportedExtensionError: If the platform names an unknown format
            NoExecutableFoundError: If the archive layout is not recognized
        """
        logger.info(f"Downloading {asset.name}")
        archive = download_tool(
            asset.url,
            self.temp_dir,
            token=self.token,
            timeout=self.timeout,
            max_retries=self.max_retries,
        )

        extension = self.platform.asset_extension(version)
        extract_dir = self._extract(archive, extension)

        tool_root = locate_tool_root(extract_dir, asset.name, extension)
        cached = self.cache.cache_dir(
            tool_root, self.platform.exec_name, TOOL_NAME, version.version_string
        )
        logger.info(f"Installed gh {version} to {cached}")
        return InstalledVersion(version=version, path=cached)

    def _extract(self, archive: Path, extension: str) -> Path:
        """
        Extract ``archive`` into a fresh directory.

        Raises:
            UnsupportedExtensionError: If ``extension`` has no extractor
        """
        if extension == ZIP:
            extractor = extract_zip
        elif extension == TAR_GZ:
            extractor = extract_tar
        else:
            raise UnsupportedExtensionError(extension)

        destination = unique_directory(self.temp_dir)
        logger.debug(f"Extracting {archive} to {destination}")
        return extractor(archive, destination)


__all__ = ["Installer", "locate_tool_root", "asset_base_name"]
