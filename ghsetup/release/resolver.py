"""
Release resolution.

Turns a VersionSpecifier into exactly one Release:

- stable: the registry's latest stable release
- latest: the highest semantic version among the 100 most recent releases;
  tags that are not semantic versions are skipped, not fatal
- exact: the release tagged ``v<version>``
"""

import logging
from typing import Iterable, Optional

from ghsetup.core.exceptions import NoMatchingReleaseError
from ghsetup.core.version import VersionSpecifier, clean_version, try_clean_version
from ghsetup.release.registry import (
    MAX_PAGE_SIZE,
    GitHubReleaseClient,
    RawRelease,
    Release,
)

logger = logging.getLogger(__name__)


def select_latest(releases: Iterable[RawRelease]) -> Release:
    """
    Pick the release with the highest semantic version.

    Pre-releases count, but rank below the release they precede. When two
    tags clean to the same version the first one in registry order wins.

    Args:
        releases: Releases in registry order

    Returns:
        The highest release

    Raises:
        NoMatchingReleaseError: If no tag is a semantic version

    Example:
        >>> select_latest([RawRelease("v2.0.0"), RawRelease("v2.0.0-rc1")]).version
        CleanedVersion('2.0.0')
    """
    best: Optional[Release] = None
    for raw in releases:
        version = try_clean_version(raw.tag_name)
        if version is None:
            logger.debug(f"Skipping release with invalid tag: {raw.tag_name!r}")
            continue
        if best is None or version > best.version:
            best = Release(version=version, assets=raw.assets)

    if best is None:
        raise NoMatchingReleaseError("Could not find a valid release!")
    return best


class ReleaseResolver:
    """
    Resolve version requests against the release registry.

    This is the only component that talks to the network during resolution.

    Example:
        >>> resolver = ReleaseResolver(GitHubReleaseClient(token))
        >>> resolver.resolve(VersionSpecifier("latest")).version
        CleanedVersion('2.41.0')
    """

    def __init__(self, client: GitHubReleaseClient):
        self.client = client

    def resolve(self, specifier: VersionSpecifier) -> Release:
        """
        Find the release matching ``specifier``.

        Raises:
            NoMatchingReleaseError: If no release matches
            InvalidVersionError: If the stable or exact release carries a
                tag that is not a semantic version
            RegistryError: If the registry cannot be queried
        """
        if specifier.is_stable:
            raw = self.client.get_latest_release()
            logger.info(f"Latest stable release is {raw.tag_name}")
            return Release(version=clean_version(raw.tag_name), assets=raw.assets)

        if specifier.is_latest:
            releases = self.client.list_releases(per_page=MAX_PAGE_SIZE)
            logger.debug(f"Registry returned {len(releases)} releases")
            release = select_latest(releases)
            logger.info(f"Latest release is {release.version}")
            return release

        raw = self.client.get_release_by_tag(specifier.tag_name)
        return Release(version=clean_version(raw.tag_name), assets=raw.assets)


__all__ = ["ReleaseResolver", "select_latest"]
