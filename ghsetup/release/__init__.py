"""
Release lookup for ghsetup.

This package provides:
- A client for the cli/cli release listing
- Resolution of stable / latest / exact requests to a single release
"""

from ghsetup.release.registry import (
    GitHubReleaseClient,
    RawRelease,
    Release,
    ReleaseAsset,
)
from ghsetup.release.resolver import ReleaseResolver, select_latest

__all__ = [
    "GitHubReleaseClient",
    "RawRelease",
    "Release",
    "ReleaseAsset",
    "ReleaseResolver",
    "select_latest",
]
