"""
Release registry client.

Thin wrapper over the three GitHub REST endpoints the resolver needs:

- ``GET /repos/{owner}/{repo}/releases/latest``
- ``GET /repos/{owner}/{repo}/releases?per_page=N``
- ``GET /repos/{owner}/{repo}/releases/tags/{tag}``

A 404 means "no such release" and is raised as NoMatchingReleaseError;
anything else that goes wrong on the wire is a RegistryError.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests
from requests.exceptions import RequestException

from ghsetup.core.config import DEFAULT_API_URL
from ghsetup.core.exceptions import NoMatchingReleaseError, RegistryError
from ghsetup.core.version import CleanedVersion

logger = logging.getLogger(__name__)

GH_OWNER = "cli"
GH_REPO = "cli"
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class ReleaseAsset:
    """
    One downloadable file attached to a release.

    Attributes:
        name: File name, e.g. 'gh_2.40.0_linux_amd64.tar.gz'
        url: Browser download URL
    """

    name: str
    url: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ReleaseAsset":
        return cls(name=data["name"], url=data["browser_download_url"])


@dataclass(frozen=True)
class RawRelease:
    """A release as listed by the registry; its tag is not validated."""

    tag_name: str
    assets: Tuple[ReleaseAsset, ...] = ()

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RawRelease":
        return cls(
            tag_name=data.get("tag_name") or "",
            assets=tuple(ReleaseAsset.from_api(a) for a in data.get("assets", [])),
        )


@dataclass(frozen=True)
class Release:
    """
    A release the resolver settled on.

    Attributes:
        version: Release version
        assets: Assets in registry order
    """

    version: CleanedVersion
    assets: Tuple[ReleaseAsset, ...] = field(default_factory=tuple)

    def find_asset(self, name: str) -> Optional[ReleaseAsset]:
        """The asset called exactly ``name``, or None."""
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None


class GitHubReleaseClient:
    """
    Query releases of a GitHub repository.

    Example:
        >>> client = GitHubReleaseClient(token=os.environ.get("GITHUB_TOKEN"))
        >>> client.get_latest_release().tag_name
        'v2.40.0'
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        owner: str = GH_OWNER,
        repo: str = GH_REPO,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize release client.

        Args:
            token: Optional credential; unauthenticated requests are rate limited
            api_url: REST API base URL
            owner: Repository owner
            repo: Repository name
            timeout: Request timeout in seconds
            session: Session to reuse (default: new session)
        """
        self.api_url = api_url.rstrip("/")
        self.owner = owner
        self.repo = repo
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "ghsetup",
            }
        )
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET a repository endpoint and decode the JSON body.

        Raises:
            NoMatchingReleaseError: On 404
            RegistryError: On any other failure
        """
        url = f"{self.api_url}/repos/{self.owner}/{self.repo}{path}"
        logger.debug(f"GET {url} {params or ''}")

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except RequestException as e:
            raise RegistryError(f"Failed to query {url}: {e}") from e

        if response.status_code == 404:
            raise NoMatchingReleaseError(
                f"No release found at {self.owner}/{self.repo}{path}"
            )
        if not response.ok:
            raise RegistryError(
                f"Registry request failed ({response.status_code}) for {url}: "
                f"{_error_message(response)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise RegistryError(f"Invalid JSON from {url}: {e}") from e

    def get_latest_release(self) -> RawRelease:
        """The release the repository marks as latest stable."""
        return RawRelease.from_api(self._get("/releases/latest"))

    def list_releases(self, per_page: int = MAX_PAGE_SIZE) -> List[RawRelease]:
        """
        The most recent releases, newest first, one page only.

        Args:
            per_page: Page size, capped at 100
        """
        per_page = max(1, min(per_page, MAX_PAGE_SIZE))
        data = self._get("/releases", params={"per_page": per_page})
        return [RawRelease.from_api(item) for item in data]

    def get_release_by_tag(self, tag: str) -> RawRelease:
        """The release tagged ``tag``."""
        return RawRelease.from_api(self._get(f"/releases/tags/{tag}"))


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text
    if isinstance(data, dict) and data.get("message"):
        return data["message"]
    return response.text


__all__ = [
    "GH_OWNER",
    "GH_REPO",
    "ReleaseAsset",
    "RawRelease",
    "Release",
    "GitHubReleaseClient",
]
