"""
Setup orchestration.

Sequences one setup run:

1. Validate input: classify the version request
2. Check cache: exact requests only, since stable/latest are unknown yet
3. Fetch release: resolve the request, then check the cache again by the
   resolved version
4. Install release: pick the asset for this host and install it
5. Check installation: put ``bin`` on PATH, run ``gh version``, publish
   the ``installed-version`` output

Any failure ends the run; nothing is retried or rolled back here.
"""

import logging
from typing import Optional

from ghsetup.core.config import SetupConfig
from ghsetup.core.exceptions import AssetNotFoundError
from ghsetup.core.filesystem import list_directory
from ghsetup.core.platform import PlatformDescriptor, detect_platform
from ghsetup.core.runner import Runner
from ghsetup.core.tool_cache import InstalledVersion, ToolCache, check_cache
from ghsetup.core.version import VersionSpecifier
from ghsetup.install.installer import Installer
from ghsetup.install.verifier import verify_installation
from ghsetup.release.registry import GitHubReleaseClient
from ghsetup.release.resolver import ReleaseResolver

logger = logging.getLogger(__name__)

OUTPUT_INSTALLED_VERSION = "installed-version"


class SetupOrchestrator:
    """
    Run the setup pipeline for one configuration.

    Collaborators default to the real ones built from ``config``; tests
    pass their own.

    Example:
        >>> orchestrator = SetupOrchestrator(load_config(runner), runner)
        >>> orchestrator.run().version
        CleanedVersion('2.40.0')
    """

    def __init__(
        self,
        config: SetupConfig,
        runner: Runner,
        platform: Optional[PlatformDescriptor] = None,
        client: Optional[GitHubReleaseClient] = None,
        cache: Optional[ToolCache] = None,
        installer: Optional[Installer] = None,
    ):
        self.config = config
        self.runner = runner
        self.platform = platform or detect_platform()
        self.client = client or GitHubReleaseClient(
            token=config.github_token,
            api_url=config.api_url,
            timeout=config.timeout,
        )
        self.cache = cache or ToolCache(
            config.tool_cache_dir,
            arch=self.platform.cache_arch,
            lock_timeout=config.lock_timeout,
        )
        self.installer = installer or Installer(
            self.platform,
            self.cache,
            config.temp_dir,
            token=config.github_token,
            timeout=config.timeout,
            max_retries=config.max_retries,
        )
        self.resolver = ReleaseResolver(self.client)

    def run(self) -> InstalledVersion:
        """
        Make gh available on PATH.

        Returns:
            The verified installation

        Raises:
            GhSetupError: On any failure
        """
        with self.runner.group("Validate input"):
            specifier = VersionSpecifier(self.config.version)
            logger.info(f"Requested gh version: {specifier.input_version}")

        with self.runner.group("Checking cache"):
            installed = None
            if specifier.is_exact:
                installed = check_cache(self.cache, specifier.cleaned_version)
        if installed:
            return self._check_and_publish(installed)

        with self.runner.group("Fetching release"):
            release = self.resolver.resolve(specifier)
            installed = check_cache(self.cache, release.version)
        if installed:
            return self._check_and_publish(installed)

        with self.runner.group("Installing release"):
            asset_name = self.platform.asset_name(release.version)
            asset = release.find_asset(asset_name)
            if asset is None:
                raise AssetNotFoundError(asset_name)
            installed = self.installer.install(asset, release.version)

        return self._check_and_publish(installed)

    def _check_and_publish(self, installed: InstalledVersion) -> InstalledVersion:
        """
        Put the installation on PATH, verify it, and publish its version.

        Raises:
            VerificationError: If gh does not report the installed version
        """
        with self.runner.group("Checking installation"):
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(f"Installed version: {installed.version}")
                logger.debug(f"Installed path: {installed.path}")
                logger.debug("Contents of path:")
                logger.debug("\n".join(list_directory(installed.path)))

            self.runner.add_path(installed.bin_dir)
            verify_installation(
                self.platform.exec_name,
                installed.version,
                search_path=self.runner.environ.get("PATH"),
            )
            self.runner.set_output(
                OUTPUT_INSTALLED_VERSION, installed.version.version_string
            )

        return installed


__all__ = ["SetupOrchestrator", "OUTPUT_INSTALLED_VERSION"]
