"""
Platform detection for ghsetup.

Maps the host to the names the cli/cli release assets use:

- OS family: ``linux``, ``macOS`` or ``windows``
- Architecture token: ``amd64`` for 64-bit x86, otherwise the host's own name
- Executable name: ``gh.exe`` on Windows, ``gh`` elsewhere
- Archive extension: ``zip`` or ``tar.gz``, which on macOS depends on the
  release being installed

Detection runs once per process; pass the resulting PlatformDescriptor to
whatever needs it.

Usage:
    from ghsetup.core.platform import detect_platform

    host = detect_platform()
    host.asset_name(clean_version("2.40.0"))
    # 'gh_2.40.0_linux_amd64.tar.gz'
"""

import functools
import platform
from dataclasses import dataclass

from ghsetup.core.exceptions import UnsupportedPlatformError
from ghsetup.core.version import CleanedVersion, clean_version

LINUX = "linux"
MACOS = "macOS"
WINDOWS = "windows"

ZIP = "zip"
TAR_GZ = "tar.gz"

# macOS assets were changed from tarballs to zips in 2.28.0.
MACOS_ZIP_SINCE = clean_version("2.28.0")

_SYSTEM_TO_FAMILY = {
    "linux": LINUX,
    "darwin": MACOS,
    "windows": WINDOWS,
}

# Python reports machine names differently per OS; fold them onto one key
_MACHINE_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
}


@dataclass(frozen=True)
class PlatformDescriptor:
    """
    Host platform as seen by the release assets and the tool cache.

    Attributes:
        os_family: 'linux', 'macOS' or 'windows'
        arch: Asset architecture token ('amd64', 'arm64', ...)
        cache_arch: Tool cache architecture key ('x64', 'arm64', ...)
        exec_name: Executable file name ('gh' or 'gh.exe')
    """

    os_family: str
    arch: str
    cache_arch: str
    exec_name: str

    def asset_extension(self, version: CleanedVersion) -> str:
        """
        Archive extension of the release asset for ``version``.

        Works for any version, including ones older than the macOS
        packaging change, so previously cached layouts stay reachable.

        Example:
            >>> PlatformDescriptor("macOS", "arm64", "arm64", "gh").asset_extension(
            ...     clean_version("2.27.9"))
            'tar.gz'
        """
        if self.os_family == WINDOWS:
            return ZIP
        if self.os_family != MACOS:
            return TAR_GZ
        return TAR_GZ if version < MACOS_ZIP_SINCE else ZIP

    def asset_name(self, version: CleanedVersion) -> str:
        """Expected file name of the release asset for this host."""
        extension = self.asset_extension(version)
        return (
            f"gh_{version.version_string}_{self.os_family}_{self.arch}.{extension}"
        )

    def __str__(self) -> str:
        return f"{self.os_family}-{self.arch}"


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformDescriptor:
    """
    Detect the current host.

    This function is cached - it only runs detection once per process.

    Raises:
        UnsupportedPlatformError: If the OS is not Linux, macOS or Windows
    """
    os_family = _detect_os_family(platform.system())
    cache_arch = _detect_machine(platform.machine())

    return PlatformDescriptor(
        os_family=os_family,
        arch=_asset_arch(cache_arch),
        cache_arch=cache_arch,
        exec_name="gh.exe" if os_family == WINDOWS else "gh",
    )


def _detect_os_family(system: str) -> str:
    """
    Map ``platform.system()`` output to an OS family.

    Raises:
        UnsupportedPlatformError: For anything but Linux, Darwin and Windows
    """
    family = _SYSTEM_TO_FAMILY.get(system.lower())
    if family is None:
        raise UnsupportedPlatformError(system)
    return family


def _detect_machine(machine: str) -> str:
    """Normalize ``platform.machine()`` output to a single key per CPU."""
    machine = machine.lower()
    return _MACHINE_ALIASES.get(machine, machine)


def _asset_arch(machine: str) -> str:
    """Asset names spell 64-bit x86 as 'amd64'; everything else is verbatim."""
    return "amd64" if machine == "x64" else machine


def clear_platform_cache():
    """
    Clear the platform detection cache.

    Useful for testing.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformDescriptor",
    "detect_platform",
    "clear_platform_cache",
    "LINUX",
    "MACOS",
    "WINDOWS",
    "ZIP",
    "TAR_GZ",
]
