"""
Unit tests for the platform detection module.

Tests cover:
- OS family mapping and unsupported systems
- Architecture normalization
- Executable name
- Archive extension, including the macOS packaging change at 2.28.0
- Asset naming
- Cache behavior
"""

import pytest
from unittest.mock import patch

from ghsetup.core.exceptions import UnsupportedPlatformError
from ghsetup.core.platform import (
    MACOS_ZIP_SINCE,
    PlatformDescriptor,
    clear_platform_cache,
    detect_platform,
    _detect_machine,
    _detect_os_family,
    _asset_arch,
)
from ghsetup.core.version import clean_version


def descriptor(os_family: str, arch: str = "amd64") -> PlatformDescriptor:
    exec_name = "gh.exe" if os_family == "windows" else "gh"
    return PlatformDescriptor(os_family, arch, "x64", exec_name)


class TestOsFamily:
    """Tests for OS family mapping."""

    @pytest.mark.parametrize(
        "system,expected",
        [("Linux", "linux"), ("Darwin", "macOS"), ("Windows", "windows")],
    )
    def test_supported_systems(self, system, expected):
        """Test supported systems map to their family."""
        assert _detect_os_family(system) == expected

    @pytest.mark.parametrize("system", ["FreeBSD", "SunOS", "AIX", ""])
    def test_unsupported_system(self, system):
        """Test anything else raises UnsupportedPlatformError."""
        with pytest.raises(UnsupportedPlatformError, match="Unsupported platform"):
            _detect_os_family(system)


class TestArchitecture:
    """Tests for architecture normalization."""

    @pytest.mark.parametrize("machine", ["x86_64", "AMD64", "amd64"])
    def test_x86_64_is_amd64(self, machine):
        """Test every spelling of 64-bit x86 becomes 'amd64' in asset names."""
        assert _asset_arch(_detect_machine(machine)) == "amd64"
        assert _detect_machine(machine) == "x64"

    @pytest.mark.parametrize("machine", ["aarch64", "arm64"])
    def test_arm64(self, machine):
        """Test 64-bit ARM is 'arm64'."""
        assert _asset_arch(_detect_machine(machine)) == "arm64"

    def test_unknown_machine_is_verbatim(self):
        """Test unknown machines pass through unchanged."""
        assert _asset_arch(_detect_machine("riscv64")) == "riscv64"


class TestDetectPlatform:
    """Tests for detect_platform."""

    @patch("ghsetup.core.platform.platform.machine", return_value="x86_64")
    @patch("ghsetup.core.platform.platform.system", return_value="Linux")
    def test_linux_amd64(self, mock_system, mock_machine):
        """Test detection on 64-bit Linux."""
        host = detect_platform()
        assert host == PlatformDescriptor("linux", "amd64", "x64", "gh")
        assert str(host) == "linux-amd64"

    @patch("ghsetup.core.platform.platform.machine", return_value="AMD64")
    @patch("ghsetup.core.platform.platform.system", return_value="Windows")
    def test_windows_exec_name(self, mock_system, mock_machine):
        """Test Windows uses gh.exe."""
        assert detect_platform().exec_name == "gh.exe"

    @patch("ghsetup.core.platform.platform.machine", return_value="arm64")
    @patch("ghsetup.core.platform.platform.system", return_value="Darwin")
    def test_macos_arm64(self, mock_system, mock_machine):
        """Test detection on Apple silicon."""
        host = detect_platform()
        assert host.os_family == "macOS"
        assert host.arch == "arm64"
        assert host.exec_name == "gh"

    @patch("ghsetup.core.platform.platform.machine", return_value="x86_64")
    @patch("ghsetup.core.platform.platform.system", return_value="Linux")
    def test_detection_is_cached(self, mock_system, mock_machine):
        """Test detection only runs once per process."""
        first = detect_platform()
        second = detect_platform()
        assert first is second
        assert mock_system.call_count == 1

        clear_platform_cache()
        detect_platform()
        assert mock_system.call_count == 2

    @patch("ghsetup.core.platform.platform.system", return_value="Plan9")
    def test_unsupported_host(self, mock_system):
        """Test unsupported host fails detection."""
        with pytest.raises(UnsupportedPlatformError):
            detect_platform()


class TestAssetExtension:
    """Tests for archive extension selection."""

    def test_boundary_constant(self):
        """Test the macOS boundary is 2.28.0."""
        assert MACOS_ZIP_SINCE.version_string == "2.28.0"

    def test_macos_before_boundary(self):
        """Test macOS releases before 2.28.0 are tarballs."""
        host = descriptor("macOS")
        assert host.asset_extension(clean_version("2.27.9")) == "tar.gz"
        assert host.asset_extension(clean_version("1.0.0")) == "tar.gz"

    @pytest.mark.parametrize("version", ["2.28.0", "2.30.0", "3.0.0"])
    def test_macos_from_boundary(self, version):
        """Test macOS releases from 2.28.0 on are zips."""
        assert descriptor("macOS").asset_extension(clean_version(version)) == "zip"

    def test_macos_prerelease_of_boundary(self):
        """Test a pre-release of 2.28.0 still precedes the boundary."""
        host = descriptor("macOS")
        assert host.asset_extension(clean_version("2.28.0-rc1")) == "tar.gz"

    @pytest.mark.parametrize("version", ["2.28.0-1", "2.28.0-alpha.beta"])
    def test_macos_any_prerelease_of_boundary(self, version):
        """Test numeric and dotted pre-releases of 2.28.0 are still tarballs."""
        host = descriptor("macOS")
        assert host.asset_extension(clean_version(version)) == "tar.gz"
        assert host.asset_name(clean_version(version)) == f"gh_{version}_macOS_amd64.tar.gz"

    @pytest.mark.parametrize("version", ["1.0.0", "2.27.9", "2.40.0"])
    def test_windows_always_zip(self, version):
        """Test Windows releases are always zips."""
        assert descriptor("windows").asset_extension(clean_version(version)) == "zip"

    @pytest.mark.parametrize("version", ["1.0.0", "2.28.0", "2.40.0"])
    def test_linux_always_tarball(self, version):
        """Test Linux releases are always tarballs."""
        assert descriptor("linux").asset_extension(clean_version(version)) == "tar.gz"


class TestAssetName:
    """Tests for asset naming."""

    def test_linux(self):
        """Test Linux asset name."""
        name = descriptor("linux").asset_name(clean_version("2.40.0"))
        assert name == "gh_2.40.0_linux_amd64.tar.gz"

    def test_macos_old(self):
        """Test old macOS asset name."""
        name = descriptor("macOS", "arm64").asset_name(clean_version("2.27.0"))
        assert name == "gh_2.27.0_macOS_arm64.tar.gz"

    def test_windows(self):
        """Test Windows asset name."""
        name = descriptor("windows").asset_name(clean_version("v2.40.0"))
        assert name == "gh_2.40.0_windows_amd64.zip"
