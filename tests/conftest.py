"""
Pytest configuration and shared fixtures for ghsetup tests.
"""

import io
import os
import stat
import tarfile
import zipfile
from pathlib import Path
from typing import Dict, Optional

import pytest

from ghsetup.core.platform import PlatformDescriptor
from ghsetup.core.runner import Runner

GH_SCRIPT = '#!/bin/sh\necho "gh version {version} (2023-12-07)"\n'


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


# ============================================================================
# Helpers
# ============================================================================


def release_json(tag: str, asset_names=()) -> dict:
    """Registry payload for one release."""
    return {
        "tag_name": tag,
        "assets": [
            {
                "name": name,
                "browser_download_url": f"https://github.com/cli/cli/releases/download/{tag}/{name}",
            }
            for name in asset_names
        ],
    }


def gh_files(version: str, prefix: str = "") -> Dict[str, str]:
    """Files of a gh release archive, optionally under a top-level folder."""
    root = f"{prefix}/" if prefix else ""
    return {
        f"{root}bin/gh": GH_SCRIPT.format(version=version),
        f"{root}LICENSE": "MIT",
        f"{root}share/man/man1/gh.1": ".TH GH 1",
    }


def build_tar_gz(path: Path, files: Dict[str, str]) -> Path:
    """Write a .tar.gz archive with executable ``bin/`` members."""
    with tarfile.open(path, "w:gz") as tar:
        for name, content in files.items():
            data = content.encode()
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755 if "/bin/" in f"/{name}" else 0o644
            tar.addfile(info, io.BytesIO(data))
    return path


def build_zip(path: Path, files: Dict[str, str]) -> Path:
    """Write a .zip archive with executable ``bin/`` members."""
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in files.items():
            info = zipfile.ZipInfo(name)
            mode = 0o755 if "/bin/" in f"/{name}" else 0o644
            info.external_attr = (stat.S_IFREG | mode) << 16
            zf.writestr(info, content)
    return path


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def linux_amd64() -> PlatformDescriptor:
    """Host descriptor for 64-bit x86 Linux."""
    return PlatformDescriptor(
        os_family="linux", arch="amd64", cache_arch="x64", exec_name="gh"
    )


@pytest.fixture
def runner_env(tmp_path: Path) -> Dict[str, str]:
    """Environment of an isolated pipeline runner."""
    output_file = tmp_path / "github_output"
    path_file = tmp_path / "github_path"
    output_file.touch()
    path_file.touch()
    empty_bin = tmp_path / "empty-bin"
    empty_bin.mkdir()
    return {
        "PATH": str(empty_bin),
        "GITHUB_OUTPUT": str(output_file),
        "GITHUB_PATH": str(path_file),
        "RUNNER_TOOL_CACHE": str(tmp_path / "toolcache"),
        "RUNNER_TEMP": str(tmp_path / "runner-temp"),
    }


@pytest.fixture
def runner(runner_env) -> Runner:
    """Runner bound to the isolated environment, capturing commands."""
    return Runner(environ=runner_env, stdout=io.StringIO())


def read_outputs(runner_env: Dict[str, str]) -> Dict[str, str]:
    """Parse the GITHUB_OUTPUT file into a dict."""
    content = Path(runner_env["GITHUB_OUTPUT"]).read_text(encoding="utf-8")
    outputs = {}
    lines = content.splitlines()
    i = 0
    while i < len(lines):
        name, _, delimiter = lines[i].partition("<<")
        value_lines = []
        i += 1
        while i < len(lines) and lines[i] != delimiter:
            value_lines.append(lines[i])
            i += 1
        outputs[name] = "\n".join(value_lines)
        i += 1
    return outputs


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    from ghsetup.core import platform

    platform.detect_platform.cache_clear()
    yield
    platform.detect_platform.cache_clear()


requires_posix = pytest.mark.skipif(
    os.name == "nt", reason="runs a POSIX shell script as the fake gh"
)


def write_fake_gh(bin_dir: Path, version: Optional[str]) -> Path:
    """Create an executable 'gh' script reporting ``version``."""
    bin_dir.mkdir(parents=True, exist_ok=True)
    gh = bin_dir / "gh"
    gh.write_text(GH_SCRIPT.format(version=version))
    gh.chmod(0o755)
    return gh
