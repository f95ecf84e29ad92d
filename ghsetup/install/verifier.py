"""
Post-install verification.

Runs ``gh version`` from PATH and checks that it reports the version we
just installed or found in the cache.
"""

import logging
import shutil
import subprocess
from typing import Optional

from ghsetup.core.exceptions import VerificationError
from ghsetup.core.version import CleanedVersion

logger = logging.getLogger(__name__)

VERSION_TIMEOUT = 30


def run_version_command(
    exec_name: str, search_path: Optional[str] = None, timeout: int = VERSION_TIMEOUT
) -> str:
    """
    Run ``<exec_name> version`` and return its standard output.

    Args:
        exec_name: Executable to look up on PATH
        search_path: PATH string to search (default: process PATH)
        timeout: Seconds before the command is abandoned

    Raises:
        VerificationError: If the executable is missing, times out or fails
    """
    executable = shutil.which(exec_name, path=search_path)
    if executable is None:
        raise VerificationError(f"{exec_name} not found on PATH")

    try:
        result = subprocess.run(
            [executable, "version"],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise VerificationError(
            f"{exec_name} version timed out after {timeout} seconds"
        ) from e
    except OSError as e:
        raise VerificationError(f"Failed to run {executable}: {e}") from e

    if result.returncode != 0:
        raise VerificationError(
            f"{exec_name} version exited with code {result.returncode}: "
            f"{result.stderr.strip()}"
        )

    return result.stdout


def verify_installation(
    exec_name: str, version: CleanedVersion, search_path: Optional[str] = None
) -> str:
    """
    Check that the gh on PATH reports ``version``.

    Returns:
        The command output

    Raises:
        VerificationError: If the expected version is not in the output
    """
    output = run_version_command(exec_name, search_path=search_path)
    logger.info(output.strip())

    if version.version_string not in output:
        raise VerificationError(
            f"gh version {version.version_string} not found in output: {output}"
        )
    return output


__all__ = ["run_version_command", "verify_installation"]
