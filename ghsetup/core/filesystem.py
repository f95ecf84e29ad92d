"""
File system utilities for ghsetup.

This module provides the archive and directory operations the installer
and the tool cache need:
- Archive extraction (zip, tar.gz) with directory traversal protection
- Safe deletion and tree copying
- Unique scratch directories under the runner's temp directory
"""

import os
import shutil
import stat
import sys
import tarfile
import uuid
import zipfile
from pathlib import Path
from typing import Optional, Union

from ghsetup.core.exceptions import ExtractionError, InsecureArchiveError

IS_WINDOWS = os.name == "nt"


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check whether ``path`` is inside ``parent``.

    Example:
        >>> is_relative_to(Path('/a/b/c'), Path('/a'))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def unique_directory(parent: Union[str, Path]) -> Path:
    """
    Create a new, uniquely named directory under ``parent``.

    Args:
        parent: Directory to create the new directory in

    Returns:
        Path to the created directory
    """
    directory = Path(parent) / str(uuid.uuid4())
    directory.mkdir(parents=True, exist_ok=False)
    return directory


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_zip(archive_path: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Extract a ZIP archive into ``destination``.

    Unix permission bits stored in the archive are restored, so executables
    stay executable.

    Args:
        archive_path: Path to the .zip file
        destination: Directory to extract into (created if missing)

    Returns:
        The destination directory

    Raises:
        ExtractionError: If the archive is missing or corrupt
        InsecureArchiveError: If a member escapes the destination
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ExtractionError(f"Archive not found: {archive_path}")
    destination.mkdir(parents=True, exist_ok=True)

    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            members = zf.infolist()

            # Validate all paths first
            for member in members:
                _validate_archive_path(member.filename, destination)

            for member in members:
                extracted = Path(zf.extract(member, destination))
                mode = (member.external_attr >> 16) & 0o777
                if mode and not IS_WINDOWS and not member.is_dir():
                    extracted.chmod(mode)
    except InsecureArchiveError:
        raise
    except (zipfile.BadZipFile, OSError) as e:
        raise ExtractionError(f"Failed to extract {archive_path}: {e}") from e

    return destination


def extract_tar(archive_path: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Extract a gzip-compressed tarball into ``destination``.

    Args:
        archive_path: Path to the .tar.gz file
        destination: Directory to extract into (created if missing)

    Returns:
        The destination directory

    Raises:
        ExtractionError: If the archive is missing or corrupt
        InsecureArchiveError: If a member escapes the destination
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ExtractionError(f"Archive not found: {archive_path}")
    destination.mkdir(parents=True, exist_ok=True)

    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            for member in tar.getmembers():
                _validate_archive_path(member.name, destination)

            # Extract with filter for security (Python 3.12+)
            # For older Python, we've already validated paths above
            if sys.version_info >= (3, 12):
                tar.extractall(destination, filter="data")
            else:
                tar.extractall(destination)
    except InsecureArchiveError:
        raise
    except (tarfile.TarError, EOFError, OSError) as e:
        raise ExtractionError(f"Failed to extract {archive_path}: {e}") from e

    return destination


# ============================================================================
# Safe File Operations
# ============================================================================


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        OSError: If deletion fails
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if IS_WINDOWS:

        def handle_remove_readonly(func, target, exc):
            """Error handler for Windows read-only files."""
            if not os.access(target, os.W_OK):
                os.chmod(target, stat.S_IWRITE)
                func(target)
            else:
                raise

        shutil.rmtree(path, onerror=handle_remove_readonly)
    else:
        shutil.rmtree(path)


def copy_tree(source: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Copy the contents of ``source`` into ``destination``.

    Symlinks are copied as links. The destination is created if missing.

    Raises:
        FileNotFoundError: If source is not a directory
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_dir():
        raise FileNotFoundError(f"Source is not a directory: {source}")

    shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)
    return destination


def list_directory(path: Union[str, Path]) -> list:
    """Sorted names of the entries in ``path``."""
    return sorted(entry.name for entry in Path(path).iterdir())


__all__ = [
    "is_relative_to",
    "unique_directory",
    "extract_zip",
    "extract_tar",
    "safe_rmtree",
    "copy_tree",
    "list_directory",
]
