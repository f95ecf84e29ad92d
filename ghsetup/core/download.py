"""
Network download manager with retry logic.

This module provides the download side of the installer:
- HTTP/HTTPS streaming downloads with TLS verification
- Retry logic with exponential backoff
- Timeout handling
"""

import logging
import time
import uuid
from pathlib import Path
from typing import Dict, Optional, Union
from urllib.parse import urlparse

import requests
from requests.exceptions import RequestException

from ghsetup.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def download_file(
    url: str,
    destination: Path,
    headers: Optional[Dict[str, str]] = None,
    timeout: int = 30,
    max_retries: int = 3,
) -> Path:
    """
    Download file from URL to destination with retry logic.

    Args:
        url: URL to download from
        destination: Local path to save file
        headers: Extra request headers
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If download fails after retries
        ValueError: If URL or destination is invalid

    Example:
        >>> download_file("https://example.com/gh.tar.gz", Path("/tmp/gh.tar.gz"))
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    for attempt in range(max_retries):
        try:
            return _download(url, destination, headers or {}, timeout)
        except (RequestException, OSError) as e:
            if attempt == max_retries - 1:
                raise DownloadError(
                    f"Download failed after {max_retries} attempts: {e}"
                ) from e

            # Exponential backoff
            backoff_seconds = 2**attempt
            logger.warning(
                f"Download attempt {attempt + 1} failed: {e}. "
                f"Retrying in {backoff_seconds}s..."
            )
            time.sleep(backoff_seconds)

    raise DownloadError(f"Download failed: {url}")


def _download(
    url: str, destination: Path, headers: Dict[str, str], timeout: int
) -> Path:
    """
    Stream one download attempt to disk.

    Raises:
        RequestException: If HTTP request fails
    """
    logger.info(f"Downloading from {url}")

    response = requests.get(
        url, headers=headers, stream=True, timeout=timeout, allow_redirects=True
    )
    response.raise_for_status()

    downloaded = 0
    with open(destination, "wb") as f:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if chunk:
                f.write(chunk)
                downloaded += len(chunk)

    logger.debug(f"Downloaded {downloaded} bytes to {destination}")
    return destination


def download_tool(
    url: str,
    temp_dir: Union[str, Path],
    token: Optional[str] = None,
    timeout: int = 30,
    max_retries: int = 3,
) -> Path:
    """
    Download a release asset into a fresh file under ``temp_dir``.

    Args:
        url: Asset download URL
        temp_dir: Scratch directory for the download
        token: Optional credential, sent as a bearer token to REST API
            asset URLs only
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts

    Returns:
        Path to the downloaded file

    Raises:
        DownloadError: If the download fails
    """
    headers = {"Accept": "application/octet-stream"}
    if token and _is_api_asset_url(url):
        headers["Authorization"] = f"Bearer {token}"

    destination = Path(temp_dir) / str(uuid.uuid4())
    return download_file(
        url,
        destination,
        headers=headers,
        timeout=timeout,
        max_retries=max_retries,
    )


def _is_api_asset_url(url: str) -> bool:
    """Whether ``url`` is a REST API asset endpoint rather than a public link."""
    return "/releases/assets/" in urlparse(url).path


__all__ = ["download_file", "download_tool", "DownloadError"]
