"""
Unit tests for download module.

Tests download functionality with mocked network requests.
"""

import pytest
import requests
import responses
from unittest.mock import patch

from ghsetup.core.download import download_file, download_tool
from ghsetup.core.exceptions import DownloadError

ASSET_URL = "https://github.com/cli/cli/releases/download/v2.40.0/gh_2.40.0_linux_amd64.tar.gz"


class TestDownloadFile:
    """Test download_file function."""

    @responses.activate
    def test_simple_download(self, tmp_path):
        """Test simple download."""
        content = b"archive bytes"
        destination = tmp_path / "sub" / "file.bin"
        responses.add(responses.GET, ASSET_URL, body=content, status=200)

        result = download_file(ASSET_URL, destination)

        assert result == destination
        assert destination.read_bytes() == content

    @responses.activate
    def test_sends_headers(self, tmp_path):
        """Test extra headers are sent."""
        responses.add(responses.GET, ASSET_URL, body=b"x", status=200)

        download_file(ASSET_URL, tmp_path / "f", headers={"X-Test": "1"})

        assert responses.calls[0].request.headers["X-Test"] == "1"

    @responses.activate
    @patch("ghsetup.core.download.time.sleep")
    def test_retries_then_succeeds(self, mock_sleep, tmp_path):
        """Test transient failures are retried with backoff."""
        responses.add(responses.GET, ASSET_URL, body=requests.ConnectionError("reset"))
        responses.add(responses.GET, ASSET_URL, status=503)
        responses.add(responses.GET, ASSET_URL, body=b"ok", status=200)

        result = download_file(ASSET_URL, tmp_path / "f", max_retries=3)

        assert result.read_bytes() == b"ok"
        assert len(responses.calls) == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1, 2]

    @responses.activate
    @patch("ghsetup.core.download.time.sleep")
    def test_gives_up_after_max_retries(self, mock_sleep, tmp_path):
        """Test DownloadError after the last attempt."""
        responses.add(responses.GET, ASSET_URL, status=404)

        with pytest.raises(DownloadError, match="after 2 attempts"):
            download_file(ASSET_URL, tmp_path / "f", max_retries=2)

        assert len(responses.calls) == 2

    def test_empty_url(self, tmp_path):
        """Test empty URL is rejected."""
        with pytest.raises(ValueError, match="URL cannot be empty"):
            download_file("", tmp_path / "f")


class TestDownloadTool:
    """Test download_tool function."""

    @responses.activate
    def test_downloads_to_unique_file(self, tmp_path):
        """Test each download gets its own file under the temp dir."""
        responses.add(responses.GET, ASSET_URL, body=b"one", status=200)
        responses.add(responses.GET, ASSET_URL, body=b"two", status=200)

        first = download_tool(ASSET_URL, tmp_path)
        second = download_tool(ASSET_URL, tmp_path)

        assert first != second
        assert first.parent == tmp_path
        assert first.read_bytes() == b"one"
        assert second.read_bytes() == b"two"

    @responses.activate
    def test_token_sent_to_api_asset_url(self, tmp_path):
        """Test the token is sent as Authorization header to the REST API."""
        api_url = "https://api.github.com/repos/cli/cli/releases/assets/138312312"
        responses.add(responses.GET, api_url, body=b"x", status=200)

        download_tool(api_url, tmp_path, token="secret")

        headers = responses.calls[0].request.headers
        assert headers["Authorization"] == "Bearer secret"
        assert headers["Accept"] == "application/octet-stream"

    @responses.activate
    def test_token_not_sent_to_public_download(self, tmp_path):
        """Test browser download links never receive the token."""
        responses.add(responses.GET, ASSET_URL, body=b"x", status=200)

        download_tool(ASSET_URL, tmp_path, token="secret")

        headers = responses.calls[0].request.headers
        assert "Authorization" not in headers
        assert headers["Accept"] == "application/octet-stream"

    @responses.activate
    def test_no_token_no_authorization(self, tmp_path):
        """Test anonymous downloads send no Authorization header."""
        responses.add(responses.GET, ASSET_URL, body=b"x", status=200)

        download_tool(ASSET_URL, tmp_path)

        assert "Authorization" not in responses.calls[0].request.headers
