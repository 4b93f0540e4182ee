"""
Unit tests for download module.

Tests download functionality with mocked network requests.
"""

import pytest
import requests
import responses

from ec_launcher.core.download import download_file
from ec_launcher.core.exceptions import DownloadFailed

URL = "https://example.com/2.0.3/ec-linux-amd64.tar.gz"


def leftover_files(directory):
    return sorted(p.name for p in directory.iterdir())


class TestDownloadFile:
    """Test download_file function."""

    @responses.activate
    def test_simple_download(self, tmp_path):
        """Test the body ends up at the destination."""
        content = b"archive bytes"
        destination = tmp_path / "ec-linux-amd64.tar.gz"
        responses.add(responses.GET, URL, body=content, status=200)

        result = download_file(URL, destination)

        assert result == destination
        assert destination.read_bytes() == content
        assert leftover_files(tmp_path) == ["ec-linux-amd64.tar.gz"]

    @responses.activate
    def test_replaces_stale_file(self, tmp_path):
        """Test a leftover archive from an earlier run is overwritten."""
        destination = tmp_path / "ec-linux-amd64.tar.gz"
        destination.write_bytes(b"partial")
        responses.add(responses.GET, URL, body=b"complete", status=200)

        download_file(URL, destination)

        assert destination.read_bytes() == b"complete"

    @responses.activate
    def test_http_error(self, tmp_path):
        """Test a 404 raises DownloadFailed and leaves nothing behind."""
        destination = tmp_path / "ec-linux-amd64.tar.gz"
        responses.add(responses.GET, URL, body=b"Not Found", status=404)

        with pytest.raises(DownloadFailed) as exc_info:
            download_file(URL, destination)

        assert exc_info.value.url == URL
        assert isinstance(exc_info.value.__cause__, requests.HTTPError)
        assert leftover_files(tmp_path) == []

    @responses.activate
    def test_connection_error(self, tmp_path):
        """Test transport failures are wrapped in DownloadFailed."""
        destination = tmp_path / "ec-linux-amd64.tar.gz"
        responses.add(
            responses.GET, URL, body=requests.ConnectionError("connection refused")
        )

        with pytest.raises(DownloadFailed, match="connection refused"):
            download_file(URL, destination)

        assert leftover_files(tmp_path) == []

    @responses.activate
    def test_single_request_no_retry(self, tmp_path):
        """Test a failed download is not retried."""
        responses.add(responses.GET, URL, status=500)

        with pytest.raises(DownloadFailed):
            download_file(URL, tmp_path / "archive.tar.gz")

        assert len(responses.calls) == 1

    @responses.activate
    def test_progress_callback(self, tmp_path):
        """Test progress is reported with the content length."""
        content = b"x" * 20000
        responses.add(
            responses.GET,
            URL,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )
        progress = []

        download_file(
            URL,
            tmp_path / "archive.tar.gz",
            progress_callback=lambda done, total: progress.append((done, total)),
        )

        assert progress[-1] == (len(content), len(content))

    def test_missing_directory(self, tmp_path):
        """Test an unwritable destination raises DownloadFailed."""
        destination = tmp_path / "missing" / "archive.tar.gz"

        with pytest.raises(DownloadFailed, match="cannot create"):
            download_file(URL, destination)

    def test_empty_url(self, tmp_path):
        """Test empty URL raises ValueError."""
        with pytest.raises(ValueError, match="URL cannot be empty"):
            download_file("", tmp_path / "archive.tar.gz")
