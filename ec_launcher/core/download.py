"""
Release archive download.

Downloads are streamed into a temporary file next to the destination and
renamed into place only once the whole body has been written, so a failed
download never leaves a file at the destination that looks complete.

There is no retry logic: a failed download fails the run.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from .exceptions import DownloadFailed

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def download_file(
    url: str,
    destination: Path,
    timeout: Optional[float] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> Path:
    """
    Download a file from URL to destination.

    Args:
        url: URL to download from
        destination: Local path to save the file
        timeout: Request timeout in seconds (None waits indefinitely)
        progress_callback: Optional callback(bytes_downloaded, total_bytes);
            total_bytes is 0 when the server sends no content-length

    Returns:
        Path to downloaded file

    Raises:
        DownloadFailed: On transport errors, non-success HTTP status, or
            failure to write the file

    Example:
        >>> download_file(
        ...     "https://example.com/2.0.3/ec-linux-amd64.tar.gz",
        ...     Path("cache/ec-linux-amd64.tar.gz"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    destination = Path(destination)
    logger.info(f"Downloading {url}")

    # Temp file in the destination directory keeps the rename on one filesystem
    try:
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=destination.parent, prefix=f".{destination.name}.", suffix=".part"
        )
    except OSError as e:
        raise DownloadFailed(url, f"cannot create {destination}: {e}") from e
    temp_path = Path(temp_path_str)

    try:
        with os.fdopen(temp_fd, "wb") as f:
            downloaded = _stream_to(url, f, timeout, progress_callback)
        temp_path.replace(destination)
    except RequestException as e:
        temp_path.unlink(missing_ok=True)
        raise DownloadFailed(url, e) from e
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        raise DownloadFailed(url, f"cannot write {destination}: {e}") from e
    except Exception:
        temp_path.unlink(missing_ok=True)
        raise

    logger.info(f"Download complete: {destination} ({downloaded} bytes)")
    return destination


def _stream_to(
    url: str,
    out,
    timeout: Optional[float],
    progress_callback: Optional[Callable[[int, int], None]],
) -> int:
    """Stream the response body of url into an open binary file."""
    with requests.get(url, stream=True, timeout=timeout, allow_redirects=True) as response:
        response.raise_for_status()

        content_length = response.headers.get("content-length")
        total_size = int(content_length) if content_length else 0

        downloaded = 0
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if chunk:
                out.write(chunk)
                downloaded += len(chunk)
                if progress_callback:
                    progress_callback(downloaded, total_size)

    return downloaded


__all__ = ["download_file"]
