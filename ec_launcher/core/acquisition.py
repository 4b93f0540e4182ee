"""
Binary acquisition: make sure the delegate binary is present in the cache.

On a cache hit nothing is downloaded or written. On a cache miss the release
archive is downloaded, extracted into a staging directory inside the cache
base, moved into place and deleted. The miss path is all-or-nothing: either
a complete executable binary ends up at its cache path or an AcquisitionError
is raised and the cache path is left untouched.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .directory import CachePaths, ensure_cache_dir
from .download import download_file
from .exceptions import UnpackFailed
from .filesystem import (
    extract_tar_gz,
    is_executable,
    make_executable,
    staging_directory,
)
from .locking import DEFAULT_LOCK_TIMEOUT, acquisition_lock

logger = logging.getLogger(__name__)


def is_cached(paths: CachePaths) -> bool:
    """Check whether the delegate binary is already a regular file in the cache."""
    return paths.binary_path.is_file()


def ensure_cached(
    paths: CachePaths,
    url: str,
    timeout: Optional[float] = None,
    lock: bool = False,
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
) -> bool:
    """
    Ensure the delegate binary exists at paths.binary_path.

    Args:
        paths: Cache paths for the artifact
        url: Download URL of the release archive
        timeout: Download timeout in seconds (None waits indefinitely)
        lock: Serialize the cache-miss path with a lock file
        lock_timeout: Maximum wait for the lock in seconds

    Returns:
        True on cache hit, False if the binary was downloaded

    Raises:
        UnresolvableBasePath: If the cache directory cannot be created
        DownloadFailed: If the archive cannot be downloaded
        UnpackFailed: If the archive cannot be extracted or lacks the binary
        AcquisitionLocked: If the lock cannot be acquired within lock_timeout
    """
    if is_cached(paths):
        logger.debug(f"Cache hit: {paths.binary_path}")
        return True

    logger.debug(f"Cache miss: {paths.binary_path}")
    ensure_cache_dir(paths.base)

    if not lock:
        _acquire(paths, url, timeout)
        return False

    with acquisition_lock(paths.base, paths.binary_path.name, lock_timeout):
        # Another launcher may have finished while we waited
        if is_cached(paths):
            logger.debug(f"Binary appeared while waiting for lock: {paths.binary_path}")
            return True
        _acquire(paths, url, timeout)
    return False


def _acquire(paths: CachePaths, url: str, timeout: Optional[float]) -> None:
    """Download the archive and install its contents from a staging directory."""
    download_file(url, paths.archive_path, timeout=timeout)

    prefix = f".{paths.binary_path.name}.staging-"
    try:
        with staging_directory(paths.base, prefix=prefix) as staging:
            extract_tar_gz(paths.archive_path, staging)
            _install(paths, staging)
    except OSError as e:
        raise UnpackFailed(
            paths.archive_path, f"cannot create staging directory: {e}"
        ) from e
    finally:
        _remove_archive(paths.archive_path)

    logger.info(f"Installed {paths.binary_path}")


def _install(paths: CachePaths, staging: Path) -> None:
    """
    Move extracted files from staging into the cache base.

    The binary is checked and marked executable while still staged and is
    moved last, so a cache hit never sees a partial binary.
    """
    staged_binary = staging / paths.binary_path.relative_to(paths.base)

    if not staged_binary.is_file() or staged_binary.is_symlink():
        raise UnpackFailed(
            paths.archive_path,
            f"archive does not contain {paths.binary_path.relative_to(paths.base)}",
        )

    try:
        make_executable(staged_binary)
    except OSError as e:
        raise UnpackFailed(
            paths.archive_path, f"cannot mark {staged_binary.name} executable: {e}"
        ) from e

    if not is_executable(staged_binary):
        raise UnpackFailed(
            paths.archive_path, f"{staged_binary.name} is not executable"
        )

    try:
        for source in sorted(staging.rglob("*")):
            if source == staged_binary:
                continue
            if source.is_dir() and not source.is_symlink():
                continue
            target = paths.base / source.relative_to(staging)
            target.parent.mkdir(parents=True, exist_ok=True)
            os.replace(source, target)

        paths.bin_dir.mkdir(parents=True, exist_ok=True)
        os.replace(staged_binary, paths.binary_path)
    except OSError as e:
        raise UnpackFailed(
            paths.archive_path, f"cannot install {paths.binary_path}: {e}"
        ) from e


def _remove_archive(archive_path: Path) -> None:
    """Delete the downloaded archive, warning if it cannot be removed."""
    try:
        archive_path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Failed to remove archive {archive_path}: {e}")


__all__ = ["is_cached", "ensure_cached"]
