"""
Optional cross-process lock around binary acquisition.

By default the launcher does not coordinate concurrent first runs: two
launchers racing on an empty cache both download and extract the same
archive. Enabling the lock (EC_LAUNCHER_LOCK=1) serializes the cache-miss
path with a `filelock` lock file inside the cache directory.

Usage:
    from ec_launcher.core.locking import acquisition_lock

    with acquisition_lock(paths.base, "ec-linux-amd64", timeout=300):
        # Download and extract
        pass
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

from .exceptions import AcquisitionLocked

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 300


def lock_path_for(base: Path, name: str) -> Path:
    """Return the lock file path for an artifact."""
    safe_name = name.replace("/", "-").replace("\\", "-").replace(":", "-")
    return Path(base) / f".{safe_name}.lock"


@contextmanager
def acquisition_lock(base: Path, name: str, timeout: float = DEFAULT_LOCK_TIMEOUT):
    """
    Acquire the lock for downloading and extracting an artifact.

    Args:
        base: Cache base directory (must exist)
        name: Artifact name
        timeout: Maximum wait time in seconds (default: 300 for long downloads)

    Yields:
        None

    Raises:
        AcquisitionLocked: If lock can't be acquired within timeout
    """
    lock_path = lock_path_for(base, name)
    lock = FileLock(lock_path, timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired acquisition lock: {lock_path}")
            yield
            logger.debug(f"Released acquisition lock: {lock_path}")
    except LockTimeout as e:
        raise AcquisitionLocked(
            f"Could not acquire lock for {name} after {timeout}s. "
            "Another launcher may be downloading this binary."
        ) from e


__all__ = ["DEFAULT_LOCK_TIMEOUT", "lock_path_for", "acquisition_lock"]
