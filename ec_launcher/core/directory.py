"""
Cache directory resolution for ec-launcher.

This module decides where release archives are staged and where extracted
binaries are kept between runs.

Cache Policies:
    user-cache (default):
        EC_LAUNCHER_HOME if set, otherwise the platform cache home:
        - Windows: %LOCALAPPDATA%\\ec-launcher
        - Linux/macOS/BSD: $XDG_CACHE_HOME/ec-launcher or ~/.cache/ec-launcher

    executable-dir:
        The directory containing the running executable. Requires write
        access beside the executable.

Directory Structure (under the resolved base):
    - <artifact>.tar.gz  : Downloaded archive, removed after extraction
    - bin/<artifact>     : Extracted delegate binary

A single policy must be used consistently: switching policies between runs
moves the cache and the binary is downloaded again.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, Union

from .exceptions import UnresolvableBasePath
from .naming import ARCHIVE_SUFFIX

logger = logging.getLogger(__name__)

APP_DIR_NAME = "ec-launcher"

# Environment variable to override the cache base directory
EC_LAUNCHER_HOME_ENV = "EC_LAUNCHER_HOME"


class CachePolicy(Enum):
    """Where the cache base directory lives."""

    USER_CACHE = "user-cache"
    EXECUTABLE_DIR = "executable-dir"


@dataclass(frozen=True)
class CachePaths:
    """
    Filesystem locations for one artifact.

    Attributes:
        base: Cache base directory (extraction root)
        archive_path: Transient download location, <base>/<artifact>.tar.gz
        binary_path: Cached delegate binary, <base>/bin/<artifact>
    """

    base: Path
    archive_path: Path
    binary_path: Path

    @property
    def bin_dir(self) -> Path:
        """Directory containing the delegate binary."""
        return self.binary_path.parent


def get_user_cache_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the platform-conventional cache directory for ec-launcher.

    Args:
        environ: Environment mapping (default: os.environ)

    Returns:
        Path to the cache directory

    Raises:
        UnresolvableBasePath: If no home or cache directory can be determined
    """
    if environ is None:
        environ = os.environ

    override = environ.get(EC_LAUNCHER_HOME_ENV)
    if override:
        return Path(override)

    if os.name == "nt":  # Windows
        local_app_data = environ.get("LOCALAPPDATA")
        if not local_app_data:
            raise UnresolvableBasePath(
                "LOCALAPPDATA environment variable is not set. "
                "Cannot determine cache directory."
            )
        return Path(local_app_data) / APP_DIR_NAME

    xdg_cache = environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache) / APP_DIR_NAME

    try:
        home = Path.home()
    except (RuntimeError, KeyError) as e:
        raise UnresolvableBasePath(
            f"Cannot determine home directory for cache: {e}"
        ) from e
    return home / ".cache" / APP_DIR_NAME


def get_executable_dir(executable: Optional[Union[str, Path]]) -> Path:
    """
    Get the directory containing the running executable.

    Args:
        executable: Path of the running executable

    Returns:
        Parent directory of the executable

    Raises:
        UnresolvableBasePath: If the executable path is unknown or has no parent
    """
    if not executable:
        raise UnresolvableBasePath("Location of the running executable is unknown")

    path = Path(executable).resolve()
    parent = path.parent
    if parent == path:
        raise UnresolvableBasePath(f"Executable path has no parent directory: {path}")
    return parent


def resolve_base(
    policy: CachePolicy = CachePolicy.USER_CACHE,
    executable: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    """
    Resolve the cache base directory according to a policy.

    Args:
        policy: Cache location policy
        executable: Running executable (required for EXECUTABLE_DIR)
        environ: Environment mapping (default: os.environ)

    Returns:
        Cache base directory path (not created)

    Raises:
        UnresolvableBasePath: If the base cannot be determined

    Example:
        >>> resolve_base(CachePolicy.EXECUTABLE_DIR, "/opt/ec/launcher")
        PosixPath('/opt/ec')
    """
    if policy is CachePolicy.EXECUTABLE_DIR:
        base = get_executable_dir(executable)
    else:
        base = get_user_cache_dir(environ)

    logger.debug(f"Resolved cache base ({policy.value}): {base}")
    return base


def derive_paths(base: Path, name: str, executable_suffix: str = "") -> CachePaths:
    """
    Derive the archive and binary paths for an artifact.

    Args:
        base: Cache base directory
        name: Artifact name (e.g. 'ec-linux-amd64')
        executable_suffix: Suffix of the binary inside the archive ('.exe' on Windows)

    Returns:
        CachePaths for the artifact

    Example:
        >>> paths = derive_paths(Path('/cache'), 'ec-linux-amd64')
        >>> paths.binary_path
        PosixPath('/cache/bin/ec-linux-amd64')
    """
    base = Path(base)
    return CachePaths(
        base=base,
        archive_path=base / f"{name}{ARCHIVE_SUFFIX}",
        binary_path=base / "bin" / f"{name}{executable_suffix}",
    )


def ensure_cache_dir(base: Path) -> Path:
    """
    Create the cache base directory if it doesn't exist.

    Raises:
        UnresolvableBasePath: If the directory cannot be created
    """
    try:
        base.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise UnresolvableBasePath(
            f"Failed to create cache directory at {base}: {e}"
        ) from e
    return base


__all__ = [
    "APP_DIR_NAME",
    "EC_LAUNCHER_HOME_ENV",
    "CachePolicy",
    "CachePaths",
    "get_user_cache_dir",
    "get_executable_dir",
    "resolve_base",
    "derive_paths",
    "ensure_cache_dir",
]
