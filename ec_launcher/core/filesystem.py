"""
File system utilities for ec-launcher.

This module provides:
- gzip-compressed tar extraction with directory traversal protection
- Link member validation (no absolute or escaping link targets)
- Staging directories for installing extracted files in one step
- Executable permission handling for extracted binaries
"""

import logging
import os
import shutil
import stat
import sys
import tarfile
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Union

from .exceptions import UnpackFailed

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to (under) parent directory.

    Example:
        >>> is_relative_to(Path("/cache/bin/ec"), Path("/cache"))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(archive_path: Path, member: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        UnpackFailed: If the member would be written outside destination
    """
    member_path = (destination / member).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise UnpackFailed(
            archive_path,
            f"archive member '{member}' attempts directory traversal",
        )


def _validate_link(
    archive_path: Path, member: tarfile.TarInfo, destination: Path
) -> None:
    """
    Validate the target of a symlink or hard link member.

    Symlink targets are relative to the member's directory, hard link targets
    to the archive root. Either must stay inside destination.

    Raises:
        UnpackFailed: If the link target is absolute or escapes destination
    """
    linkname = member.linkname
    if os.path.isabs(linkname) or linkname.startswith(("/", "\\")):
        raise UnpackFailed(
            archive_path,
            f"archive member '{member.name}' links to absolute path '{linkname}'",
        )

    if member.issym():
        target = (destination / member.name).parent / linkname
    else:
        target = destination / linkname

    if not is_relative_to(target.resolve(), destination.resolve()):
        raise UnpackFailed(
            archive_path,
            f"archive member '{member.name}' links outside the destination",
        )


def extract_tar_gz(
    archive_path: Union[str, Path], destination: Union[str, Path]
) -> List[str]:
    """
    Extract a .tar.gz archive into a destination directory.

    Relative paths inside the archive are preserved. All member paths and
    link targets are validated before anything is written.

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to

    Returns:
        Names of the extracted members

    Raises:
        UnpackFailed: If the archive is missing, corrupt, not a gzip tar
            stream, contains unsafe paths or links, or cannot be written out

    Example:
        >>> extract_tar_gz('cache/ec-linux-amd64.tar.gz', 'cache')
        ['bin/ec-linux-amd64']
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.is_file():
        raise UnpackFailed(archive_path, "archive not found")

    try:
        destination.mkdir(parents=True, exist_ok=True)
        with tarfile.open(archive_path, "r:gz") as tar:
            members = tar.getmembers()

            for member in members:
                _validate_archive_path(archive_path, member.name, destination)
                if member.issym() or member.islnk():
                    _validate_link(archive_path, member, destination)

            # Python 3.12+ also applies the 'data' extraction filter
            if sys.version_info >= (3, 12):
                tar.extractall(destination, filter="data")
            else:
                tar.extractall(destination)
    except UnpackFailed:
        raise
    except Exception as e:
        raise UnpackFailed(archive_path, e) from e

    names = [member.name for member in members]
    logger.debug(f"Extracted {len(names)} member(s) from {archive_path.name}")
    return names


# ============================================================================
# Staging Directories
# ============================================================================


@contextmanager
def staging_directory(
    parent: Union[str, Path], prefix: str = ".staging-"
) -> Iterator[Path]:
    """
    Context manager for a temporary directory inside parent.

    The directory lives on the same file system as parent, so files can be
    moved out of it with os.replace. It is removed on exit; a removal failure
    is logged as a warning.

    Args:
        parent: Directory to create the staging directory in
        prefix: Prefix for the staging directory name

    Yields:
        Path to the staging directory

    Example:
        >>> with staging_directory('cache') as staging:
        ...     extract_tar_gz('cache/ec-linux-amd64.tar.gz', staging)
    """
    staging = Path(tempfile.mkdtemp(prefix=prefix, dir=parent))

    try:
        yield staging
    finally:
        try:
            shutil.rmtree(staging)
        except OSError as e:
            logger.warning(f"Failed to remove staging directory {staging}: {e}")


# ============================================================================
# Permissions
# ============================================================================


def make_executable(path: Union[str, Path]) -> None:
    """
    Add execute permission for user, group and other (no-op on Windows).

    Args:
        path: File to mark executable
    """
    if IS_WINDOWS:
        return

    path = Path(path)
    mode = path.stat().st_mode
    wanted = mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH
    if mode != wanted:
        path.chmod(wanted)
        logger.debug(f"Marked executable: {path}")


def is_executable(path: Union[str, Path]) -> bool:
    """Check whether path is a regular file the current user may execute."""
    path = Path(path)
    if not path.is_file():
        return False
    if IS_WINDOWS:
        return True
    return os.access(path, os.X_OK)
