"""
Centralized exception hierarchy for ec-launcher.

Every stage of the launch pipeline fails closed by raising one of the
exceptions below. The entry point catches LauncherError, reports it and
exits with a non-zero status.
"""

from pathlib import Path


# ============================================================================
# Base Exceptions
# ============================================================================


class LauncherError(Exception):
    """Base exception for all ec-launcher errors."""

    pass


class ConfigurationError(LauncherError):
    """Raised when the launcher configuration is invalid."""

    pass


# ============================================================================
# Platform Exceptions
# ============================================================================


class PlatformError(LauncherError):
    """Base exception for platform identification errors."""

    pass


class UnrecognizedPlatform(PlatformError):
    """Raised when the host operating system name is not in the alias table."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Cannot parse Operating System Name ({name})")


class UnrecognizedArchitecture(PlatformError):
    """Raised when the host machine architecture is not in the alias table."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Cannot parse System Architecture ({name})")


# ============================================================================
# Cache Exceptions
# ============================================================================


class CacheError(LauncherError):
    """Base exception for cache location errors."""

    pass


class UnresolvableBasePath(CacheError):
    """Raised when no cache base directory can be determined."""

    pass


class AcquisitionLocked(CacheError):
    """Raised when the acquisition lock cannot be acquired within timeout."""

    pass


# ============================================================================
# Acquisition Exceptions
# ============================================================================


class AcquisitionError(LauncherError):
    """Base exception for download and unpack errors."""

    pass


class DownloadFailed(AcquisitionError):
    """Raised when the release artifact cannot be downloaded."""

    def __init__(self, url: str, reason: object = None):
        self.url = url
        msg = f"Error downloading the file {url}"
        if reason is not None:
            msg += f" ({reason})"
        super().__init__(msg)


class UnpackFailed(AcquisitionError):
    """Raised when the downloaded archive cannot be extracted."""

    def __init__(self, archive: Path, reason: object = None):
        self.archive = archive
        msg = f"Failed to unpack {archive}"
        if reason is not None:
            msg += f": {reason}"
        super().__init__(msg)


# ============================================================================
# Delegate Exceptions
# ============================================================================


class DelegateError(LauncherError):
    """Base exception for delegate binary errors."""

    pass


class ExecutionFailed(DelegateError):
    """Raised when the delegate binary cannot be spawned."""

    def __init__(self, binary: Path, reason: object = None):
        self.binary = binary
        msg = f"Failed to run {binary}"
        if reason is not None:
            msg += f": {reason}"
        super().__init__(msg)


class OutputDecodingFailed(DelegateError):
    """Raised when the delegate's standard output is not valid UTF-8."""

    def __init__(self, binary: Path, reason: object = None):
        self.binary = binary
        msg = f"Encoding error in output of {binary}"
        if reason is not None:
            msg += f" ({reason})"
        super().__init__(msg)
