"""
Release artifact naming.

Artifact names and download URLs are pure functions of the platform and the
pinned version, so they can be recomputed on every run.
"""

from .platform import Architecture, OperatingSystem

DEFAULT_BASE_URL = (
    "https://github.com/editorconfig-checker/editorconfig-checker/releases/download"
)

ARCHIVE_SUFFIX = ".tar.gz"


def artifact_name(os_type: OperatingSystem, arch: Architecture) -> str:
    """
    Build the artifact name for a platform.

    Example:
        >>> artifact_name(OperatingSystem.PLAN9, Architecture.AMD64)
        'ec-plan9-amd64'
    """
    return f"ec-{os_type.tag}-{arch.tag}"


def release_url(base_url: str, version: str) -> str:
    """Return the release directory URL for a version."""
    return f"{base_url.rstrip('/')}/{version}"


def download_url(base_url: str, version: str, name: str) -> str:
    """
    Build the download URL of a release archive.

    Args:
        base_url: Release host base URL
        version: Pinned release version
        name: Artifact name from artifact_name()

    Returns:
        URL of the form <base_url>/<version>/<name>.tar.gz

    Example:
        >>> download_url("https://example.com", "2.0.3", "ec-linux-amd64")
        'https://example.com/2.0.3/ec-linux-amd64.tar.gz'
    """
    return f"{release_url(base_url, version)}/{name}{ARCHIVE_SUFFIX}"
