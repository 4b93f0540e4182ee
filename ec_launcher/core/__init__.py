"""
Core functionality for ec-launcher.

This package contains the pipeline stages: platform identification,
artifact naming, cache location, acquisition and delegate execution.
"""

from .platform import (
    OperatingSystem,
    Architecture,
    identify_platform,
    detect_platform,
)

from .naming import (
    DEFAULT_BASE_URL,
    artifact_name,
    release_url,
    download_url,
)

from .directory import (
    CachePolicy,
    CachePaths,
    resolve_base,
    derive_paths,
    ensure_cache_dir,
)

from .acquisition import (
    is_cached,
    ensure_cached,
)

from .executor import (
    FALLBACK_EXIT_CODE,
    ExitOutcome,
    run_delegate,
    forward_output,
)

from .exceptions import (
    LauncherError,
    ConfigurationError,
    PlatformError,
    UnrecognizedPlatform,
    UnrecognizedArchitecture,
    CacheError,
    UnresolvableBasePath,
    AcquisitionLocked,
    AcquisitionError,
    DownloadFailed,
    UnpackFailed,
    DelegateError,
    ExecutionFailed,
    OutputDecodingFailed,
)

__all__ = [
    "OperatingSystem",
    "Architecture",
    "identify_platform",
    "detect_platform",
    "DEFAULT_BASE_URL",
    "artifact_name",
    "release_url",
    "download_url",
    "CachePolicy",
    "CachePaths",
    "resolve_base",
    "derive_paths",
    "ensure_cache_dir",
    "is_cached",
    "ensure_cached",
    "FALLBACK_EXIT_CODE",
    "ExitOutcome",
    "run_delegate",
    "forward_output",
    "LauncherError",
    "ConfigurationError",
    "PlatformError",
    "UnrecognizedPlatform",
    "UnrecognizedArchitecture",
    "CacheError",
    "UnresolvableBasePath",
    "AcquisitionLocked",
    "AcquisitionError",
    "DownloadFailed",
    "UnpackFailed",
    "DelegateError",
    "ExecutionFailed",
    "OutputDecodingFailed",
]
