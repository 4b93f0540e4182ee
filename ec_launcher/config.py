"""
Launcher configuration.

Process-wide inputs (pinned version, argument list, running executable,
environment overrides) are collected once into a LauncherConfig and passed
explicitly into the pipeline, so every stage can be tested with injected
values.

Environment variables:
    EC_LAUNCHER_HOME          Override the cache base directory
    EC_LAUNCHER_CACHE_POLICY  'user-cache' (default) or 'executable-dir'
    EC_LAUNCHER_BASE_URL      Override the release host base URL
    EC_LAUNCHER_LOCK          '1', 'true', 'yes' or 'on' enables the acquisition lock
    EC_LAUNCHER_TIMEOUT       Download timeout in seconds
    EC_LAUNCHER_LOG_LEVEL     Logging level name (default: WARNING)
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from packaging.version import InvalidVersion, Version

from .core.directory import EC_LAUNCHER_HOME_ENV, CachePolicy
from .core.exceptions import ConfigurationError
from .core.naming import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)

# Release of editorconfig-checker this launcher is built to fetch
PINNED_VERSION = "2.0.3"

CACHE_POLICY_ENV = "EC_LAUNCHER_CACHE_POLICY"
BASE_URL_ENV = "EC_LAUNCHER_BASE_URL"
LOCK_ENV = "EC_LAUNCHER_LOCK"
TIMEOUT_ENV = "EC_LAUNCHER_TIMEOUT"
LOG_LEVEL_ENV = "EC_LAUNCHER_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "WARNING"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("", "0", "false", "no", "off")


@dataclass
class LauncherConfig:
    """
    Inputs of one launcher run.

    Attributes:
        version: Pinned release version
        args: Arguments forwarded to the delegate (program name excluded)
        executable: Path of the running executable (for the executable-dir policy)
        base_url: Release host base URL
        cache_policy: Where the cache base directory lives
        cache_home: Explicit cache base directory, overrides the policy
        lock: Serialize cache misses with a lock file
        download_timeout: Download timeout in seconds, None waits indefinitely
        log_level: Logging level name
    """

    version: str = PINNED_VERSION
    args: List[str] = field(default_factory=list)
    executable: Optional[Path] = None
    base_url: str = DEFAULT_BASE_URL
    cache_policy: CachePolicy = CachePolicy.USER_CACHE
    cache_home: Optional[Path] = None
    lock: bool = False
    download_timeout: Optional[float] = None
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        validate_version(self.version)
        if not self.base_url:
            raise ConfigurationError("Release base URL cannot be empty")
        if self.download_timeout is not None and self.download_timeout <= 0:
            raise ConfigurationError(
                f"Download timeout must be positive, got {self.download_timeout}"
            )

    @classmethod
    def from_environment(
        cls,
        argv: Optional[Sequence[str]] = None,
        environ: Optional[Mapping[str, str]] = None,
        version: str = PINNED_VERSION,
    ) -> "LauncherConfig":
        """
        Build configuration from the process arguments and environment.

        Args:
            argv: Full argument vector including program name (default: sys.argv)
            environ: Environment mapping (default: os.environ)
            version: Pinned release version

        Returns:
            LauncherConfig instance

        Raises:
            ConfigurationError: If an environment value is invalid
        """
        if argv is None:
            argv = sys.argv
        if environ is None:
            environ = os.environ

        cache_home = environ.get(EC_LAUNCHER_HOME_ENV)

        return cls(
            version=version,
            args=list(argv[1:]),
            executable=_running_executable(argv),
            base_url=environ.get(BASE_URL_ENV) or DEFAULT_BASE_URL,
            cache_policy=_parse_cache_policy(environ.get(CACHE_POLICY_ENV)),
            cache_home=Path(cache_home) if cache_home else None,
            lock=_parse_bool(LOCK_ENV, environ.get(LOCK_ENV)),
            download_timeout=_parse_timeout(environ.get(TIMEOUT_ENV)),
            log_level=_parse_log_level(environ.get(LOG_LEVEL_ENV)),
        )


def validate_version(version: str) -> Version:
    """
    Check that the pinned version is a valid release version.

    Raises:
        ConfigurationError: If the version cannot be parsed
    """
    try:
        return Version(version)
    except (InvalidVersion, TypeError) as e:
        raise ConfigurationError(f"Invalid pinned version {version!r}: {e}") from e


def _running_executable(argv: Sequence[str]) -> Optional[Path]:
    """Locate the running launcher: the console script if known, else the interpreter."""
    if argv:
        program = Path(argv[0])
        if program.is_file():
            return program
    if sys.executable:
        return Path(sys.executable)
    return None


def _parse_cache_policy(value: Optional[str]) -> CachePolicy:
    if not value:
        return CachePolicy.USER_CACHE
    try:
        return CachePolicy(value.strip().lower())
    except ValueError:
        choices = ", ".join(policy.value for policy in CachePolicy)
        raise ConfigurationError(
            f"Invalid {CACHE_POLICY_ENV} {value!r}, expected one of: {choices}"
        ) from None


def _parse_bool(name: str, value: Optional[str]) -> bool:
    if value is None:
        return False
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: {value!r}")


def _parse_timeout(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(
            f"Invalid {TIMEOUT_ENV} {value!r}, expected seconds"
        ) from None


def _parse_log_level(value: Optional[str]) -> str:
    if not value:
        return DEFAULT_LOG_LEVEL
    level = value.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"Invalid {LOG_LEVEL_ENV} {value!r}")
    return level
