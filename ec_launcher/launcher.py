"""
Launch pipeline.

Identifies the platform, locates the cache, acquires the delegate binary if
needed and runs it:

    Start -> Identified -> Located -> {CacheHit | Downloading -> Unpacked}
          -> Delegating -> Terminated

Any LauncherError moves straight to Terminated with a non-zero exit code.
Nothing is retried.

Usage:
    from ec_launcher.config import LauncherConfig
    from ec_launcher.launcher import launch

    exit_code = launch(LauncherConfig(args=["--version"]))
"""

import logging
from enum import Enum
from pathlib import Path
from typing import IO, Optional

from .config import LauncherConfig
from .core.acquisition import ensure_cached
from .core.directory import CachePaths, derive_paths, resolve_base
from .core.exceptions import LauncherError
from .core.executor import FALLBACK_EXIT_CODE, forward_output, run_delegate
from .core.naming import artifact_name, download_url
from .core.platform import OperatingSystem, detect_platform

logger = logging.getLogger(__name__)


class Stage(Enum):
    """Pipeline states, used for diagnostics."""

    START = "start"
    IDENTIFIED = "identified"
    LOCATED = "located"
    CACHE_HIT = "cache-hit"
    ACQUIRED = "acquired"
    DELEGATING = "delegating"
    TERMINATED = "terminated"


def _enter(stage: Stage) -> None:
    logger.debug(f"Pipeline stage: {stage.value}")


def locate(
    config: LauncherConfig,
    os_name: Optional[str] = None,
    machine: Optional[str] = None,
):
    """
    Resolve the cache paths and download URL for the current platform.

    Args:
        config: Launcher configuration
        os_name: Override for the host OS name
        machine: Override for the host architecture

    Returns:
        Tuple of (CachePaths, download URL)

    Raises:
        UnrecognizedPlatform: If the OS is not supported
        UnrecognizedArchitecture: If the architecture is not supported
        UnresolvableBasePath: If no cache base directory can be determined
    """
    os_type, arch = detect_platform(os_name, machine)
    name = artifact_name(os_type, arch)
    _enter(Stage.IDENTIFIED)

    if config.cache_home is not None:
        base = Path(config.cache_home)
    else:
        base = resolve_base(config.cache_policy, config.executable)

    suffix = ".exe" if os_type is OperatingSystem.WINDOWS else ""
    paths = derive_paths(base, name, executable_suffix=suffix)
    url = download_url(config.base_url, config.version, name)
    _enter(Stage.LOCATED)

    return paths, url


def launch(
    config: LauncherConfig,
    stdout: Optional[IO] = None,
    os_name: Optional[str] = None,
    machine: Optional[str] = None,
) -> int:
    """
    Run the whole pipeline and return the exit code for the launcher.

    Args:
        config: Launcher configuration
        stdout: Stream receiving the delegate's output (default: sys.stdout)
        os_name: Override for the host OS name
        machine: Override for the host architecture

    Returns:
        The delegate's exit code, or FALLBACK_EXIT_CODE if the launcher failed
    """
    _enter(Stage.START)

    try:
        paths, url = locate(config, os_name, machine)
        _acquire(config, paths, url)

        _enter(Stage.DELEGATING)
        outcome = run_delegate(paths.binary_path, config.args)
        forward_output(outcome, stdout)
    except LauncherError as e:
        logger.error(str(e))
        _enter(Stage.TERMINATED)
        return FALLBACK_EXIT_CODE

    _enter(Stage.TERMINATED)
    return outcome.exit_code


def _acquire(config: LauncherConfig, paths: CachePaths, url: str) -> None:
    cache_hit = ensure_cached(
        paths,
        url,
        timeout=config.download_timeout,
        lock=config.lock,
    )
    _enter(Stage.CACHE_HIT if cache_hit else Stage.ACQUIRED)


__all__ = ["Stage", "locate", "launch"]
