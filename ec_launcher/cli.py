"""
ec-launcher command-line entry point.

The launcher has no options of its own: every argument is forwarded to
editorconfig-checker. Diagnostics go to stderr; stdout carries only the
delegate's output.
"""

import logging
import sys
from typing import Mapping, Optional, Sequence

from .config import LauncherConfig
from .core.exceptions import ConfigurationError
from .core.executor import FALLBACK_EXIT_CODE
from .launcher import launch

logger = logging.getLogger(__name__)


def configure_logging(level_name: str) -> None:
    """
    Configure logging on stderr.

    Args:
        level_name: Logging level name (e.g. 'DEBUG', 'WARNING')
    """
    level = logging.getLevelName(level_name)
    if level <= logging.DEBUG:
        format_str = "%(levelname)s [%(name)s] %(message)s"
    else:
        format_str = "%(levelname)s: %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        stream=sys.stderr,
        force=True,  # Reconfigure if already configured
    )


def run(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """
    Build the configuration and run the launch pipeline.

    Args:
        argv: Full argument vector including program name (default: sys.argv)
        environ: Environment mapping (default: os.environ)

    Returns:
        Exit code for the launcher process
    """
    try:
        config = LauncherConfig.from_environment(argv, environ)
    except ConfigurationError as e:
        configure_logging("WARNING")
        logger.error(str(e))
        return FALLBACK_EXIT_CODE

    configure_logging(config.log_level)
    return launch(config)


def main():
    """Main entry point for the ec console script."""
    sys.exit(run())


if __name__ == "__main__":
    main()
