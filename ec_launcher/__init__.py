"""
ec-launcher: fetch and run the editorconfig-checker release binary.

On first use the platform-specific release archive is downloaded into a
local cache and extracted; afterwards the cached binary is run directly.
"""

from .config import PINNED_VERSION, LauncherConfig
from .launcher import launch

__version__ = "0.1.0"

__all__ = ["PINNED_VERSION", "LauncherConfig", "launch", "__version__"]
