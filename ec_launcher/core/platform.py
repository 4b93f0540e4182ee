"""
Platform identification for ec-launcher.

This module maps the host's reported operating system name and machine
architecture onto the closed set of platforms editorconfig-checker publishes
release binaries for.

Features:
- Case-insensitive matching with recognized aliases ('macos' -> darwin,
  'x86_64' -> amd64)
- Canonical lowercase tags used to build release artifact names
- No guessed defaults: unknown names raise immediately

Usage:
    from ec_launcher.core.platform import detect_platform, identify_platform

    os_type, arch = detect_platform()
    print(f"{os_type.tag}-{arch.tag}")

    os_type, arch = identify_platform("Linux", "x86_64")
"""

import logging
import platform
from enum import Enum
from typing import Dict, Optional, Tuple

from .exceptions import UnrecognizedArchitecture, UnrecognizedPlatform

logger = logging.getLogger(__name__)


class OperatingSystem(Enum):
    """Operating systems with published release binaries."""

    DARWIN = "darwin"
    DRAGONFLY = "dragonfly"
    FREEBSD = "freebsd"
    LINUX = "linux"
    NETBSD = "netbsd"
    OPENBSD = "openbsd"
    PLAN9 = "plan9"
    SOLARIS = "solaris"
    WINDOWS = "windows"

    @property
    def tag(self) -> str:
        """Canonical lowercase tag used in artifact names."""
        return self.value

    @classmethod
    def parse(cls, name: str) -> "OperatingSystem":
        """
        Parse a host-reported OS name.

        Args:
            name: OS name as reported by the host (e.g. 'Linux', 'macOS')

        Returns:
            Matching OperatingSystem

        Raises:
            UnrecognizedPlatform: If the name is not a known alias

        Example:
            >>> OperatingSystem.parse("WiNdOwS")
            <OperatingSystem.WINDOWS: 'windows'>
        """
        found = _OS_ALIASES.get(name.strip().lower())
        if found is None:
            raise UnrecognizedPlatform(name)
        return found


class Architecture(Enum):
    """CPU architectures with published release binaries."""

    AMD64 = "amd64"
    I386 = "386"
    ARM64 = "arm64"
    ARM = "arm"

    @property
    def tag(self) -> str:
        """Canonical lowercase tag used in artifact names."""
        return self.value

    @classmethod
    def parse(cls, name: str) -> "Architecture":
        """
        Parse a host-reported machine architecture.

        Args:
            name: Architecture as reported by the host (e.g. 'x86_64', 'AMD64')

        Returns:
            Matching Architecture

        Raises:
            UnrecognizedArchitecture: If the name is not a known alias

        Example:
            >>> Architecture.parse("x86_64")
            <Architecture.AMD64: 'amd64'>
        """
        found = _ARCH_ALIASES.get(name.strip().lower())
        if found is None:
            raise UnrecognizedArchitecture(name)
        return found


# Adding a platform means extending the enum above and one of these tables.
_OS_ALIASES: Dict[str, OperatingSystem] = {
    **{member.tag: member for member in OperatingSystem},
    "macos": OperatingSystem.DARWIN,
    "osx": OperatingSystem.DARWIN,
    "sunos": OperatingSystem.SOLARIS,
    "win32": OperatingSystem.WINDOWS,
    "cygwin": OperatingSystem.WINDOWS,
    "msys": OperatingSystem.WINDOWS,
}

_ARCH_ALIASES: Dict[str, Architecture] = {
    **{member.tag: member for member in Architecture},
    "x86_64": Architecture.AMD64,
    "x64": Architecture.AMD64,
    "x86": Architecture.I386,
    "i386": Architecture.I386,
    "i486": Architecture.I386,
    "i586": Architecture.I386,
    "i686": Architecture.I386,
    "aarch64": Architecture.ARM64,
    "armv8": Architecture.ARM64,
    "armv8l": Architecture.ARM64,
    "armv6l": Architecture.ARM,
    "armv7l": Architecture.ARM,
}


def identify_platform(
    os_name: str, machine: str
) -> Tuple[OperatingSystem, Architecture]:
    """
    Identify the platform from host-reported OS and architecture strings.

    Args:
        os_name: Operating system name (e.g. 'Linux', 'Darwin', 'Windows')
        machine: Machine architecture (e.g. 'x86_64', 'arm64', 'i686')

    Returns:
        Tuple of (OperatingSystem, Architecture)

    Raises:
        UnrecognizedPlatform: If the OS name is unknown
        UnrecognizedArchitecture: If the architecture is unknown

    Example:
        >>> identify_platform("Linux", "x86_64")
        (<OperatingSystem.LINUX: 'linux'>, <Architecture.AMD64: 'amd64'>)
    """
    return OperatingSystem.parse(os_name), Architecture.parse(machine)


def detect_platform(
    os_name: Optional[str] = None, machine: Optional[str] = None
) -> Tuple[OperatingSystem, Architecture]:
    """
    Detect the current platform.

    Args:
        os_name: Override for platform.system()
        machine: Override for platform.machine()

    Returns:
        Tuple of (OperatingSystem, Architecture)
    """
    if os_name is None:
        os_name = platform.system()
    if machine is None:
        machine = platform.machine()

    logger.debug(f"Host reports system={os_name!r} machine={machine!r}")
    return identify_platform(os_name, machine)


__all__ = [
    "OperatingSystem",
    "Architecture",
    "identify_platform",
    "detect_platform",
]
