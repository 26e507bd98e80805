"""Platform detection for checker binary selection.

Platform keys use the "{os}-{arch}" form the checker packages are published
under, e.g. "darwin-arm64", "linux-x64" or "win32-x64".
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass
from typing import Dict, Optional

_OS_ALIASES: Dict[str, str] = {
    "darwin": "darwin",
    "linux": "linux",
    "win32": "win32",
    "cygwin": "win32",
}

_ARCH_ALIASES: Dict[str, str] = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "arm64": "arm64",
    "aarch64": "arm64",
}

# Platform keys that have a published checker build
SUPPORTED_PLATFORMS = frozenset(
    {"darwin-arm64", "darwin-x64", "linux-arm64", "linux-x64", "win32-x64"}
)


@dataclass(frozen=True)
class PlatformInfo:
    """Operating system and CPU architecture of the running interpreter."""

    os: str
    arch: str

    @property
    def key(self) -> str:
        """Platform key, e.g. 'darwin-arm64'."""
        return f"{self.os}-{self.arch}"

    @property
    def is_windows(self) -> bool:
        return self.os == "win32"

    @property
    def is_macos(self) -> bool:
        return self.os == "darwin"

    @property
    def is_supported(self) -> bool:
        """Whether a prebuilt checker exists for this platform."""
        return self.key in SUPPORTED_PLATFORMS


def normalize_os(value: str) -> str:
    value = value.lower()
    for prefix, name in _OS_ALIASES.items():
        if value.startswith(prefix):
            return name
    return value


def normalize_arch(value: str) -> str:
    value = value.lower()
    return _ARCH_ALIASES.get(value, value)


def get_platform_info(
    system: Optional[str] = None,
    machine: Optional[str] = None,
) -> PlatformInfo:
    """Detect the current platform.

    Unknown values are passed through lowercased rather than rejected, so
    callers can decide what an unsupported platform means for them.

    Args:
        system: Override for sys.platform (testing).
        machine: Override for platform.machine() (testing).

    Returns:
        PlatformInfo for the running interpreter.
    """
    os_name = normalize_os(system if system is not None else sys.platform)
    arch = normalize_arch(machine if machine is not None else platform.machine())
    return PlatformInfo(os=os_name, arch=arch)


def get_binary_name(tool_name: str, platform_info: Optional[PlatformInfo] = None) -> str:
    """File name of a tool executable on the given platform."""
    info = platform_info or get_platform_info()
    return f"{tool_name}.exe" if info.is_windows else tool_name
