"""Synchronous search for an installed comment-checker binary.

Candidates, first hit wins:
0. Explicit override (config checker.binary_path or COMMENT_CHECKER_BINARY)
1. The primary comment_checker package (bin/ inside the package)
2. The legacy per-platform package, e.g. comment_checker_darwin_arm64
3. Homebrew locations (macOS only)
4. The download cache, queried without downloading
"""

from __future__ import annotations

import importlib.util
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from commentguard.bootstrap.platform import PlatformInfo, get_binary_name, get_platform_info
from commentguard.bootstrap.validation import ToolStatus, validate_binary
from commentguard.core.logging import get_logger

LOGGER = get_logger(__name__)

TOOL_NAME = "comment-checker"

PRIMARY_PACKAGE = "comment_checker"

# Legacy per-platform packages, keyed by "{os}-{arch}"
PLATFORM_PACKAGES: Dict[str, str] = {
    "darwin-arm64": "comment_checker_darwin_arm64",
    "darwin-x64": "comment_checker_darwin_x64",
    "linux-arm64": "comment_checker_linux_arm64",
    "linux-x64": "comment_checker_linux_x64",
    "win32-x64": "comment_checker_windows_x64",
}

HOMEBREW_PATHS = (
    Path("/opt/homebrew/bin/comment-checker"),
    Path("/usr/local/bin/comment-checker"),
)

BINARY_PATH_ENV = "COMMENT_CHECKER_BINARY"

PackageFinder = Callable[[str], Optional[Path]]
CacheLookup = Callable[[], Optional[Path]]


class CandidateKind(str, Enum):
    """Where a candidate location comes from."""

    EXPLICIT = "explicit"
    PACKAGE = "package"
    PLATFORM_PACKAGE = "platform_package"
    SYSTEM = "system"
    CACHE = "cache"


@dataclass(frozen=True)
class CandidateLocation:
    """One place the checker binary may live."""

    kind: CandidateKind
    path: Path
    label: str


def find_package_dir(package_name: str) -> Optional[Path]:
    """Locate an installed package's directory through the import system.

    Args:
        package_name: Importable package name.

    Returns:
        The package directory, or None if it is not installed.
    """
    try:
        spec = importlib.util.find_spec(package_name)
    except (ImportError, ValueError):
        return None
    if spec is None:
        return None
    locations = list(spec.submodule_search_locations or [])
    if locations:
        return Path(locations[0])
    if spec.origin and spec.origin not in ("built-in", "frozen"):
        return Path(spec.origin).parent
    return None


def get_platform_package_name(platform_info: PlatformInfo) -> Optional[str]:
    """Legacy platform package for this platform, or None if unsupported."""
    return PLATFORM_PACKAGES.get(platform_info.key)


class PathResolver:
    """Finds the checker binary on the local filesystem.

    locate() never raises and never touches the network. A candidate
    counts as found only if the binary file exists and is executable, so a
    package directory from a partial install is skipped.
    """

    def __init__(
        self,
        platform_info: Optional[PlatformInfo] = None,
        cache_lookup: Optional[CacheLookup] = None,
        explicit_path: Optional[Path] = None,
        package_finder: PackageFinder = find_package_dir,
        system_paths: Optional[Sequence[Path]] = None,
    ) -> None:
        self._platform = platform_info or get_platform_info()
        self._cache_lookup = cache_lookup
        self._explicit_path = explicit_path
        self._package_finder = package_finder
        self._system_paths = system_paths
        self._binary_name = get_binary_name(TOOL_NAME, self._platform)

    @property
    def binary_name(self) -> str:
        return self._binary_name

    def candidates(self) -> Iterator[CandidateLocation]:
        """Yield candidate locations lazily, in search order.

        Lookups that fail are skipped. Laziness keeps later lookups (the
        cache query in particular) from running once an earlier one hits.
        """
        explicit = self._explicit_path or _env_path(BINARY_PATH_ENV)
        if explicit is not None:
            yield CandidateLocation(CandidateKind.EXPLICIT, explicit, "configured path")

        package_dir = self._find_package(PRIMARY_PACKAGE)
        if package_dir is not None:
            yield CandidateLocation(
                CandidateKind.PACKAGE,
                package_dir / "bin" / self._binary_name,
                PRIMARY_PACKAGE,
            )

        platform_package = get_platform_package_name(self._platform)
        if platform_package is not None:
            platform_dir = self._find_package(platform_package)
            if platform_dir is not None:
                yield CandidateLocation(
                    CandidateKind.PLATFORM_PACKAGE,
                    platform_dir / "bin" / self._binary_name,
                    platform_package,
                )

        for system_path in self._get_system_paths():
            yield CandidateLocation(CandidateKind.SYSTEM, system_path, "homebrew")

        cached = self._query_cache()
        if cached is not None:
            yield CandidateLocation(CandidateKind.CACHE, cached, "download cache")

    def locate(self) -> Optional[Path]:
        """Return the first usable binary, or None."""
        try:
            for candidate in self.candidates():
                if validate_binary(candidate.path) == ToolStatus.PRESENT:
                    LOGGER.debug(f"found binary via {candidate.label}: {candidate.path}")
                    return candidate.path.absolute()
                LOGGER.debug(f"no binary at {candidate.path} ({candidate.kind.value})")
        except Exception as e:
            LOGGER.debug(f"candidate search failed: {e!r}")
            return None

        LOGGER.debug("no binary found in known locations")
        return None

    def describe(self) -> List[CandidateLocation]:
        """All candidate locations, for status output."""
        return list(self.candidates())

    def _get_system_paths(self) -> Sequence[Path]:
        if self._system_paths is not None:
            return self._system_paths
        if self._platform.is_macos:
            return HOMEBREW_PATHS
        return ()

    def _find_package(self, package_name: str) -> Optional[Path]:
        try:
            package_dir = self._package_finder(package_name)
        except Exception as e:
            LOGGER.debug(f"package lookup failed for {package_name}: {e!r}")
            return None
        if package_dir is None:
            LOGGER.debug(f"package not installed: {package_name}")
        return package_dir

    def _query_cache(self) -> Optional[Path]:
        if self._cache_lookup is None:
            return None
        try:
            return self._cache_lookup()
        except Exception as e:
            LOGGER.debug(f"cache lookup failed: {e!r}")
            return None


def _env_path(name: str) -> Optional[Path]:
    value = os.environ.get(name)
    if not value:
        return None
    try:
        return Path(value).expanduser()
    except RuntimeError as e:
        # Unknown ~user or no home directory
        LOGGER.debug(f"ignoring {name}={value!r}: {e}")
        return None
