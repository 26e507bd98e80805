"""Configuration data models for commentguard.

Defines typed configuration classes that represent .commentguard.yml structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from commentguard.bootstrap.download import DEFAULT_BASE_URL, DEFAULT_VERSION

# Seconds the checker may run before it is killed
DEFAULT_CHECK_TIMEOUT = 30.0


@dataclass
class CheckerConfig:
    """How the checker binary is found and run."""

    binary_path: Optional[Path] = None  # Explicit override, searched first
    timeout: Optional[float] = DEFAULT_CHECK_TIMEOUT  # None = wait indefinitely


@dataclass
class DownloadConfig:
    """Lazy download of the checker binary."""

    enabled: bool = True
    version: str = DEFAULT_VERSION
    base_url: str = DEFAULT_BASE_URL


@dataclass
class ResolutionConfig:
    """Policy for repeated resolution attempts."""

    # Seconds to wait after a failed attempt before searching/downloading
    # again. 0 retries on the next call.
    retry_after: float = 0.0


@dataclass
class CommentGuardConfig:
    """Complete commentguard configuration.

    Example .commentguard.yml:
        checker:
          timeout: 10
        download:
          enabled: false
        resolution:
          retry_after: 300
    """

    checker: CheckerConfig = field(default_factory=CheckerConfig)
    download: DownloadConfig = field(default_factory=DownloadConfig)
    resolution: ResolutionConfig = field(default_factory=ResolutionConfig)
    debug: bool = False

    # Metadata (not from YAML, set by loader)
    _config_sources: List[str] = field(default_factory=list, repr=False)

    @property
    def sources(self) -> List[str]:
        return list(self._config_sources)
