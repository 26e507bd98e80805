"""Path management for the commentguard home directory.

Handles the ~/.commentguard directory structure and path resolution.
Downloaded checker binaries live under ~/.commentguard/bin/{tool}/{version}/.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".commentguard"

# Environment variable to override home directory
COMMENTGUARD_HOME_ENV = "COMMENTGUARD_HOME"


def get_commentguard_home() -> Path:
    """Get the commentguard home directory path.

    Resolution order:
    1. COMMENTGUARD_HOME environment variable (if set)
    2. ~/.commentguard (default)

    Returns:
        Path to the commentguard home directory.
    """
    env_home = os.environ.get(COMMENTGUARD_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / DEFAULT_HOME_DIR_NAME


@dataclass(frozen=True)
class CommentGuardPaths:
    """Manages paths within the commentguard home directory.

    Directory structure:
        ~/.commentguard/
            bin/
                comment-checker/{version}/comment-checker  - downloaded checker
            config/
                config.yml                                 - global configuration
    """

    home: Path

    _BIN_DIR: ClassVar[str] = "bin"
    _CONFIG_DIR: ClassVar[str] = "config"

    @classmethod
    def default(cls) -> "CommentGuardPaths":
        """Create paths from the default commentguard home."""
        return cls(get_commentguard_home())

    @property
    def bin_dir(self) -> Path:
        """Directory containing downloaded tool binaries."""
        return self.home / self._BIN_DIR

    @property
    def config_dir(self) -> Path:
        """Directory for the global configuration file."""
        return self.home / self._CONFIG_DIR

    def tool_bin_dir(self, tool_name: str, version: str) -> Path:
        """Get the binary directory for a specific tool version.

        Args:
            tool_name: Name of the tool (e.g., 'comment-checker').
            version: Version string.

        Returns:
            Path to the tool's version-specific binary directory.
        """
        return self.bin_dir / tool_name / version
