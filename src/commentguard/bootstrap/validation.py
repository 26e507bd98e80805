"""Binary validation for candidate checker locations."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Optional


class ToolStatus(str, Enum):
    """Status of a tool binary."""

    PRESENT = "present"
    MISSING = "missing"
    NOT_EXECUTABLE = "not_executable"


def validate_binary(path: Optional[Path]) -> ToolStatus:
    """Validate a single binary file.

    Never raises: filesystem errors count as a missing binary.

    Args:
        path: Path to the binary file.

    Returns:
        ToolStatus indicating whether the binary is present and executable.
    """
    if path is None:
        return ToolStatus.MISSING

    try:
        if not path.is_file():
            return ToolStatus.MISSING
        if not os.access(path, os.X_OK):
            return ToolStatus.NOT_EXECUTABLE
    except (OSError, ValueError):
        return ToolStatus.MISSING

    return ToolStatus.PRESENT


def binary_exists(path: Optional[Path]) -> bool:
    """True if path points at an existing regular file."""
    return validate_binary(path) != ToolStatus.MISSING
