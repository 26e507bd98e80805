"""Pinned versions of externally built tools.

The comment-checker release to download is pinned in pyproject.toml under
[tool.commentguard.tools]. Installed wheels do not ship pyproject.toml, so
a fallback table mirrors it.
"""

from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

# Keep in sync with [tool.commentguard.tools] in pyproject.toml
_FALLBACK_VERSIONS: Dict[str, str] = {
    "comment-checker": "0.5.3",
}

_PYPROJECT = Path(__file__).resolve().parents[3] / "pyproject.toml"


@lru_cache(maxsize=1)
def _load_pinned_versions() -> Dict[str, str]:
    if not _PYPROJECT.is_file():
        return dict(_FALLBACK_VERSIONS)

    try:
        with open(_PYPROJECT, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return dict(_FALLBACK_VERSIONS)

    pinned = data.get("tool", {}).get("commentguard", {}).get("tools", {})
    return {**_FALLBACK_VERSIONS, **{str(k): str(v) for k, v in pinned.items()}}


def get_tool_version(tool_name: str, default: Optional[str] = None) -> str:
    """Pinned version of an external tool.

    Args:
        tool_name: Tool name as listed in [tool.commentguard.tools].
        default: Returned when the tool is not pinned.

    Raises:
        KeyError: If the tool is not pinned and no default is given.
    """
    pinned = _load_pinned_versions()
    if tool_name in pinned:
        return pinned[tool_name]
    if default is not None:
        return default
    raise KeyError(f"No pinned version for {tool_name!r} (known: {sorted(pinned)})")
