"""commentguard - run the comment-checker binary from AI agent hooks.

Finds the platform-specific checker (installed package, Homebrew or the
download cache), fetches it on first use, and maps its exit code to a
CheckResult. Failures never block the caller: they read as "clean".
"""

from __future__ import annotations

from commentguard.checker import CommentChecker, get_checker, reset_checker, set_checker
from commentguard.core.models import CheckResult, EditPair, HookInput, ToolInput

__version__ = "0.3.0"

__all__ = [
    "__version__",
    "CommentChecker",
    "get_checker",
    "set_checker",
    "reset_checker",
    "CheckResult",
    "EditPair",
    "HookInput",
    "ToolInput",
]
