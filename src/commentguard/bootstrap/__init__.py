"""
Bootstrap module for comment-checker binary management.

This module handles:
- Platform detection (OS + architecture)
- Home directory management (~/.commentguard/)
- Binary validation utilities
- Lazy download of the checker binary
"""

from commentguard.bootstrap.platform import get_platform_info, PlatformInfo
from commentguard.bootstrap.paths import get_commentguard_home, CommentGuardPaths
from commentguard.bootstrap.validation import validate_binary, ToolStatus
from commentguard.bootstrap.download import BinaryAcquirer, CheckerDownloader, DownloadError

__all__ = [
    "get_platform_info",
    "PlatformInfo",
    "get_commentguard_home",
    "CommentGuardPaths",
    "validate_binary",
    "ToolStatus",
    "BinaryAcquirer",
    "CheckerDownloader",
    "DownloadError",
]
