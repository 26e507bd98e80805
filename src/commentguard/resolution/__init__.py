"""Locating the comment-checker binary.

PathResolver searches local candidates synchronously; ResolutionCoordinator
adds lazy download, memoization and single-flight semantics on top.
"""

from commentguard.resolution.coordinator import ResolutionCoordinator, ResolutionState
from commentguard.resolution.resolver import (
    CandidateKind,
    CandidateLocation,
    PathResolver,
    find_package_dir,
)

__all__ = [
    "ResolutionCoordinator",
    "ResolutionState",
    "CandidateKind",
    "CandidateLocation",
    "PathResolver",
    "find_package_dir",
]
