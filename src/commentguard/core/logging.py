"""Logging setup for commentguard.

All modules obtain their logger through get_logger(__name__) so that the
whole package hangs off the single "commentguard" logger. Two outputs
exist:
- stderr, configured by the CLI via configure_logging()
- the diagnostic file channel, enabled by COMMENT_CHECKER_DEBUG=1
"""

from __future__ import annotations

import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "commentguard"

# Environment toggle for the diagnostic file channel
DEBUG_ENV = "COMMENT_CHECKER_DEBUG"
DEBUG_FILE_NAME = "comment-checker-debug.log"

_STDERR_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
_DEBUG_FILE_FORMAT = "[%(asctime)s] [%(name)s] %(message)s"

_stderr_handler: Optional[logging.Handler] = None
_debug_handler: Optional[logging.Handler] = None


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the commentguard namespace.

    Args:
        name: Usually the calling module's __name__.

    Returns:
        Logger instance.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> None:
    """Configure stderr logging for CLI usage.

    Precedence: debug > verbose > quiet > default (warning).

    Args:
        debug: Log everything.
        verbose: Log info and above.
        quiet: Only log errors.
    """
    global _stderr_handler

    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if _stderr_handler is None:
        _stderr_handler = logging.StreamHandler(sys.stderr)
        _stderr_handler.setFormatter(logging.Formatter(_STDERR_FORMAT))
        root.addHandler(_stderr_handler)
    _stderr_handler.setLevel(level)

    # The logger itself must let DEBUG through when the file channel is on.
    root.setLevel(logging.DEBUG if _debug_handler is not None else level)
    root.propagate = False


def debug_channel_requested() -> bool:
    """Whether the environment asks for the diagnostic file channel."""
    return os.environ.get(DEBUG_ENV) == "1"


def get_debug_log_path() -> Path:
    """Path of the diagnostic log file (/tmp/comment-checker-debug.log on POSIX)."""
    return Path(tempfile.gettempdir()) / DEBUG_FILE_NAME


def enable_debug_channel(path: Optional[Path] = None) -> bool:
    """Attach the append-only diagnostic file handler.

    Idempotent. Failing to open the file leaves logging unchanged.

    Args:
        path: Override for the log file location.

    Returns:
        True if the channel is active after the call.
    """
    global _debug_handler

    if _debug_handler is not None:
        return True

    log_path = path or get_debug_log_path()
    try:
        handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    except OSError:
        return False

    handler.setFormatter(logging.Formatter(_DEBUG_FILE_FORMAT))
    handler.setLevel(logging.DEBUG)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    _debug_handler = handler
    return True


def disable_debug_channel() -> None:
    """Detach and close the diagnostic file handler, if any."""
    global _debug_handler

    if _debug_handler is None:
        return
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.removeHandler(_debug_handler)
    _debug_handler.close()
    _debug_handler = None
    if _stderr_handler is not None:
        root.setLevel(_stderr_handler.level)


def init_debug_channel_from_env() -> bool:
    """Enable the diagnostic channel when COMMENT_CHECKER_DEBUG=1."""
    if debug_channel_requested():
        return enable_debug_channel()
    return False
