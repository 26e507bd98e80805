"""Shared fixtures for commentguard tests."""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Callable, Optional

import pytest

import commentguard.core.logging as cg_logging
from commentguard.bootstrap.platform import PlatformInfo
from commentguard.checker import reset_checker


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep tests away from the real home directory and env toggles."""
    monkeypatch.setenv("COMMENTGUARD_HOME", str(tmp_path / "cg-home"))
    monkeypatch.delenv("COMMENT_CHECKER_BINARY", raising=False)
    monkeypatch.delenv("COMMENT_CHECKER_DEBUG", raising=False)
    yield
    reset_checker()
    cg_logging.disable_debug_channel()
    root = logging.getLogger(cg_logging.ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.NOTSET)
    root.propagate = True
    cg_logging._stderr_handler = None


@pytest.fixture
def linux_x64() -> PlatformInfo:
    return PlatformInfo(os="linux", arch="x64")


@pytest.fixture
def make_checker(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a fake comment-checker shell script.

    The script consumes stdin (or copies it to ``capture``), optionally
    writes ``stderr`` and exits with ``exit_code``.
    """

    def _make(
        exit_code: int = 0,
        stderr: str = "",
        directory: Optional[Path] = None,
        name: str = "comment-checker",
        capture: Optional[Path] = None,
        sleep: Optional[float] = None,
        raw_stderr: Optional[str] = None,
    ) -> Path:
        target_dir = directory or (tmp_path / "fake-bin")
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / name

        lines = ["#!/bin/sh"]
        if capture is not None:
            lines.append(f"cat > {shlex.quote(str(capture))}")
        else:
            lines.append("cat > /dev/null")
        if stderr:
            lines.append(f"printf '%s' {shlex.quote(stderr)} >&2")
        if raw_stderr is not None:
            lines.append(f"printf '{raw_stderr}' >&2")
        if sleep is not None:
            lines.append(f"exec sleep {sleep}")
        lines.append(f"exit {exit_code}")

        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        path.chmod(0o755)
        return path

    return _make
