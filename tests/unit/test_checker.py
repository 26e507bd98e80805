"""Tests for the CommentChecker facade."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Optional

import pytest

from commentguard.bootstrap.download import BinaryAcquirer, CheckerDownloader
from commentguard.bootstrap.paths import CommentGuardPaths
from commentguard.checker import CommentChecker, get_checker, reset_checker, set_checker
from commentguard.config.models import CheckerConfig, CommentGuardConfig, DownloadConfig
from commentguard.core.models import CheckResult, HookInput, ToolInput
from commentguard.invoker import CheckerInvoker
from commentguard.resolution.coordinator import ResolutionCoordinator
from commentguard.resolution.resolver import PathResolver

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="fake checkers are POSIX shell scripts")


class ScriptAcquirer(BinaryAcquirer):
    """Acquirer that 'downloads' by writing a fake checker into a cache dir."""

    def __init__(self, install: Callable[[], Path]):
        self._install = install
        self._installed: Optional[Path] = None
        self.calls = 0

    async def acquire(self) -> Optional[Path]:
        self.calls += 1
        self._installed = self._install()
        return self._installed

    def get_cached_binary_path(self) -> Optional[Path]:
        return self._installed


def _payload() -> HookInput:
    return HookInput(
        session_id="s",
        tool_name="Edit",
        transcript_path="",
        cwd="/work",
        hook_event_name="PostToolUse",
        tool_input=ToolInput(file_path="/work/a.py", old_string="a", new_string="b  # set b"),
    )


def _build(acquirer: BinaryAcquirer, linux_x64) -> CommentChecker:
    resolver = PathResolver(
        platform_info=linux_x64,
        cache_lookup=acquirer.get_cached_binary_path,
        package_finder=lambda name: None,
        system_paths=(),
    )
    coordinator = ResolutionCoordinator(resolver, acquirer)
    return CommentChecker(coordinator, CheckerInvoker(timeout=10), resolver=resolver)


@posix_only
class TestEndToEnd:
    """Resolution, lazy acquisition and invocation together."""

    @pytest.mark.asyncio
    async def test_lazy_acquisition_then_run(self, tmp_path: Path, make_checker, linux_x64) -> None:
        acquirer = ScriptAcquirer(
            lambda: make_checker(exit_code=2, stderr="comment detected", directory=tmp_path / "cache")
        )
        checker = _build(acquirer, linux_x64)

        assert checker.is_available() is False
        assert await checker.ensure_available() is True
        assert checker.is_available() is True

        result = await checker.run(_payload())

        assert result == CheckResult(flagged=True, message="comment detected")
        assert acquirer.calls == 1

    @pytest.mark.asyncio
    async def test_check_resolves_before_running(self, tmp_path: Path, make_checker, linux_x64) -> None:
        acquirer = ScriptAcquirer(lambda: make_checker(exit_code=0, directory=tmp_path / "cache"))
        checker = _build(acquirer, linux_x64)

        assert await checker.check(_payload()) == CheckResult.clean()
        assert acquirer.calls == 1
        assert checker.resolve_sync() is not None

    @pytest.mark.asyncio
    async def test_run_never_acquires(self, tmp_path: Path, make_checker, linux_x64) -> None:
        acquirer = ScriptAcquirer(lambda: make_checker(exit_code=2, stderr="x"))
        checker = _build(acquirer, linux_x64)

        assert await checker.run(_payload()) == CheckResult.clean()
        assert acquirer.calls == 0

    @pytest.mark.asyncio
    async def test_run_with_explicit_path(self, make_checker, linux_x64) -> None:
        binary = make_checker(exit_code=2, stderr="flagged")
        checker = _build(ScriptAcquirer(lambda: binary), linux_x64)

        result = await checker.run(_payload(), path=binary)

        assert result.flagged is True


class TestFromConfig:
    """Tests for CommentChecker.from_config."""

    def test_wires_components(self, tmp_path: Path, linux_x64) -> None:
        config = CommentGuardConfig(
            checker=CheckerConfig(timeout=5.0),
            download=DownloadConfig(enabled=False, version="9.9.9"),
        )

        checker = CommentChecker.from_config(
            config, paths=CommentGuardPaths(tmp_path), platform_info=linux_x64
        )

        assert checker.invoker.timeout == 5.0
        assert isinstance(checker.downloader, CheckerDownloader)
        assert checker.downloader.enabled is False
        assert checker.downloader.binary_path == (
            tmp_path / "bin" / "comment-checker" / "9.9.9" / "comment-checker"
        )

    def test_explicit_binary_path(self, tmp_path: Path, make_checker, linux_x64) -> None:
        binary = make_checker()
        config = CommentGuardConfig(checker=CheckerConfig(binary_path=binary))

        checker = CommentChecker.from_config(
            config, paths=CommentGuardPaths(tmp_path), platform_info=linux_x64
        )

        assert checker.resolve_sync() == binary
        assert checker.is_available() is True

    def test_cached_download_is_found(self, tmp_path: Path, make_checker, linux_x64) -> None:
        paths = CommentGuardPaths(tmp_path / "home")
        config = CommentGuardConfig(download=DownloadConfig(version="1.0.0"))
        cached = make_checker(directory=paths.tool_bin_dir("comment-checker", "1.0.0"))

        checker = CommentChecker.from_config(config, paths=paths, platform_info=linux_x64)

        assert checker.resolve_sync() == cached

    @pytest.mark.asyncio
    async def test_disabled_download_resolves_to_none(self, tmp_path: Path, linux_x64) -> None:
        config = CommentGuardConfig(download=DownloadConfig(enabled=False))
        checker = CommentChecker.from_config(
            config, paths=CommentGuardPaths(tmp_path), platform_info=linux_x64
        )

        assert await checker.resolve_async() is None
        assert await checker.check(_payload()) == CheckResult.clean()


class TestDefaultChecker:
    """Tests for the process-wide checker."""

    def test_get_checker_is_cached(self) -> None:
        assert get_checker() is get_checker()

    def test_set_and_reset(self, linux_x64) -> None:
        custom = CommentChecker.from_config(platform_info=linux_x64)
        set_checker(custom)
        assert get_checker() is custom

        reset_checker()
        assert get_checker() is not custom
