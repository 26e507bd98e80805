"""Tests for the local path resolver."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional
from unittest.mock import patch

import pytest

from commentguard.bootstrap.platform import PlatformInfo
from commentguard.resolution.coordinator import ResolutionCoordinator
from commentguard.resolution.resolver import (
    BINARY_PATH_ENV,
    HOMEBREW_PATHS,
    PRIMARY_PACKAGE,
    CandidateKind,
    PathResolver,
    find_package_dir,
    get_platform_package_name,
)


def _finder(packages: Dict[str, Path]):
    def find(name: str) -> Optional[Path]:
        return packages.get(name)

    return find


def _no_packages(name: str) -> Optional[Path]:
    return None


class TestGetPlatformPackageName:
    """Tests for get_platform_package_name."""

    @pytest.mark.parametrize(
        "os_name,arch,expected",
        [
            ("darwin", "arm64", "comment_checker_darwin_arm64"),
            ("darwin", "x64", "comment_checker_darwin_x64"),
            ("linux", "arm64", "comment_checker_linux_arm64"),
            ("linux", "x64", "comment_checker_linux_x64"),
            ("win32", "x64", "comment_checker_windows_x64"),
        ],
    )
    def test_supported_platforms(self, os_name: str, arch: str, expected: str) -> None:
        assert get_platform_package_name(PlatformInfo(os_name, arch)) == expected

    def test_unsupported_platform(self) -> None:
        assert get_platform_package_name(PlatformInfo("freebsd", "x64")) is None


class TestFindPackageDir:
    """Tests for find_package_dir."""

    def test_missing_package(self) -> None:
        assert find_package_dir("commentguard_no_such_package_xyz") is None

    def test_installed_package(self) -> None:
        package_dir = find_package_dir("commentguard")
        assert package_dir is not None
        assert (package_dir / "__init__.py").exists()


class TestLocate:
    """Tests for PathResolver.locate."""

    def test_primary_package_wins(self, tmp_path: Path, make_checker, linux_x64) -> None:
        primary = tmp_path / "primary"
        legacy = tmp_path / "legacy"
        expected = make_checker(directory=primary / "bin")
        make_checker(directory=legacy / "bin")
        resolver = PathResolver(
            platform_info=linux_x64,
            package_finder=_finder({
                PRIMARY_PACKAGE: primary,
                "comment_checker_linux_x64": legacy,
            }),
        )

        assert resolver.locate() == expected

    def test_partial_install_is_skipped(self, tmp_path: Path, make_checker, linux_x64) -> None:
        primary = tmp_path / "primary"
        (primary / "bin").mkdir(parents=True)
        legacy = tmp_path / "legacy"
        expected = make_checker(directory=legacy / "bin")
        resolver = PathResolver(
            platform_info=linux_x64,
            package_finder=_finder({
                PRIMARY_PACKAGE: primary,
                "comment_checker_linux_x64": legacy,
            }),
        )

        assert resolver.locate() == expected

    def test_unsupported_platform_skips_platform_package(self, tmp_path: Path, make_checker) -> None:
        legacy = tmp_path / "legacy"
        make_checker(directory=legacy / "bin")
        resolver = PathResolver(
            platform_info=PlatformInfo("freebsd", "x64"),
            package_finder=_finder({"comment_checker_linux_x64": legacy}),
        )

        assert resolver.locate() is None

    def test_system_paths(self, tmp_path: Path, make_checker, linux_x64) -> None:
        system = make_checker(directory=tmp_path / "brew")
        resolver = PathResolver(
            platform_info=linux_x64,
            package_finder=_no_packages,
            system_paths=[tmp_path / "missing" / "comment-checker", system],
        )

        assert resolver.locate() == system

    def test_cache_is_last(self, tmp_path: Path, make_checker, linux_x64) -> None:
        cached = make_checker(directory=tmp_path / "cache")
        resolver = PathResolver(
            platform_info=linux_x64,
            package_finder=_no_packages,
            cache_lookup=lambda: cached,
        )

        assert resolver.locate() == cached

    def test_cache_not_queried_after_hit(self, tmp_path: Path, make_checker, linux_x64) -> None:
        primary = tmp_path / "primary"
        make_checker(directory=primary / "bin")
        calls = []
        resolver = PathResolver(
            platform_info=linux_x64,
            package_finder=_finder({PRIMARY_PACKAGE: primary}),
            cache_lookup=lambda: calls.append(1),
        )

        assert resolver.locate() is not None
        assert calls == []

    def test_nothing_found(self, linux_x64) -> None:
        resolver = PathResolver(platform_info=linux_x64, package_finder=_no_packages)
        assert resolver.locate() is None

    def test_explicit_path_first(self, tmp_path: Path, make_checker, linux_x64) -> None:
        explicit = make_checker(directory=tmp_path / "explicit")
        primary = tmp_path / "primary"
        make_checker(directory=primary / "bin")
        resolver = PathResolver(
            platform_info=linux_x64,
            explicit_path=explicit,
            package_finder=_finder({PRIMARY_PACKAGE: primary}),
        )

        assert resolver.locate() == explicit

    def test_env_override(
        self, tmp_path: Path, make_checker, linux_x64, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        explicit = make_checker(directory=tmp_path / "env")
        monkeypatch.setenv(BINARY_PATH_ENV, str(explicit))
        resolver = PathResolver(platform_info=linux_x64, package_finder=_no_packages)

        assert resolver.locate() == explicit

    def test_unexpandable_env_override_is_ignored(
        self, tmp_path: Path, make_checker, linux_x64, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        cached = make_checker(directory=tmp_path / "cache")
        monkeypatch.setenv(BINARY_PATH_ENV, "~commentguard_no_such_user/comment-checker")
        resolver = PathResolver(
            platform_info=linux_x64,
            package_finder=_no_packages,
            cache_lookup=lambda: cached,
        )

        assert resolver.locate() == cached

    def test_unexpandable_env_override_is_unavailable(
        self, linux_x64, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(BINARY_PATH_ENV, "~commentguard_no_such_user/comment-checker")
        coordinator = ResolutionCoordinator(
            PathResolver(platform_info=linux_x64, package_finder=_no_packages)
        )

        assert coordinator.resolve_sync() is None
        assert coordinator.is_available() is False

    def test_candidate_errors_are_absorbed(self, linux_x64) -> None:
        resolver = PathResolver(platform_info=linux_x64, package_finder=_no_packages)

        with patch.object(resolver, "candidates", side_effect=RuntimeError("broken")):
            assert resolver.locate() is None

    def test_non_executable_candidate_skipped(self, tmp_path: Path, make_checker, linux_x64) -> None:
        primary = tmp_path / "primary"
        broken = make_checker(directory=primary / "bin")
        broken.chmod(0o644)
        resolver = PathResolver(
            platform_info=linux_x64,
            package_finder=_finder({PRIMARY_PACKAGE: primary}),
        )

        assert resolver.locate() is None

    def test_failing_lookups_are_absorbed(self, linux_x64) -> None:
        def broken_finder(name: str) -> Optional[Path]:
            raise RuntimeError("metadata corrupted")

        def broken_cache() -> Optional[Path]:
            raise OSError("permission denied")

        resolver = PathResolver(
            platform_info=linux_x64,
            package_finder=broken_finder,
            cache_lookup=broken_cache,
        )

        assert resolver.locate() is None

    def test_returns_absolute_path(
        self, tmp_path: Path, make_checker, linux_x64, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        make_checker(directory=tmp_path / "rel")
        monkeypatch.chdir(tmp_path)
        resolver = PathResolver(
            platform_info=linux_x64,
            explicit_path=Path("rel") / "comment-checker",
            package_finder=_no_packages,
        )

        located = resolver.locate()
        assert located is not None
        assert located.is_absolute()


class TestCandidates:
    """Tests for PathResolver.candidates and describe."""

    def test_order(self, tmp_path: Path) -> None:
        resolver = PathResolver(
            platform_info=PlatformInfo("darwin", "arm64"),
            explicit_path=tmp_path / "explicit",
            package_finder=_finder({
                PRIMARY_PACKAGE: tmp_path / "primary",
                "comment_checker_darwin_arm64": tmp_path / "legacy",
            }),
            cache_lookup=lambda: tmp_path / "cache" / "comment-checker",
        )

        kinds = [c.kind for c in resolver.describe()]

        assert kinds == [
            CandidateKind.EXPLICIT,
            CandidateKind.PACKAGE,
            CandidateKind.PLATFORM_PACKAGE,
            CandidateKind.SYSTEM,
            CandidateKind.SYSTEM,
            CandidateKind.CACHE,
        ]

    def test_homebrew_only_on_macos(self, linux_x64) -> None:
        linux = PathResolver(platform_info=linux_x64, package_finder=_no_packages)
        macos = PathResolver(platform_info=PlatformInfo("darwin", "x64"), package_finder=_no_packages)

        assert [c.path for c in linux.describe()] == []
        assert [c.path for c in macos.describe()] == list(HOMEBREW_PATHS)

    def test_windows_binary_name(self, tmp_path: Path) -> None:
        resolver = PathResolver(
            platform_info=PlatformInfo("win32", "x64"),
            package_finder=_finder({PRIMARY_PACKAGE: tmp_path}),
        )

        assert resolver.binary_name == "comment-checker.exe"
        assert resolver.describe()[0].path == tmp_path / "bin" / "comment-checker.exe"
