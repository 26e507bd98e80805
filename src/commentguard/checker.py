"""High-level entry point used by hosts.

CommentChecker wires the resolver, downloader, coordinator and invoker
together from a CommentGuardConfig. A process-wide default instance is
available through get_checker(); tests replace or reset it with
set_checker() / reset_checker().
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from commentguard.bootstrap.download import CheckerDownloader
from commentguard.bootstrap.paths import CommentGuardPaths
from commentguard.bootstrap.platform import PlatformInfo, get_platform_info
from commentguard.config.models import CommentGuardConfig
from commentguard.core.logging import enable_debug_channel, get_logger, init_debug_channel_from_env
from commentguard.core.models import CheckResult, HookInput
from commentguard.invoker import CheckerInvoker
from commentguard.resolution.coordinator import ResolutionCoordinator
from commentguard.resolution.resolver import PathResolver

LOGGER = get_logger(__name__)


class CommentChecker:
    """Resolves the checker binary and runs it on hook payloads.

    Every operation is fail-open: a missing or broken checker yields
    "nothing flagged", never an exception.
    """

    def __init__(
        self,
        coordinator: ResolutionCoordinator,
        invoker: CheckerInvoker,
        resolver: Optional[PathResolver] = None,
        downloader: Optional[CheckerDownloader] = None,
    ) -> None:
        self._coordinator = coordinator
        self._invoker = invoker
        self._resolver = resolver
        self._downloader = downloader

    @classmethod
    def from_config(
        cls,
        config: Optional[CommentGuardConfig] = None,
        paths: Optional[CommentGuardPaths] = None,
        platform_info: Optional[PlatformInfo] = None,
    ) -> "CommentChecker":
        """Build a checker from configuration.

        Args:
            config: Loaded configuration; defaults when None.
            paths: Home directory layout; ~/.commentguard when None.
            platform_info: Platform override (testing).
        """
        config = config or CommentGuardConfig()
        platform_info = platform_info or get_platform_info()

        init_debug_channel_from_env()
        if config.debug:
            enable_debug_channel()

        downloader = CheckerDownloader(
            version=config.download.version,
            paths=paths,
            platform_info=platform_info,
            base_url=config.download.base_url,
            enabled=config.download.enabled,
        )
        resolver = PathResolver(
            platform_info=platform_info,
            cache_lookup=downloader.get_cached_binary_path,
            explicit_path=config.checker.binary_path,
        )
        coordinator = ResolutionCoordinator(
            resolver,
            acquirer=downloader,
            retry_after=config.resolution.retry_after,
        )
        invoker = CheckerInvoker(timeout=config.checker.timeout)
        return cls(coordinator, invoker, resolver=resolver, downloader=downloader)

    @property
    def coordinator(self) -> ResolutionCoordinator:
        return self._coordinator

    @property
    def invoker(self) -> CheckerInvoker:
        return self._invoker

    @property
    def resolver(self) -> Optional[PathResolver]:
        return self._resolver

    @property
    def downloader(self) -> Optional[CheckerDownloader]:
        return self._downloader

    async def resolve_async(self) -> Optional[Path]:
        return await self._coordinator.resolve_async()

    def resolve_sync(self) -> Optional[Path]:
        return self._coordinator.resolve_sync()

    def start_background_init(self) -> None:
        self._coordinator.start_background_init()

    def is_available(self) -> bool:
        return self._coordinator.is_available()

    async def ensure_available(self) -> bool:
        return await self._coordinator.ensure_available()

    async def run(
        self,
        payload: HookInput,
        path: Optional[Union[str, Path]] = None,
    ) -> CheckResult:
        """Run the checker on a payload without downloading.

        Args:
            payload: Hook payload to check.
            path: Explicit binary; defaults to the resolved path.
        """
        binary = path if path is not None else self._coordinator.resolve_sync()
        return await self._invoker.run(binary, payload)

    async def check(self, payload: HookInput) -> CheckResult:
        """Resolve the checker (downloading if needed) and run it."""
        binary = await self._coordinator.resolve_async()
        return await self._invoker.run(binary, payload)


_default_checker: Optional[CommentChecker] = None


def get_checker() -> CommentChecker:
    """Process-wide checker, created with default configuration on first use."""
    global _default_checker
    if _default_checker is None:
        _default_checker = CommentChecker.from_config()
    return _default_checker


def set_checker(checker: CommentChecker) -> None:
    """Install a specific checker as the process-wide instance."""
    global _default_checker
    _default_checker = checker


def reset_checker() -> None:
    """Drop the process-wide checker, so the next get_checker() starts fresh."""
    global _default_checker
    _default_checker = None
