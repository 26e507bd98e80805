"""Single source of truth for the checker binary location.

The coordinator combines the synchronous PathResolver with the lazy
BinaryAcquirer and memoizes the first successful result. Concurrent async
callers share one in-flight attempt through a pending task, so at most one
download runs at a time.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from commentguard.bootstrap.download import BinaryAcquirer
from commentguard.bootstrap.validation import binary_exists
from commentguard.core.logging import get_logger
from commentguard.resolution.resolver import PathResolver

LOGGER = get_logger(__name__)


@dataclass
class ResolutionState:
    """Mutable resolution state owned by one ResolutionCoordinator.

    Created with the coordinator, written only by it, never torn down in
    normal operation. reset() exists for tests.
    """

    resolved_path: Optional[Path] = None
    pending: Optional["asyncio.Task[Optional[Path]]"] = None
    attempts: int = 0
    last_failure: Optional[float] = None

    def reset(self) -> None:
        self.resolved_path = None
        self.pending = None
        self.attempts = 0
        self.last_failure = None


class ResolutionCoordinator:
    """Resolves the checker path once and serves it to every caller.

    Args:
        resolver: Synchronous candidate search.
        acquirer: Lazy download, or None to never acquire.
        retry_after: Seconds to wait after a failed attempt before trying
            again. 0 re-attempts on the next call.
        clock: Monotonic clock, injectable for tests.
    """

    def __init__(
        self,
        resolver: PathResolver,
        acquirer: Optional[BinaryAcquirer] = None,
        retry_after: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._resolver = resolver
        self._acquirer = acquirer
        self._retry_after = retry_after
        self._clock = clock
        self._state = ResolutionState()

    @property
    def resolved_path(self) -> Optional[Path]:
        return self._state.resolved_path

    @property
    def attempts(self) -> int:
        """Number of resolution attempts started so far."""
        return self._state.attempts

    @property
    def is_pending(self) -> bool:
        return self._current_pending() is not None

    def reset(self) -> None:
        """Forget everything. Intended for tests."""
        self._state.reset()

    async def resolve_async(self) -> Optional[Path]:
        """Resolve the binary path, downloading it if necessary.

        Safe to call concurrently: callers arriving while an attempt is in
        flight await the same attempt.

        Returns:
            Absolute path to the binary, or None.
        """
        if self._state.resolved_path is not None:
            return self._state.resolved_path

        pending = self._current_pending()
        if pending is None:
            if self._in_backoff():
                LOGGER.debug("skipping resolution, last attempt failed recently")
                return None
            pending = self._start_attempt()

        # Shielded so one cancelled caller does not cancel the shared attempt.
        return await asyncio.shield(pending)

    def resolve_sync(self) -> Optional[Path]:
        """Return the memoized path or search local candidates. Never downloads."""
        if self._state.resolved_path is not None:
            return self._state.resolved_path
        return self._resolver.locate()

    def start_background_init(self) -> None:
        """Begin resolution without anyone waiting on it.

        Idempotent while an attempt is pending or once resolved. Must be
        called from a running event loop; otherwise it does nothing.
        """
        if self._state.resolved_path is not None or self._current_pending() is not None:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            LOGGER.debug("background init skipped: no running event loop")
            return
        if self._in_backoff():
            return

        task = self._start_attempt()
        task.add_done_callback(_log_background_result)

    def is_available(self) -> bool:
        """Synchronous existence check, no download."""
        return binary_exists(self.resolve_sync())

    async def ensure_available(self) -> bool:
        """Resolve (possibly downloading) and check the binary exists."""
        return binary_exists(await self.resolve_async())

    def _current_pending(self) -> Optional["asyncio.Task[Optional[Path]]"]:
        pending = self._state.pending
        if pending is None:
            return None
        if pending.done() or _is_foreign(pending):
            # Left over from a finished or foreign event loop.
            self._state.pending = None
            return None
        return pending

    def _start_attempt(self) -> "asyncio.Task[Optional[Path]]":
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._attempt())
        self._state.pending = task
        self._state.attempts += 1
        return task

    async def _attempt(self) -> Optional[Path]:
        try:
            path = await self._resolve_once()
        except Exception as e:
            LOGGER.debug(f"resolution attempt failed: {e!r}")
            path = None
        finally:
            if self._state.pending is asyncio.current_task():
                self._state.pending = None

        if path is None:
            self._state.last_failure = self._clock()
            LOGGER.debug("no binary available")
        else:
            self._state.resolved_path = path
            self._state.last_failure = None
        return path

    async def _resolve_once(self) -> Optional[Path]:
        local = self._resolver.locate()
        # Re-check: package metadata may point at a file removed since.
        if local is not None and binary_exists(local):
            LOGGER.debug(f"using sync-resolved path: {local}")
            return local

        if self._acquirer is None:
            return None

        LOGGER.debug("triggering lazy download...")
        downloaded = await self._acquirer.acquire()
        if downloaded is not None and binary_exists(downloaded):
            LOGGER.debug(f"using downloaded path: {downloaded}")
            return Path(downloaded).absolute()
        return None

    def _in_backoff(self) -> bool:
        if self._retry_after <= 0 or self._state.last_failure is None:
            return False
        return self._clock() - self._state.last_failure < self._retry_after


def _is_foreign(task: "asyncio.Task[Optional[Path]]") -> bool:
    try:
        running = asyncio.get_running_loop()
    except RuntimeError:
        return task.get_loop().is_closed()
    return task.get_loop() is not running


def _log_background_result(task: "asyncio.Task[Optional[Path]]") -> None:
    if task.cancelled():
        LOGGER.debug("background init cancelled")
        return
    error = task.exception()
    if error is not None:
        LOGGER.debug(f"background init error: {error!r}")
        return
    LOGGER.debug(f"background init complete: {task.result() or 'no binary'}")
