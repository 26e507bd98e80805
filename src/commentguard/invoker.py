"""Runs the comment-checker binary on one hook payload.

Protocol:
- the payload is written to stdin as one JSON document, then stdin is closed
- stdout and stderr are drained concurrently until the process exits
- exit code 0 means clean, 2 means flagged with the message on stderr,
  anything else is indeterminate

CheckerInvoker.run() is the fail-open boundary: it always returns a
CheckResult and never raises.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional, Union

from commentguard.core.logging import get_logger
from commentguard.core.models import (
    CheckResult,
    ErrorKind,
    HookInput,
    InvocationOutcome,
    Outcome,
)

LOGGER = get_logger(__name__)

EXIT_CLEAN = 0
EXIT_FLAGGED = 2

DEFAULT_TIMEOUT = 30.0

PathLike = Union[str, Path]


class CheckerInvoker:
    """Launches the checker and maps its exit code.

    Args:
        timeout: Seconds to wait for the checker before killing it.
            None waits indefinitely.
    """

    def __init__(self, timeout: Optional[float] = DEFAULT_TIMEOUT) -> None:
        self._timeout = timeout

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    async def run(self, path: Optional[PathLike], payload: HookInput) -> CheckResult:
        """Check a payload. Indeterminate outcomes come back as clean."""
        try:
            outcome = await self.invoke(path, payload)
        except Exception as e:
            LOGGER.debug(f"failed to run comment-checker: {e!r}")
            return CheckResult.clean()

        if outcome.outcome == Outcome.INDETERMINATE:
            LOGGER.debug(
                f"indeterminate result ({outcome.error.value if outcome.error else 'unknown'}): "
                f"{outcome.detail}"
            )
        return outcome.to_check_result()

    async def invoke(self, path: Optional[PathLike], payload: HookInput) -> InvocationOutcome:
        """Run the checker and describe exactly what happened."""
        if path is None:
            return InvocationOutcome.indeterminate(
                ErrorKind.NOT_FOUND, "comment-checker binary not found"
            )

        binary = Path(path)
        if not binary.is_file():
            return InvocationOutcome.indeterminate(
                ErrorKind.STALE_REFERENCE,
                f"comment-checker binary does not exist: {binary}",
            )

        try:
            stdin_data = payload.to_json().encode("utf-8")
        except (TypeError, ValueError) as e:
            return InvocationOutcome.indeterminate(
                ErrorKind.PROTOCOL_VIOLATION, f"payload is not serializable: {e}"
            )

        LOGGER.debug(f"running comment-checker with input: {stdin_data[:200]!r}")

        try:
            process = await asyncio.create_subprocess_exec(
                str(binary),
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return InvocationOutcome.indeterminate(
                ErrorKind.SPAWN_FAILURE, f"failed to start {binary}: {e}"
            )

        try:
            # communicate() writes and closes stdin, drains both pipes and
            # waits for exit before returning.
            stdout, stderr = await asyncio.wait_for(
                process.communicate(stdin_data), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            return InvocationOutcome.indeterminate(
                ErrorKind.TIMEOUT, f"comment-checker timed out after {self._timeout}s"
            )
        finally:
            # Also reached on cancellation; the child must not outlive us.
            if process.returncode is None:
                await _kill(process)

        exit_code = process.returncode
        LOGGER.debug(
            f"exit code: {exit_code} stdout length: {len(stdout)} stderr length: {len(stderr)}"
        )

        try:
            stderr_text = stderr.decode("utf-8")
        except UnicodeDecodeError as e:
            return InvocationOutcome.indeterminate(
                ErrorKind.PROTOCOL_VIOLATION,
                f"stderr is not valid UTF-8: {e}",
                exit_code=exit_code,
            )

        if exit_code == EXIT_CLEAN:
            return InvocationOutcome(outcome=Outcome.CLEAN, exit_code=exit_code, stderr=stderr_text)

        if exit_code == EXIT_FLAGGED:
            return InvocationOutcome(
                outcome=Outcome.FLAGGED,
                message=stderr_text,
                exit_code=exit_code,
                stderr=stderr_text,
            )

        return InvocationOutcome.indeterminate(
            ErrorKind.PROTOCOL_VIOLATION,
            f"unexpected exit code: {exit_code} stderr: {stderr_text[:500]}",
            exit_code=exit_code,
            stderr=stderr_text,
        )


async def _kill(process: asyncio.subprocess.Process) -> None:
    try:
        process.kill()
    except ProcessLookupError:
        return
    await process.wait()
