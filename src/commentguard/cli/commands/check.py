"""Check command implementation.

Hook mode: reads one hook payload from stdin, runs the comment-checker on
it and reports through the exit code. Everything except a flagged result
exits 0, so a missing or broken checker never blocks the agent.
"""

from __future__ import annotations

import asyncio
import sys
from argparse import Namespace
from pathlib import Path
from typing import Optional, TextIO

from commentguard.checker import CommentChecker
from commentguard.cli.commands import CheckerFactory, Command
from commentguard.cli.exit_codes import EXIT_FLAGGED, EXIT_SUCCESS
from commentguard.config.models import CommentGuardConfig
from commentguard.core.logging import get_logger
from commentguard.core.models import CheckResult, HookInput

LOGGER = get_logger(__name__)


class CheckCommand(Command):
    """Run the comment-checker on a hook payload."""

    def __init__(
        self,
        checker_factory: Optional[CheckerFactory] = None,
        stdin: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        """Initialize CheckCommand.

        Args:
            checker_factory: Builds the checker from configuration.
            stdin: Payload source (default: sys.stdin).
            stderr: Where flagged messages go (default: sys.stderr).
        """
        super().__init__(checker_factory)
        self._stdin = stdin
        self._stderr = stderr

    @property
    def name(self) -> str:
        """Command identifier."""
        return "check"

    def execute(self, args: Namespace, config: "CommentGuardConfig | None" = None) -> int:
        """Execute the check command.

        Args:
            args: Parsed command-line arguments.
            config: commentguard configuration (defaults when None).

        Returns:
            EXIT_FLAGGED if the checker flagged the payload, else EXIT_SUCCESS.
        """
        raw = self._read_payload(getattr(args, "input", None))
        if raw is None:
            return EXIT_SUCCESS

        try:
            payload = HookInput.from_json(raw)
        except ValueError as e:
            LOGGER.debug(f"ignoring malformed hook input: {e}")
            return EXIT_SUCCESS

        download = not getattr(args, "no_download", False)
        try:
            checker = self.build_checker(config)
            result = asyncio.run(self._check(checker, payload, download))
        except Exception as e:
            LOGGER.debug(f"comment check failed: {e!r}")
            return EXIT_SUCCESS

        if result.flagged:
            stderr = self._stderr or sys.stderr
            stderr.write(result.message)
            stderr.flush()
            return EXIT_FLAGGED
        return EXIT_SUCCESS

    @staticmethod
    async def _check(checker: CommentChecker, payload: HookInput, download: bool) -> CheckResult:
        if download:
            return await checker.check(payload)
        return await checker.run(payload)

    def _read_payload(self, input_path: Optional[Path]) -> Optional[str]:
        try:
            if input_path is not None:
                return Path(input_path).read_text(encoding="utf-8")
            return (self._stdin or sys.stdin).read()
        except (OSError, UnicodeDecodeError) as e:
            LOGGER.debug(f"cannot read hook input: {e}")
            return None
