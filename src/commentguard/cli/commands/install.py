"""Install command implementation.

Resolves the comment-checker, downloading it if no local copy exists.
"""

from __future__ import annotations

import asyncio
from argparse import Namespace
from typing import Optional

from rich.console import Console

from commentguard.cli.commands import CheckerFactory, Command
from commentguard.cli.exit_codes import EXIT_BOOTSTRAP_FAILURE, EXIT_SUCCESS
from commentguard.config.models import CommentGuardConfig
from commentguard.core.logging import get_logger

LOGGER = get_logger(__name__)


class InstallCommand(Command):
    """Make sure the comment-checker binary is available."""

    def __init__(
        self,
        checker_factory: Optional[CheckerFactory] = None,
        console: Optional[Console] = None,
    ):
        super().__init__(checker_factory)
        self._console = console or Console()

    @property
    def name(self) -> str:
        """Command identifier."""
        return "install"

    def execute(self, args: Namespace, config: "CommentGuardConfig | None" = None) -> int:
        """Resolve or download the binary.

        Returns:
            EXIT_SUCCESS when the binary is available, else EXIT_BOOTSTRAP_FAILURE.
        """
        checker = self.build_checker(config)
        try:
            path = asyncio.run(checker.resolve_async())
        except Exception as e:
            LOGGER.error(f"Failed to install comment-checker: {e}")
            path = None

        if path is None:
            self._console.print("[red]comment-checker is not available.[/red]")
            downloader = checker.downloader
            if downloader is not None and not downloader.enabled:
                self._console.print("Downloads are disabled (download.enabled: false).")
            return EXIT_BOOTSTRAP_FAILURE

        self._console.print(f"[green]comment-checker ready:[/green] {path}")
        return EXIT_SUCCESS
