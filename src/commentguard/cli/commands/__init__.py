"""CLI commands package.

Every command builds its CommentChecker through an injectable factory, so
tests can swap in a fake checker without touching configuration.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import Callable, Optional

from commentguard.checker import CommentChecker
from commentguard.config.models import CommentGuardConfig

CheckerFactory = Callable[[CommentGuardConfig], CommentChecker]


class Command(ABC):
    """Base class for CLI commands.

    Args:
        checker_factory: Builds the checker from configuration. Defaults to
            CommentChecker.from_config.
    """

    def __init__(self, checker_factory: Optional[CheckerFactory] = None) -> None:
        self._checker_factory = checker_factory

    @property
    @abstractmethod
    def name(self) -> str:
        """Subcommand name as typed on the command line."""

    @abstractmethod
    def execute(self, args: Namespace, config: "CommentGuardConfig | None" = None) -> int:
        """Run the command and return its exit code."""

    def build_checker(self, config: "CommentGuardConfig | None" = None) -> CommentChecker:
        """Create the checker for one command run.

        Args:
            config: Loaded configuration; built-in defaults when None.
        """
        config = config or CommentGuardConfig()
        if self._checker_factory is None:
            return CommentChecker.from_config(config)
        return self._checker_factory(config)


# ruff: noqa: E402
from commentguard.cli.commands.check import CheckCommand
from commentguard.cli.commands.install import InstallCommand
from commentguard.cli.commands.status import StatusCommand

__all__ = [
    "Command",
    "CheckCommand",
    "InstallCommand",
    "StatusCommand",
]
