"""Status command implementation.

Shows the platform, every candidate location for the comment-checker
binary and which one resolution would pick.
"""

from __future__ import annotations

import json
from argparse import Namespace
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table

from commentguard.bootstrap.platform import get_platform_info
from commentguard.bootstrap.validation import validate_binary
from commentguard.checker import CommentChecker
from commentguard.cli.commands import CheckerFactory, Command
from commentguard.cli.exit_codes import EXIT_SUCCESS
from commentguard.config.models import CommentGuardConfig


class StatusCommand(Command):
    """Report where the comment-checker binary is (or would come from)."""

    def __init__(
        self,
        version: str,
        checker_factory: Optional[CheckerFactory] = None,
        console: Optional[Console] = None,
    ):
        """Initialize StatusCommand.

        Args:
            version: Current commentguard version string.
            checker_factory: Builds the checker from configuration.
            console: Rich console for output.
        """
        super().__init__(checker_factory)
        self._version = version
        self._console = console or Console()

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace, config: "CommentGuardConfig | None" = None) -> int:
        """Print resolution status. Never downloads.

        Returns:
            Exit code (always 0).
        """
        config = config or CommentGuardConfig()
        checker = self.build_checker(config)
        report = self.collect(checker, config)

        if getattr(args, "json", False):
            self._console.print_json(json.dumps(report))
            return EXIT_SUCCESS

        self._print_report(report)
        return EXIT_SUCCESS

    def collect(self, checker: CommentChecker, config: CommentGuardConfig) -> Dict[str, Any]:
        """Gather status information as a JSON-serializable dict."""
        platform_info = get_platform_info()
        candidates: List[Dict[str, str]] = []
        if checker.resolver is not None:
            for candidate in checker.resolver.describe():
                candidates.append({
                    "kind": candidate.kind.value,
                    "label": candidate.label,
                    "path": str(candidate.path),
                    "status": validate_binary(candidate.path).value,
                })

        resolved = checker.resolve_sync()
        downloader = checker.downloader
        return {
            "version": self._version,
            "platform": platform_info.key,
            "platform_supported": platform_info.is_supported,
            "candidates": candidates,
            "resolved_path": str(resolved) if resolved else None,
            "cache_path": str(downloader.binary_path) if downloader else None,
            "download_enabled": config.download.enabled,
            "checker_version": config.download.version,
            "timeout": config.checker.timeout,
            "config_sources": config.sources,
        }

    def _print_report(self, report: Dict[str, Any]) -> None:
        console = self._console
        console.print(f"commentguard version: {report['version']}")
        supported = "" if report["platform_supported"] else " (no prebuilt checker)"
        console.print(f"Platform: {report['platform']}{supported}")
        console.print()

        table = Table(title="Candidate locations")
        table.add_column("Source")
        table.add_column("Path")
        table.add_column("Status")
        for candidate in report["candidates"]:
            style = "green" if candidate["status"] == "present" else "dim"
            table.add_row(
                candidate["label"],
                candidate["path"],
                f"[{style}]{candidate['status']}[/{style}]",
            )
        if not report["candidates"]:
            table.add_row("-", "no candidate locations", "-")
        console.print(table)
        console.print()

        if report["resolved_path"]:
            console.print(f"Resolved: [green]{report['resolved_path']}[/green]")
        else:
            console.print("Resolved: [yellow]not found[/yellow]")
        console.print(f"Download cache: {report['cache_path']}")
        download_state = "enabled" if report["download_enabled"] else "disabled"
        console.print(f"Download: {download_state} (v{report['checker_version']})")
        timeout = report["timeout"]
        console.print(f"Check timeout: {'none' if timeout is None else f'{timeout}s'}")
