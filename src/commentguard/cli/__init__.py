"""Command-line interface for commentguard."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Dict, List, Optional

from commentguard.cli.arguments import build_parser
from commentguard.cli.commands import CheckCommand, Command, InstallCommand, StatusCommand
from commentguard.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from commentguard.config import CommentGuardConfig, ConfigError, load_config
from commentguard.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def get_version() -> str:
    try:
        return version("commentguard")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from commentguard import __version__

        return __version__


class CLIRunner:
    """Parses arguments, loads configuration and dispatches commands."""

    def __init__(self) -> None:
        self._version = get_version()
        self._commands: Dict[str, Command] = {
            "check": CheckCommand(),
            "status": StatusCommand(version=self._version),
            "install": InstallCommand(),
        }

    def run(self, argv: Optional[List[str]] = None) -> int:
        parser = build_parser()
        try:
            args = parser.parse_args(argv)
        except SystemExit as e:
            # argparse exits 2 on usage errors, which is EXIT_FLAGGED here.
            return EXIT_SUCCESS if e.code in (0, None) else EXIT_INVALID_USAGE

        if args.version:
            print(self._version)
            return EXIT_SUCCESS

        configure_logging(debug=args.debug, verbose=args.verbose, quiet=args.quiet)

        if not args.command:
            parser.print_help()
            return EXIT_SUCCESS

        command = self._commands[args.command]
        try:
            config = load_config(Path.cwd(), cli_config_path=args.config)
        except ConfigError as e:
            if args.command == "check":
                # Hook mode must not fail because of a broken config file.
                LOGGER.warning(f"Ignoring configuration: {e}")
                config = CommentGuardConfig()
            else:
                LOGGER.error(str(e))
                return EXIT_INVALID_USAGE

        return command.execute(args, config)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    runner = CLIRunner()
    return runner.run(argv)
