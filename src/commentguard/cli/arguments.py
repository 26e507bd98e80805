"""Argument parser for the commentguard CLI."""

from __future__ import annotations

import argparse
from pathlib import Path


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show commentguard version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce logging output to errors only.",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: .commentguard.yml in the current directory).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="commentguard",
        description="commentguard - run the comment-checker from AI agent hooks.",
    )
    _add_global_options(parser)

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    check = subparsers.add_parser(
        "check",
        help="Check one hook payload read from stdin (exit 2 when flagged).",
    )
    check.add_argument(
        "--input",
        metavar="PATH",
        type=Path,
        help="Read the hook payload from a file instead of stdin.",
    )
    check.add_argument(
        "--no-download",
        action="store_true",
        help="Only use an already installed checker; never download.",
    )

    status = subparsers.add_parser(
        "status",
        help="Show where the comment-checker binary is found.",
    )
    status.add_argument(
        "--json",
        action="store_true",
        help="Print status as JSON.",
    )

    subparsers.add_parser(
        "install",
        help="Download the comment-checker binary if it is not installed.",
    )

    return parser
