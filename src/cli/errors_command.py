"""Error description commands for bytetrie CLI."""

from __future__ import annotations

import argparse
from typing import Any

from core.error_messages import describe_error, list_error_kinds, parse_error_kind


def add_errors_commands(subparsers: Any) -> None:
    """Register errors and describe-error subcommands."""
    subparsers.add_parser("errors", help="List every error kind with its description")
    parser = subparsers.add_parser("describe-error", help="Describe one error kind")
    parser.add_argument("kind", help="Error kind name (e.g. ACCESS_OUT_OF_BOUND) or numeric code")


def run_errors_command() -> int:
    """Print one tab-separated row per error kind."""
    for kind in list_error_kinds():
        print(f"{int(kind)}\t{kind.name}\t{describe_error(kind)}")
    return 0


def run_describe_error_command(args: argparse.Namespace) -> int:
    """Print the description of a single error kind.

    Returns:
        0 on success, 2 when the kind is unknown.
    """
    kind = parse_error_kind(args.kind)
    if kind is None:
        print(f"unknown_error_kind={args.kind}")
        return 2
    print(f"{kind.name}: {describe_error(kind)}")
    return 0
