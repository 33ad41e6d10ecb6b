"""bytetrie CLI entry points.
This module exposes diagnostic commands for the trie library.
It maps argparse commands onto library calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from typing import Sequence

from cli.errors_command import (
    add_errors_commands,
    run_describe_error_command,
    run_errors_command,
)
from cli.verify_command import add_verify_command, run_verify_command
from core.config import ByteTrieConfig


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="bytetrie", description="bytetrie diagnostics CLI")
    parser.add_argument(
        "--no-prune",
        action="store_true",
        help="Override BYTETRIE_PRUNE_ON_REMOVE and keep emptied nodes",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_errors_commands(subparsers)
    add_verify_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the bytetrie CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "errors":
        return run_errors_command()
    if args.command == "describe-error":
        return run_describe_error_command(args)
    if args.command == "verify":
        return run_verify_command(_build_config(args.no_prune), args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(no_prune: bool) -> ByteTrieConfig:
    """Build runtime config with optional prune override.

    Args:
        no_prune: Disable node pruning on remove.

    Returns:
        Validated config.
    """
    config = ByteTrieConfig.from_env()
    if no_prune:
        config = replace(config, prune_on_remove=False)
    return config
