"""Verification command wiring for bytetrie CLI."""

from __future__ import annotations

import argparse
from typing import Any, cast

from core.config import ByteTrieConfig
from core.verification import (
    VerificationMode,
    VerificationOptions,
    render_verification_report,
    run_verification,
)


def add_verify_command(subparsers: Any) -> None:
    """Register verify subcommand."""
    parser = subparsers.add_parser(
        "verify",
        help="Run built-in trie behaviour checks",
    )
    parser.add_argument(
        "--mode",
        choices=("quick", "full"),
        default="quick",
        help="Verification mode; full adds a randomized arena growth check",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for the full-mode key generator",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Skip remaining checks after the first failure",
    )


def run_verify_command(config: ByteTrieConfig, args: argparse.Namespace) -> int:
    """Execute verification workflow and print check report."""
    options = VerificationOptions(
        mode=cast(VerificationMode, args.mode),
        fail_fast=args.fail_fast,
        random_seed=args.seed,
    )
    report = run_verification(config, options)
    print(render_verification_report(report))
    return 0 if report.failed_count == 0 else 1
