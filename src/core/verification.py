"""Verification workflow orchestration and report formatting."""

from __future__ import annotations

import time
from typing import Callable

from core.config import ByteTrieConfig
from core.verification_checks import build_checks, build_runtime
from core.verification_types import (
    VerificationCheckResult,
    VerificationMode,
    VerificationOptions,
    VerificationReport,
    VerificationRuntime,
    VerificationStatus,
)

__all__ = [
    "VerificationCheckResult",
    "VerificationMode",
    "VerificationOptions",
    "VerificationReport",
    "run_verification",
    "render_verification_report",
]


def run_verification(config: ByteTrieConfig, options: VerificationOptions) -> VerificationReport:
    """Run verification checks and return structured report."""
    runtime = build_runtime(config, options.random_seed)
    checks = build_checks(options.mode)
    results = _run_checks(runtime, checks, options.fail_fast)
    runtime.trie.destroy()
    return VerificationReport(
        mode=options.mode,
        prune_on_remove=config.prune_on_remove,
        checks=tuple(results),
    )


def _run_checks(
    runtime: VerificationRuntime,
    checks: tuple[tuple[str, str, Callable[[VerificationRuntime], str]], ...],
    fail_fast: bool,
) -> list[VerificationCheckResult]:
    results: list[VerificationCheckResult] = []
    failed = False
    for check_id, title, check_fn in checks:
        if failed and fail_fast:
            results.append(
                VerificationCheckResult(
                    check_id=check_id,
                    title=title,
                    status="skipped",
                    details="skipped after earlier failure",
                    duration_seconds=0.0,
                )
            )
            continue
        started_at = time.monotonic()
        status, details = _run_single_check(check_fn, runtime)
        results.append(
            VerificationCheckResult(
                check_id=check_id,
                title=title,
                status=status,
                details=details,
                duration_seconds=round(time.monotonic() - started_at, 3),
            )
        )
        failed = failed or status == "failed"
    return results


def _run_single_check(
    check_fn: Callable[[VerificationRuntime], str],
    runtime: VerificationRuntime,
) -> tuple[VerificationStatus, str]:
    try:
        details = str(check_fn(runtime))
        return "passed", details
    except Exception as error:
        return "failed", f"{type(error).__name__}: {error}"


def render_verification_report(report: VerificationReport) -> str:
    """Render report into stable multi-line text for CLI output."""
    lines = [
        f"mode={report.mode}",
        f"prune_on_remove={str(report.prune_on_remove).lower()}",
    ]
    for row in report.checks:
        lines.append(
            f"[{row.status.upper()}] {row.check_id} {row.title} "
            f"({row.duration_seconds:.3f}s) :: {row.details}"
        )
    lines.append(f"passed={report.passed_count}")
    lines.append(f"failed={report.failed_count}")
    return "\n".join(lines)
