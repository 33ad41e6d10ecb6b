"""Typed models for verification workflows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from trie.byte_trie import ByteTrie

VerificationMode = Literal["quick", "full"]
VerificationStatus = Literal["passed", "failed", "skipped"]


@dataclass(frozen=True)
class VerificationOptions:
    """Options controlling verification execution."""

    mode: VerificationMode
    fail_fast: bool
    random_seed: int = 42


@dataclass(frozen=True)
class VerificationCheckResult:
    """One verification check result row."""

    check_id: str
    title: str
    status: VerificationStatus
    details: str
    duration_seconds: float


@dataclass(frozen=True)
class VerificationReport:
    """Final verification report for a complete run."""

    mode: VerificationMode
    prune_on_remove: bool
    checks: tuple[VerificationCheckResult, ...]

    @property
    def failed_count(self) -> int:
        """Count failed checks in this report."""
        return sum(1 for check in self.checks if check.status == "failed")

    @property
    def passed_count(self) -> int:
        """Count passed checks in this report."""
        return sum(1 for check in self.checks if check.status == "passed")


@dataclass
class VerificationRuntime:
    """Shared mutable runtime state used by check functions."""

    trie: ByteTrie
    element_size: int
    random_seed: int
