"""Shared typed models.

This module defines immutable result models returned by the trie
engine and its handle-based operation surface.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.error_messages import describe_error
from core.errors import ErrorKind


@dataclass(frozen=True)
class TrieOutcome:
    """Tagged result of one trie operation.

    Attributes:
        kind: Outcome classification; ErrorKind.OK on success.
        value: Element bytes for operations that produce one.
        detail: Failure message raised by the engine, empty on success.
    """

    kind: ErrorKind
    value: bytes | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        """Whether the operation succeeded."""
        return self.kind is ErrorKind.OK

    @property
    def message(self) -> str:
        """Display text for the outcome kind."""
        return describe_error(self.kind)


@dataclass(frozen=True)
class TrieStats:
    """Point-in-time size information for a trie.

    Attributes:
        count: Number of live key mappings.
        element_size: Fixed byte width of every element.
        live_nodes: Allocated nodes, root included.
        node_capacity: Node rows currently reserved by the arena.
    """

    count: int
    element_size: int
    live_nodes: int
    node_capacity: int
