"""bytetrie exception hierarchy and error taxonomy.

This module defines the enumerated outcome kinds shared by every
trie operation and the exceptions that carry them. Each failing
operation raises the subclass matching its kind.
"""

from __future__ import annotations

from enum import IntEnum


class ErrorKind(IntEnum):
    """Outcome classification for trie operations.

    Codes are stable and match the historical numbering, so they can be
    passed around as plain integers.
    """

    OK = 0
    NULL_STRUCTURE = 1
    NULL_HEAD = 2
    NULL_NODE = 3
    TRY_REMOVE_EMPTY_STRUCTURE = 4
    TRY_ADD_EDGE_NO_VERTEX = 5
    ACCESS_OUT_OF_BOUND = 6
    ELEMENT_SIZE_MISMATCH = 7


class ByteTrieError(Exception):
    """Base exception for all bytetrie failures."""


class ByteTrieConfigError(ByteTrieError):
    """Raised for invalid runtime configuration."""


class TrieOperationError(ByteTrieError):
    """Raised when a trie operation cannot complete.

    Attributes:
        kind: Outcome classification of the failure.
    """

    kind: ErrorKind = ErrorKind.NULL_STRUCTURE

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class NullStructureError(TrieOperationError):
    """Raised when the trie handle is absent or not initialized."""

    kind = ErrorKind.NULL_STRUCTURE


class CorruptTreeError(TrieOperationError):
    """Raised when an integrity check finds a broken node structure."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.NULL_NODE) -> None:
        super().__init__(message)
        self.kind = kind


class TrieAllocationError(TrieOperationError):
    """Raised when the node arena cannot allocate another node."""

    kind = ErrorKind.TRY_ADD_EDGE_NO_VERTEX


class TrieKeyError(TrieOperationError, KeyError):
    """Raised when a key has no mapped value."""

    kind = ErrorKind.ACCESS_OUT_OF_BOUND


class ElementSizeError(TrieOperationError, ValueError):
    """Raised when an element or buffer does not match the element size."""

    kind = ErrorKind.ELEMENT_SIZE_MISMATCH


class ByteTrieVerificationError(ByteTrieError):
    """Raised when a built-in verification check fails."""
