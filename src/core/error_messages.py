"""Human-readable descriptions for trie outcome kinds.

The trie engine never formats its own outcomes. Callers and the CLI
use this table to turn a kind or its integer code into display text.
"""

from __future__ import annotations

from core.errors import ErrorKind

_UNKNOWN_ERROR_TEXT = "unknown error"

_ERROR_TEXT: dict[ErrorKind, str] = {
    ErrorKind.OK: "no error",
    ErrorKind.NULL_STRUCTURE: "structure is null or not initialized",
    ErrorKind.NULL_HEAD: "structure has no head node",
    ErrorKind.NULL_NODE: "reached a null node while walking the structure",
    ErrorKind.TRY_REMOVE_EMPTY_STRUCTURE: "tried to remove from an empty structure",
    ErrorKind.TRY_ADD_EDGE_NO_VERTEX: "could not allocate a node for a new edge",
    ErrorKind.ACCESS_OUT_OF_BOUND: "access out of bound: key has no mapped value",
    ErrorKind.ELEMENT_SIZE_MISMATCH: "element does not match the structure element size",
}


def describe_error(kind: ErrorKind | int) -> str:
    """Return display text for an outcome kind.

    Args:
        kind: Error kind or its integer code.

    Returns:
        Description text, or a generic text for unknown codes.
    """
    try:
        resolved = ErrorKind(kind)
    except ValueError:
        return _UNKNOWN_ERROR_TEXT
    return _ERROR_TEXT[resolved]


def parse_error_kind(raw_value: str) -> ErrorKind | None:
    """Resolve an error kind from its name or integer code.

    Args:
        raw_value: Kind name (case-insensitive) or decimal code.

    Returns:
        Matching kind, or None when nothing matches.
    """
    candidate = raw_value.strip()
    if candidate.isdigit():
        try:
            return ErrorKind(int(candidate))
        except ValueError:
            return None
    normalized = candidate.upper().replace("-", "_")
    return ErrorKind.__members__.get(normalized)


def list_error_kinds() -> tuple[ErrorKind, ...]:
    """Return every kind ordered by code."""
    return tuple(sorted(ErrorKind))
