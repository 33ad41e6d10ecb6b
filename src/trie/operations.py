"""Handle-based trie operations returning tagged outcomes.

Each function accepts a possibly absent trie handle and reports the
result as a TrieOutcome instead of raising. Trie failures map onto
their ErrorKind; misuse such as non-bytes keys still raises TypeError.
"""

from __future__ import annotations

from typing import Callable

from core.errors import ErrorKind, TrieOperationError
from core.types import TrieOutcome
from trie.byte_trie import ByteTrie, BytesLike

__all__ = [
    "trie_create",
    "trie_destroy",
    "trie_get",
    "trie_insert",
    "trie_remove",
    "trie_set",
]


def trie_create(trie: ByteTrie | None, element_size: int) -> TrieOutcome:
    """Initialize ``trie`` with a fixed element width."""
    return _run(trie, lambda target: target.create(element_size))


def trie_destroy(trie: ByteTrie | None) -> TrieOutcome:
    """Release every node of ``trie``; succeeds on an empty trie."""
    return _run(trie, lambda target: target.destroy())


def trie_insert(trie: ByteTrie | None, key: BytesLike, element: BytesLike) -> TrieOutcome:
    """Map ``key`` to ``element``."""
    return _run(trie, lambda target: target.insert(key, element))


def trie_remove(trie: ByteTrie | None, key: BytesLike) -> TrieOutcome:
    """Remove ``key``; the outcome value holds the removed element."""
    return _run(trie, lambda target: target.remove(key))


def trie_get(
    trie: ByteTrie | None,
    key: BytesLike,
    out: bytearray | memoryview | None = None,
) -> TrieOutcome:
    """Look up ``key``; the outcome value holds a copy of the element.

    Args:
        trie: Trie handle, possibly None.
        key: Key bytes.
        out: Optional writable buffer that is also filled on success.

    Returns:
        Tagged outcome.
    """
    return _run(trie, lambda target: bytes(target.get(key, out)))


def trie_set(trie: ByteTrie | None, key: BytesLike, element: BytesLike) -> TrieOutcome:
    """Overwrite the element of an existing ``key``."""
    return _run(trie, lambda target: target.set(key, element))


def _run(trie: ByteTrie | None, action: Callable[[ByteTrie], bytes | None]) -> TrieOutcome:
    """Apply ``action`` to ``trie`` and convert failures into outcomes.

    Args:
        trie: Trie handle, possibly None.
        action: Operation to run against a present handle.

    Returns:
        OK outcome with the action result, or the failure kind.
    """
    if trie is None:
        return TrieOutcome(kind=ErrorKind.NULL_STRUCTURE, detail="Trie handle is absent.")
    try:
        value = action(trie)
    except TrieOperationError as error:
        return TrieOutcome(kind=error.kind, detail=str(error))
    return TrieOutcome(kind=ErrorKind.OK, value=value)
