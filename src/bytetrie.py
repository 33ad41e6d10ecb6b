"""Public SDK surface for bytetrie.

This module provides a stable import path for library users.
It re-exports the trie, its tagged-outcome operations, and error types.
"""

from __future__ import annotations

from core.config import ByteTrieConfig
from core.error_messages import describe_error
from core.errors import (
    ByteTrieConfigError,
    ByteTrieError,
    CorruptTreeError,
    ElementSizeError,
    ErrorKind,
    NullStructureError,
    TrieAllocationError,
    TrieKeyError,
    TrieOperationError,
)
from core.types import TrieOutcome, TrieStats
from trie.byte_trie import ByteTrie
from trie.operations import (
    trie_create,
    trie_destroy,
    trie_get,
    trie_insert,
    trie_remove,
    trie_set,
)

__all__ = [
    "ByteTrie",
    "ByteTrieConfig",
    "ByteTrieConfigError",
    "ByteTrieError",
    "CorruptTreeError",
    "ElementSizeError",
    "ErrorKind",
    "NullStructureError",
    "TrieAllocationError",
    "TrieKeyError",
    "TrieOperationError",
    "TrieOutcome",
    "TrieStats",
    "describe_error",
    "trie_create",
    "trie_destroy",
    "trie_get",
    "trie_insert",
    "trie_remove",
    "trie_set",
]
