"""Byte-string keyed trie over a node arena.

This module implements the 256-way trie used as an in-memory
dictionary. Keys are consumed one byte per level from the root and
values are fixed-width opaque blobs stored in the terminal node.
"""

from __future__ import annotations

from core.config import ByteTrieConfig
from core.constants import EMPTY_CHILD, ROOT_HANDLE
from core.errors import (
    CorruptTreeError,
    ElementSizeError,
    ErrorKind,
    NullStructureError,
    TrieAllocationError,
    TrieKeyError,
)
from core.logging_config import get_logger
from core.types import TrieStats
from trie.node_arena import NodeArena

BytesLike = bytes | bytearray | memoryview

_KEY_PREVIEW_LENGTH = 32


class ByteTrie:
    """Trie mapping arbitrary byte keys to fixed-size element blobs.

    A trie constructed without ``element_size`` is allocated but not
    initialized; key operations fail with NullStructureError until
    ``create`` is called. ``destroy`` returns it to that state.
    """

    def __init__(
        self,
        element_size: int | None = None,
        config: ByteTrieConfig | None = None,
    ) -> None:
        self._config = config or ByteTrieConfig.from_env()
        self._logger = get_logger(__name__, self._config.log_level)
        self._arena: NodeArena | None = None
        self._count = 0
        self._element_size = 0
        if element_size is not None:
            self.create(element_size)

    @property
    def count(self) -> int:
        """Number of live key mappings."""
        return self._count

    @property
    def element_size(self) -> int:
        """Byte width of every stored element, 0 when uninitialized."""
        return self._element_size

    @property
    def initialized(self) -> bool:
        return self._arena is not None

    def __len__(self) -> int:
        return self._count

    def __contains__(self, key: object) -> bool:
        arena = self._require_arena()
        if not isinstance(key, (bytes, bytearray, memoryview)):
            return False
        node = _walk(arena, bytes(key))
        return node != EMPTY_CHILD and arena.has_value(node)

    def create(self, element_size: int) -> None:
        """Initialize the trie to the empty state.

        Any previous content is discarded.

        Args:
            element_size: Fixed byte width of every element.

        Raises:
            ElementSizeError: If element_size is not a non-negative integer.
            TrieAllocationError: If the initial node storage cannot be
                reserved. The previous content is kept in that case.
        """
        if isinstance(element_size, bool) or not isinstance(element_size, int) or element_size < 0:
            raise ElementSizeError(
                f"Element size must be a non-negative integer, got {element_size!r}."
            )
        self._arena = NodeArena(
            element_size,
            initial_capacity=self._config.initial_node_capacity,
            growth_factor=self._config.growth_factor,
            log_level=self._config.log_level,
        )
        self._count = 0
        self._element_size = element_size
        self._logger.debug(
            "trie_created",
            element_size=element_size,
            node_capacity=self._arena.capacity,
        )

    def destroy(self) -> None:
        """Release every node and value slot.

        The trie object itself stays usable through ``create``. Calling
        this on an empty or uninitialized trie is a no-op.
        """
        released_nodes = self._arena.live_count if self._arena is not None else 0
        released_values = self._count
        self._arena = None
        self._count = 0
        self._element_size = 0
        self._logger.debug(
            "trie_destroyed",
            released_nodes=released_nodes,
            released_values=released_values,
        )

    def insert(self, key: BytesLike, element: BytesLike) -> None:
        """Map ``key`` to ``element``, creating missing nodes.

        Inserting an existing key overwrites its value in place and
        leaves ``count`` unchanged.

        Args:
            key: Key bytes, possibly empty.
            element: Exactly ``element_size`` bytes.

        Raises:
            NullStructureError: If the trie is not initialized.
            ElementSizeError: If element has the wrong length.
            TrieAllocationError: If a node cannot be allocated. Nodes
                created by this call are released before raising.
        """
        arena = self._require_arena()
        key_bytes = _as_key(key)
        payload = self._as_element(element)
        node = ROOT_HANDLE
        first_created: tuple[int, int] | None = None
        try:
            for byte in key_bytes:
                child = arena.child(node, byte)
                if child == EMPTY_CHILD:
                    child = arena.attach_child(node, byte)
                    if first_created is None:
                        first_created = (node, byte)
                node = child
        except TrieAllocationError:
            if first_created is not None:
                _discard_chain(arena, *first_created)
            raise
        if not arena.has_value(node):
            self._count += 1
        arena.write_value(node, payload)

    def remove(self, key: BytesLike) -> bytes:
        """Detach and return the element mapped by ``key``.

        With ``prune_on_remove`` enabled, the terminal node and any
        ancestors left without value or children are released.

        Raises:
            NullStructureError: If the trie is not initialized.
            TrieKeyError: If the key has no mapped value.
        """
        arena = self._require_arena()
        path: list[tuple[int, int]] = []
        node = _find_value_node(arena, _as_key(key), path)
        removed = arena.clear_value(node)
        self._count -= 1
        if self._config.prune_on_remove:
            _prune(arena, node, path)
        return removed

    def get(
        self,
        key: BytesLike,
        out: bytearray | memoryview | None = None,
    ) -> bytes | bytearray | memoryview:
        """Return the element mapped by ``key``.

        Args:
            key: Key bytes.
            out: Optional writable buffer of ``element_size`` bytes that
                receives the element and is returned.

        Returns:
            Element bytes, or ``out`` after it was filled.

        Raises:
            NullStructureError: If the trie is not initialized.
            TrieKeyError: If the key has no mapped value.
            ElementSizeError: If ``out`` has the wrong length.
        """
        arena = self._require_arena()
        view = self._as_output_view(out) if out is not None else None
        node = _find_value_node(arena, _as_key(key))
        element = arena.read_value(node)
        if view is None:
            return element
        view[:] = element
        return out

    def set(self, key: BytesLike, element: BytesLike) -> None:
        """Overwrite the element of an existing key in place.

        Never allocates nodes or value slots.

        Raises:
            NullStructureError: If the trie is not initialized.
            TrieKeyError: If the key has no mapped value.
            ElementSizeError: If element has the wrong length.
        """
        arena = self._require_arena()
        payload = self._as_element(element)
        node = _find_value_node(arena, _as_key(key))
        arena.write_value(node, payload)

    def stats(self) -> TrieStats:
        """Return size information; all zeros when uninitialized."""
        if self._arena is None:
            return TrieStats(count=0, element_size=0, live_nodes=0, node_capacity=0)
        return TrieStats(
            count=self._count,
            element_size=self._element_size,
            live_nodes=self._arena.live_count,
            node_capacity=self._arena.capacity,
        )

    def check_integrity(self) -> None:
        """Walk every reachable node and validate the arena bookkeeping.

        Raises:
            NullStructureError: If the trie is not initialized.
            CorruptTreeError: With kind NULL_HEAD when the root is not
                allocated, NULL_NODE for any other inconsistency.
        """
        arena = self._require_arena()
        if not arena.is_live(ROOT_HANDLE):
            raise CorruptTreeError("Root node is not allocated.", ErrorKind.NULL_HEAD)
        stack = [ROOT_HANDLE]
        visited = 0
        values = 0
        while stack:
            handle = stack.pop()
            visited += 1
            if visited > arena.live_count:
                raise CorruptTreeError("Node graph reaches more nodes than are allocated.")
            children = arena.children_of(handle)
            if len(children) != arena.child_count(handle):
                raise CorruptTreeError(
                    f"Node {handle} records {arena.child_count(handle)} children "
                    f"but links {len(children)}."
                )
            for child in children:
                if not arena.is_live(child):
                    raise CorruptTreeError(f"Node {handle} links released node {child}.")
                stack.append(child)
            if arena.has_value(handle):
                values += 1
        if visited != arena.live_count:
            raise CorruptTreeError(
                f"{arena.live_count - visited} allocated nodes are unreachable from the root."
            )
        if arena.live_count + arena.free_count != arena.used_rows:
            raise CorruptTreeError(
                f"Arena has {arena.live_count} live and {arena.free_count} free nodes "
                f"but handed out {arena.used_rows} rows."
            )
        if values != self._count:
            raise CorruptTreeError(
                f"Trie count is {self._count} but {values} value slots are present."
            )

    def _require_arena(self) -> NodeArena:
        if self._arena is None:
            raise NullStructureError(
                "Trie is not initialized. Call create(element_size) before using it."
            )
        return self._arena

    def _as_element(self, element: BytesLike) -> bytes:
        if not isinstance(element, (bytes, bytearray, memoryview)):
            raise TypeError(f"Trie elements must be bytes-like, got {type(element).__name__}.")
        payload = bytes(element)
        if len(payload) != self._element_size:
            raise ElementSizeError(
                f"Element has {len(payload)} bytes; this trie stores "
                f"{self._element_size}-byte elements."
            )
        return payload

    def _as_output_view(self, out: bytearray | memoryview) -> memoryview:
        view = memoryview(out)
        if view.readonly:
            raise TypeError("Output buffer must be writable.")
        view = view.cast("B")
        if view.nbytes != self._element_size:
            raise ElementSizeError(
                f"Output buffer has {view.nbytes} bytes; this trie stores "
                f"{self._element_size}-byte elements."
            )
        return view


def _as_key(key: BytesLike) -> bytes:
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise TypeError(f"Trie keys must be bytes-like, got {type(key).__name__}.")
    return bytes(key)


def _walk(arena: NodeArena, key: bytes, path: list[tuple[int, int]] | None = None) -> int:
    """Follow ``key`` from the root without allocating.

    Args:
        arena: Node storage.
        key: Key bytes.
        path: Optional list that receives each (parent, byte) step.

    Returns:
        Terminal node handle, or EMPTY_CHILD if the path is broken.
    """
    node = ROOT_HANDLE
    for byte in key:
        child = arena.child(node, byte)
        if child == EMPTY_CHILD:
            return EMPTY_CHILD
        if path is not None:
            path.append((node, byte))
        node = child
    return node


def _find_value_node(
    arena: NodeArena,
    key: bytes,
    path: list[tuple[int, int]] | None = None,
) -> int:
    """Return the terminal node of ``key``, requiring a present value."""
    node = _walk(arena, key, path)
    if node == EMPTY_CHILD or not arena.has_value(node):
        raise TrieKeyError(f"Key {_preview_key(key)} has no mapped value.")
    return node


def _prune(arena: NodeArena, node: int, path: list[tuple[int, int]]) -> None:
    """Release ``node`` and its ancestors while they hold nothing."""
    while path and not arena.has_value(node) and arena.child_count(node) == 0:
        parent, byte = path.pop()
        arena.detach_child(parent, byte)
        arena.release(node)
        node = parent


def _discard_chain(arena: NodeArena, parent: int, byte: int) -> None:
    """Release a chain of freshly created single-child nodes."""
    handle = arena.detach_child(parent, byte)
    while handle != EMPTY_CHILD:
        children = arena.children_of(handle)
        arena.release(handle)
        handle = children[0] if children else EMPTY_CHILD


def _preview_key(key: bytes) -> str:
    if len(key) <= _KEY_PREVIEW_LENGTH:
        return repr(key)
    return f"{key[:_KEY_PREVIEW_LENGTH]!r}... ({len(key)} bytes)"
