"""Unit tests for the byte trie method API."""

from __future__ import annotations

import numpy as np
import pytest

from core.config import ByteTrieConfig
from core.errors import (
    CorruptTreeError,
    ElementSizeError,
    ErrorKind,
    NullStructureError,
    TrieAllocationError,
    TrieKeyError,
)
from trie import node_arena
from trie.byte_trie import ByteTrie
from trie.node_arena import NodeArena


def _build_trie(element_size: int = 4, prune_on_remove: bool = True) -> ByteTrie:
    config = ByteTrieConfig(initial_node_capacity=4, prune_on_remove=prune_on_remove)
    return ByteTrie(element_size, config=config)


def test_insert_then_get_round_trips_bytes() -> None:
    """Inserted elements should come back byte-for-byte."""
    trie = _build_trie()
    trie.insert(b"\x00\xff\x10", b"\xde\xad\xbe\xef")

    assert trie.get(b"\x00\xff\x10") == b"\xde\xad\xbe\xef"
    assert trie.count == 1


def test_insert_accepts_any_bytes_like_key() -> None:
    """bytearray and memoryview keys should address the same node as bytes."""
    trie = _build_trie()
    trie.insert(bytearray(b"key"), b"1234")

    assert trie.get(memoryview(b"key")) == b"1234"
    assert b"key" in trie


def test_empty_key_maps_to_root() -> None:
    """The empty key should be storable like any other key."""
    trie = _build_trie()
    trie.insert(b"", b"root")
    trie.insert(b"a", b"leaf")

    assert trie.get(b"") == b"root"
    assert trie.remove(b"") == b"root"
    assert trie.get(b"a") == b"leaf"


def test_reinsert_overwrites_without_counting_twice() -> None:
    """Re-inserting a key should replace its value and keep count distinct."""
    trie = _build_trie()
    trie.insert(b"k", b"1111")
    trie.insert(b"k", b"2222")

    assert trie.get(b"k") == b"2222"
    assert trie.count == 1
    assert len(trie) == 1


@pytest.mark.parametrize("missing", [b"c", b"ca", b"cats", b"dog", b""])
def test_get_misses_for_prefixes_and_extensions(missing: bytes) -> None:
    """Ancestors and extensions of stored keys should not resolve."""
    trie = _build_trie()
    trie.insert(b"cat", b"\x01\x00\x00\x00")

    with pytest.raises(TrieKeyError) as error:
        trie.get(missing)

    assert error.value.kind is ErrorKind.ACCESS_OUT_OF_BOUND
    assert missing not in trie


def test_prefix_keys_are_independent() -> None:
    """A key and its extension should hold separate values."""
    trie = _build_trie()
    trie.insert(b"a", b"AAAA")
    trie.insert(b"ab", b"BBBB")
    trie.insert(b"ac", b"CCCC")

    assert trie.get(b"a") == b"AAAA"
    assert trie.get(b"ab") == b"BBBB"
    assert trie.get(b"ac") == b"CCCC"


def test_remove_returns_element_and_hides_key() -> None:
    """Removed keys should stop resolving while siblings remain."""
    trie = _build_trie()
    trie.insert(b"ab", b"BBBB")
    trie.insert(b"ac", b"CCCC")

    removed = trie.remove(b"ab")

    assert removed == b"BBBB"
    assert trie.count == 1
    with pytest.raises(TrieKeyError):
        trie.get(b"ab")
    assert trie.get(b"ac") == b"CCCC"


def test_remove_missing_key_leaves_tree_unchanged() -> None:
    """A failed remove should not allocate or release anything."""
    trie = _build_trie()
    trie.insert(b"abc", b"1234")
    stats_before = trie.stats()

    for missing in (b"abd", b"ab", b"abcd", b"zzz"):
        with pytest.raises(TrieKeyError):
            trie.remove(missing)

    assert trie.stats() == stats_before
    assert trie.get(b"abc") == b"1234"


def test_remove_on_empty_trie_is_a_miss() -> None:
    """Removing from an empty trie should report a missing key."""
    trie = _build_trie()

    with pytest.raises(TrieKeyError):
        trie.remove(b"anything")


def test_remove_prunes_emptied_branch() -> None:
    """With pruning on, removing every key should leave only the root."""
    trie = _build_trie(prune_on_remove=True)
    trie.insert(b"abc", b"1111")
    trie.insert(b"abd", b"2222")
    trie.insert(b"a", b"3333")

    trie.remove(b"abc")
    assert trie.stats().live_nodes == 4
    trie.remove(b"abd")
    assert trie.stats().live_nodes == 2
    trie.remove(b"a")

    assert trie.stats().live_nodes == 1
    trie.check_integrity()


def test_remove_keeps_ancestor_with_value() -> None:
    """Pruning should stop at an ancestor that still maps a value."""
    trie = _build_trie(prune_on_remove=True)
    trie.insert(b"a", b"3333")
    trie.insert(b"abc", b"1111")

    trie.remove(b"abc")

    assert trie.get(b"a") == b"3333"
    assert trie.stats().live_nodes == 2


def test_remove_without_pruning_keeps_nodes() -> None:
    """With pruning off, emptied nodes should stay allocated."""
    trie = _build_trie(prune_on_remove=False)
    trie.insert(b"abc", b"1111")

    trie.remove(b"abc")

    assert trie.stats().live_nodes == 4
    with pytest.raises(TrieKeyError):
        trie.get(b"abc")
    trie.check_integrity()


def test_pruned_nodes_are_reused() -> None:
    """Released rows should be recycled before the arena grows."""
    trie = _build_trie()
    trie.insert(b"xyz", b"1111")
    capacity = trie.stats().node_capacity
    trie.remove(b"xyz")

    trie.insert(b"uvw", b"2222")

    assert trie.stats().node_capacity == capacity
    assert trie.get(b"uvw") == b"2222"


def test_set_overwrites_existing_value() -> None:
    """set should replace the element of a present key."""
    trie = _build_trie()
    trie.insert(b"k", b"1111")

    trie.set(b"k", b"9999")

    assert trie.get(b"k") == b"9999"
    assert trie.count == 1


@pytest.mark.parametrize("missing", [b"other", b"k", b"kk"])
def test_set_on_missing_key_fails_without_allocating(missing: bytes) -> None:
    """set should fail for absent keys and never create nodes or slots."""
    trie = _build_trie(prune_on_remove=False)
    trie.insert(b"kk", b"1111")
    trie.remove(b"kk")
    stats_before = trie.stats()

    with pytest.raises(TrieKeyError):
        trie.set(missing, b"2222")

    assert trie.stats() == stats_before
    assert trie.count == 0


def test_get_fills_caller_buffer() -> None:
    """get should copy into a writable buffer and return it."""
    trie = _build_trie()
    trie.insert(b"k", b"\x01\x02\x03\x04")
    buffer = bytearray(4)

    result = trie.get(b"k", out=buffer)

    assert result is buffer
    assert bytes(buffer) == b"\x01\x02\x03\x04"


def test_get_rejects_wrong_sized_or_readonly_buffer() -> None:
    """Output buffers must be writable and exactly element_size bytes."""
    trie = _build_trie()
    trie.insert(b"k", b"1234")

    with pytest.raises(ElementSizeError):
        trie.get(b"k", out=bytearray(3))
    with pytest.raises(TypeError):
        trie.get(b"k", out=memoryview(b"1234"))


def test_insert_rejects_wrong_element_size() -> None:
    """Elements must match the configured width."""
    trie = _build_trie(element_size=4)

    with pytest.raises(ElementSizeError):
        trie.insert(b"k", b"123")
    assert trie.count == 0
    assert trie.stats().live_nodes == 1


def test_non_bytes_key_raises_type_error() -> None:
    """Text keys should be rejected rather than encoded implicitly."""
    trie = _build_trie()

    with pytest.raises(TypeError):
        trie.insert("cat", b"1234")  # type: ignore[arg-type]
    assert "cat" not in trie


def test_zero_width_elements_act_as_a_set() -> None:
    """Element size zero should still track key presence."""
    trie = _build_trie(element_size=0)
    trie.insert(b"present", b"")

    assert trie.get(b"present") == b""
    assert b"present" in trie
    assert b"absent" not in trie


@pytest.mark.parametrize("element_size", [-1, 2.5, True, None])
def test_create_rejects_invalid_element_size(element_size: object) -> None:
    """Element size must be a non-negative integer."""
    trie = ByteTrie(config=ByteTrieConfig())

    with pytest.raises(ElementSizeError):
        trie.create(element_size)  # type: ignore[arg-type]


def test_uninitialized_trie_raises_null_structure() -> None:
    """Key operations before create should fail with NullStructureError."""
    trie = ByteTrie(config=ByteTrieConfig())

    for operation in (
        lambda: trie.insert(b"k", b""),
        lambda: trie.get(b"k"),
        lambda: trie.remove(b"k"),
        lambda: trie.set(b"k", b""),
        lambda: b"k" in trie,
    ):
        with pytest.raises(NullStructureError):
            operation()
    assert not trie.initialized


def test_destroy_then_create_behaves_like_new_trie() -> None:
    """A recreated trie should not expose any earlier value."""
    trie = _build_trie()
    trie.insert(b"cat", b"1111")
    trie.insert(b"car", b"2222")

    trie.destroy()
    assert trie.count == 0
    assert trie.element_size == 0
    assert trie.stats().live_nodes == 0
    with pytest.raises(NullStructureError):
        trie.get(b"cat")

    trie.create(2)
    assert trie.element_size == 2
    with pytest.raises(TrieKeyError):
        trie.get(b"cat")


def test_destroy_is_idempotent() -> None:
    """Destroying an empty or already destroyed trie should succeed."""
    trie = ByteTrie(config=ByteTrieConfig())
    trie.destroy()
    trie.create(1)
    trie.destroy()
    trie.destroy()

    assert not trie.initialized


def test_create_discards_existing_content() -> None:
    """Calling create on a live trie should reset it."""
    trie = _build_trie()
    trie.insert(b"k", b"1234")

    trie.create(4)

    assert trie.count == 0
    with pytest.raises(TrieKeyError):
        trie.get(b"k")


def test_many_keys_survive_arena_growth() -> None:
    """Growing the arena should keep every mapping reachable."""
    trie = _build_trie(element_size=2)
    keys = [index.to_bytes(2, "big") + b"-suffix" for index in range(300)]
    for index, key in enumerate(keys):
        trie.insert(key, index.to_bytes(2, "big"))

    assert trie.count == 300
    assert trie.stats().node_capacity > 4
    for index, key in enumerate(keys):
        assert trie.get(key) == index.to_bytes(2, "big")
    trie.check_integrity()


def test_allocation_failure_rolls_back_new_nodes(monkeypatch: pytest.MonkeyPatch) -> None:
    """A failing insert should release the nodes it created."""
    trie = _build_trie()
    trie.insert(b"a", b"1111")
    stats_before = trie.stats()
    original_allocate = NodeArena.allocate
    calls = {"count": 0}

    def _allocate_then_fail(arena: NodeArena) -> int:
        calls["count"] += 1
        if calls["count"] > 2:
            raise TrieAllocationError("out of nodes")
        return original_allocate(arena)

    monkeypatch.setattr(NodeArena, "allocate", _allocate_then_fail)

    with pytest.raises(TrieAllocationError) as error:
        trie.insert(b"abcdef", b"2222")

    assert error.value.kind is ErrorKind.TRY_ADD_EDGE_NO_VERTEX
    assert trie.stats().live_nodes == stats_before.live_nodes
    assert trie.count == 1
    trie.check_integrity()


def test_check_integrity_detects_dangling_child() -> None:
    """A link to a released row should be reported as NULL_NODE."""
    trie = _build_trie()
    trie.insert(b"ab", b"1111")
    arena = trie._arena
    assert arena is not None
    child = arena.child(0, ord("a"))
    arena.release(arena.child(child, ord("b")))

    with pytest.raises(CorruptTreeError) as error:
        trie.check_integrity()

    assert error.value.kind is ErrorKind.NULL_NODE


def test_check_integrity_detects_missing_root() -> None:
    """A released root should be reported as NULL_HEAD."""
    trie = _build_trie()
    arena = trie._arena
    assert arena is not None
    arena.release(0)

    with pytest.raises(CorruptTreeError) as error:
        trie.check_integrity()

    assert error.value.kind is ErrorKind.NULL_HEAD


def test_check_integrity_detects_lost_free_handle() -> None:
    """A released row missing from the free list should be reported."""
    trie = _build_trie()
    trie.insert(b"ab", b"1111")
    trie.remove(b"ab")
    arena = trie._arena
    assert arena is not None
    arena._free_handles.pop()

    with pytest.raises(CorruptTreeError) as error:
        trie.check_integrity()

    assert error.value.kind is ErrorKind.NULL_NODE


def test_create_converts_storage_memory_error(monkeypatch: pytest.MonkeyPatch) -> None:
    """Failing to reserve initial storage should raise TrieAllocationError and keep content."""
    trie = _build_trie()
    trie.insert(b"k", b"1234")

    def _fail(*args: object, **kwargs: object) -> np.ndarray:
        raise MemoryError

    monkeypatch.setattr(node_arena.np, "zeros", _fail)

    with pytest.raises(TrieAllocationError) as error:
        trie.create(8)

    assert error.value.kind is ErrorKind.TRY_ADD_EDGE_NO_VERTEX
    monkeypatch.undo()
    assert trie.element_size == 4
    assert trie.get(b"k") == b"1234"


def test_create_rejects_unreservable_element_size() -> None:
    """An element width far beyond available memory should not leak numpy errors."""
    trie = ByteTrie(config=ByteTrieConfig())

    with pytest.raises(TrieAllocationError):
        trie.create(10**13)
    assert not trie.initialized


def test_explicit_config_ignores_invalid_env_log_level(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A trie built from an explicit config should not read BYTETRIE_* variables."""
    monkeypatch.setenv("BYTETRIE_LOG_LEVEL", "verbose")
    trie = ByteTrie(4, config=ByteTrieConfig(log_level="debug"))

    trie.insert(b"k", b"1234")

    assert trie.get(b"k") == b"1234"
