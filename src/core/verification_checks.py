"""Verification check implementations for bytetrie.

Checks run in order against one shared trie, so later checks rely on
the keys earlier checks left behind.
"""

from __future__ import annotations

import random
from typing import Callable

from core.config import ByteTrieConfig
from core.errors import ByteTrieVerificationError, ErrorKind, TrieKeyError
from core.verification_types import VerificationMode, VerificationRuntime
from trie.byte_trie import ByteTrie
from trie.operations import trie_get, trie_insert, trie_remove

CheckCallable = Callable[[VerificationRuntime], str]
CheckRow = tuple[str, str, CheckCallable]

_ELEMENT_SIZE = 4
_CAT_VALUE = bytes([1, 0, 0, 0])
_CAR_VALUE = bytes([2, 0, 0, 0])
_GROWTH_KEY_COUNT = 500
_GROWTH_MAX_KEY_LENGTH = 12


def build_runtime(config: ByteTrieConfig, random_seed: int) -> VerificationRuntime:
    """Build runtime state used by verification checks."""
    return VerificationRuntime(
        trie=ByteTrie(_ELEMENT_SIZE, config=config),
        element_size=_ELEMENT_SIZE,
        random_seed=random_seed,
    )


def build_checks(mode: VerificationMode) -> tuple[CheckRow, ...]:
    """Build ordered check list for one verification mode."""
    checks: list[CheckRow] = [
        ("V001", "Round Trip", check_round_trip),
        ("V002", "Prefix Miss", check_prefix_miss),
        ("V003", "Overwrite", check_overwrite),
        ("V004", "Remove", check_remove),
        ("V005", "Set Absent Key", check_set_absent_key),
        ("V006", "Handle Outcomes", check_handle_outcomes),
        ("V007", "Teardown", check_teardown),
    ]
    if mode == "full":
        checks.append(("V008", "Arena Growth", check_arena_growth))
    return tuple(checks)


def check_round_trip(runtime: VerificationRuntime) -> str:
    """Insert two sibling keys and read both back."""
    runtime.trie.insert(b"cat", _CAT_VALUE)
    runtime.trie.insert(b"car", _CAR_VALUE)
    _expect(runtime.trie.get(b"cat") == _CAT_VALUE, "get(b'cat') returned the wrong element.")
    _expect(runtime.trie.get(b"car") == _CAR_VALUE, "get(b'car') returned the wrong element.")
    return f"count={runtime.trie.count}"


def check_prefix_miss(runtime: VerificationRuntime) -> str:
    """An ancestor or extension of a stored key has no value."""
    for key in (b"ca", b"cats", b""):
        _expect_key_error(runtime.trie, key)
    return "misses=3"


def check_overwrite(runtime: VerificationRuntime) -> str:
    """Re-inserting a key replaces its value without growing count."""
    count_before = runtime.trie.count
    runtime.trie.insert(b"cat", bytes([9, 9, 9, 9]))
    _expect(runtime.trie.get(b"cat") == bytes([9, 9, 9, 9]), "Overwrite did not replace value.")
    _expect(runtime.trie.count == count_before, "Overwrite changed the live key count.")
    runtime.trie.insert(b"cat", _CAT_VALUE)
    return f"count={runtime.trie.count}"


def check_remove(runtime: VerificationRuntime) -> str:
    """Removing a key hides it and leaves siblings intact."""
    removed = runtime.trie.remove(b"cat")
    _expect(removed == _CAT_VALUE, "remove(b'cat') returned the wrong element.")
    _expect_key_error(runtime.trie, b"cat")
    _expect(runtime.trie.get(b"car") == _CAR_VALUE, "Sibling key lost after remove.")
    try:
        runtime.trie.remove(b"cat")
    except TrieKeyError:
        pass
    else:
        raise ByteTrieVerificationError("Second remove(b'cat') did not fail.")
    runtime.trie.check_integrity()
    return f"count={runtime.trie.count} live_nodes={runtime.trie.stats().live_nodes}"


def check_set_absent_key(runtime: VerificationRuntime) -> str:
    """set on a missing key fails and allocates nothing."""
    nodes_before = runtime.trie.stats().live_nodes
    try:
        runtime.trie.set(b"dog", _CAT_VALUE)
    except TrieKeyError:
        pass
    else:
        raise ByteTrieVerificationError("set(b'dog') succeeded on a missing key.")
    _expect(runtime.trie.stats().live_nodes == nodes_before, "set allocated nodes.")
    return f"live_nodes={nodes_before}"


def check_handle_outcomes(runtime: VerificationRuntime) -> str:
    """Handle operations report tagged outcomes instead of raising."""
    absent = trie_get(None, b"car")
    _expect(absent.kind is ErrorKind.NULL_STRUCTURE, f"Absent handle gave {absent.kind.name}.")
    miss = trie_remove(runtime.trie, b"cat")
    _expect(miss.kind is ErrorKind.ACCESS_OUT_OF_BOUND, f"Missing key gave {miss.kind.name}.")
    hit = trie_get(runtime.trie, b"car")
    _expect(hit.ok and hit.value == _CAR_VALUE, "Handle get did not return the element.")
    return f"absent={absent.kind.name} miss={miss.kind.name}"


def check_teardown(runtime: VerificationRuntime) -> str:
    """destroy followed by create yields an empty trie."""
    runtime.trie.destroy()
    runtime.trie.destroy()
    runtime.trie.create(runtime.element_size)
    _expect(runtime.trie.count == 0, "Recreated trie is not empty.")
    _expect_key_error(runtime.trie, b"car")
    return f"live_nodes={runtime.trie.stats().live_nodes}"


def check_arena_growth(runtime: VerificationRuntime) -> str:
    """Many random keys survive arena growth and remove cleanly."""
    rng = random.Random(runtime.random_seed)
    expected: dict[bytes, bytes] = {}
    for _ in range(_GROWTH_KEY_COUNT):
        key = bytes(rng.randrange(256) for _ in range(rng.randrange(_GROWTH_MAX_KEY_LENGTH)))
        element = bytes(rng.randrange(256) for _ in range(runtime.element_size))
        outcome = trie_insert(runtime.trie, key, element)
        _expect(outcome.ok, f"Insert failed with {outcome.kind.name}.")
        expected[key] = element
    _expect(runtime.trie.count == len(expected), "Count does not match distinct keys.")
    for key, element in expected.items():
        _expect(runtime.trie.get(key) == element, f"Lost key {key!r} after growth.")
    runtime.trie.check_integrity()
    stats = runtime.trie.stats()
    for key in expected:
        runtime.trie.remove(key)
    runtime.trie.check_integrity()
    return (
        f"keys={len(expected)} peak_nodes={stats.live_nodes} "
        f"capacity={stats.node_capacity} "
        f"final_nodes={runtime.trie.stats().live_nodes}"
    )


def _expect(condition: bool, message: str) -> None:
    if not condition:
        raise ByteTrieVerificationError(message)


def _expect_key_error(trie: ByteTrie, key: bytes) -> None:
    try:
        trie.get(key)
    except TrieKeyError:
        return
    raise ByteTrieVerificationError(f"get({key!r}) succeeded but the key has no value.")
