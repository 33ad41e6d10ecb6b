"""Numpy-backed node pool for the byte trie.

Every node is a row across a set of parallel matrices: 256 child
handles, a fixed-width value slot, and a few per-node flags. Released
rows go on a free list and are handed out again before the arena grows.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from core.constants import (
    BYTE_FANOUT,
    DEFAULT_GROWTH_FACTOR,
    DEFAULT_INITIAL_NODE_CAPACITY,
    DEFAULT_LOG_LEVEL,
    ELEMENT_BYTE_DTYPE,
    EMPTY_CHILD,
    NODE_HANDLE_DTYPE,
)
from core.errors import TrieAllocationError
from core.logging_config import get_logger


class NodeArena:
    """Fixed-fanout node storage addressed by integer handles."""

    def __init__(
        self,
        element_size: int,
        initial_capacity: int = DEFAULT_INITIAL_NODE_CAPACITY,
        growth_factor: int = DEFAULT_GROWTH_FACTOR,
        log_level: str = DEFAULT_LOG_LEVEL,
    ) -> None:
        self._logger = get_logger(__name__, log_level)
        self._element_size = element_size
        self._growth_factor = growth_factor
        self._free_handles: list[int] = []
        self._next_unused = 0
        self._live_count = 0
        (
            self._children,
            self._values,
            self._has_value,
            self._child_count,
            self._live,
        ) = self._reserve(None, initial_capacity)
        # First row is the root.
        self.allocate()

    @property
    def capacity(self) -> int:
        """Node rows currently reserved."""
        return int(self._children.shape[0])

    @property
    def live_count(self) -> int:
        """Allocated nodes, root included."""
        return self._live_count

    @property
    def free_count(self) -> int:
        """Released rows waiting for reuse."""
        return len(self._free_handles)

    @property
    def used_rows(self) -> int:
        """Rows handed out at least once; live plus free when consistent."""
        return self._next_unused

    def allocate(self) -> int:
        """Reserve an empty node row.

        Returns:
            Handle of a node with no value and no children.

        Raises:
            TrieAllocationError: If the arena cannot grow.
        """
        if self._free_handles:
            handle = self._free_handles.pop()
        else:
            if self._next_unused == self.capacity:
                self._grow()
            handle = self._next_unused
            self._next_unused += 1
        self._live[handle] = True
        self._live_count += 1
        return handle

    def release(self, handle: int) -> None:
        """Return a node row to the free list.

        The caller detaches the node from its parent first; children of
        the released row are not followed.
        """
        self._children[handle].fill(EMPTY_CHILD)
        self._values[handle].fill(0)
        self._has_value[handle] = False
        self._child_count[handle] = 0
        self._live[handle] = False
        self._free_handles.append(handle)
        self._live_count -= 1

    def child(self, handle: int, byte: int) -> int:
        """Return the child handle for one byte, or EMPTY_CHILD."""
        return int(self._children[handle, byte])

    def attach_child(self, parent: int, byte: int) -> int:
        """Allocate a node and link it under ``parent`` at ``byte``."""
        child = self.allocate()
        self._children[parent, byte] = child
        self._child_count[parent] += 1
        return child

    def detach_child(self, parent: int, byte: int) -> int:
        """Unlink the child at ``byte`` and return its handle."""
        child = int(self._children[parent, byte])
        if child != EMPTY_CHILD:
            self._children[parent, byte] = EMPTY_CHILD
            self._child_count[parent] -= 1
        return child

    def children_of(self, handle: int) -> list[int]:
        """Return present child handles ordered by byte value."""
        row = self._children[handle]
        return [int(child) for child in row[row != EMPTY_CHILD]]

    def child_count(self, handle: int) -> int:
        return int(self._child_count[handle])

    def is_live(self, handle: int) -> bool:
        return 0 <= handle < self.capacity and bool(self._live[handle])

    def has_value(self, handle: int) -> bool:
        return bool(self._has_value[handle])

    def read_value(self, handle: int) -> bytes:
        """Copy the value slot of a node out as bytes."""
        return self._values[handle].tobytes()

    def write_value(self, handle: int, element: bytes) -> None:
        """Copy ``element`` into the value slot, marking it present."""
        self._values[handle] = np.frombuffer(element, dtype=ELEMENT_BYTE_DTYPE)
        self._has_value[handle] = True

    def clear_value(self, handle: int) -> bytes:
        """Detach the value slot and return its previous content."""
        removed = self._values[handle].tobytes()
        self._values[handle].fill(0)
        self._has_value[handle] = False
        return removed

    def _grow(self) -> None:
        """Multiply capacity by the growth factor, keeping every row."""
        capacity = self.capacity
        new_capacity = capacity * self._growth_factor
        (
            self._children,
            self._values,
            self._has_value,
            self._child_count,
            self._live,
        ) = self._reserve(capacity, new_capacity)
        self._logger.debug(
            "node_arena_grown",
            capacity=capacity,
            new_capacity=new_capacity,
            element_size=self._element_size,
        )

    def _reserve(self, capacity: int | None, new_capacity: int) -> tuple[np.ndarray, ...]:
        """Build per-node arrays with ``new_capacity`` rows.

        Args:
            capacity: Current row count whose content is copied over, or
                None when the arena has no storage yet.
            new_capacity: Row count of the new arrays.

        Returns:
            Children, values, has_value, child_count and live arrays.

        Raises:
            TrieAllocationError: If numpy cannot allocate the arrays.
        """
        try:
            if capacity is None:
                return (
                    np.full((new_capacity, BYTE_FANOUT), EMPTY_CHILD, dtype=NODE_HANDLE_DTYPE),
                    np.zeros((new_capacity, self._element_size), dtype=ELEMENT_BYTE_DTYPE),
                    np.zeros(new_capacity, dtype=bool),
                    np.zeros(new_capacity, dtype=NODE_HANDLE_DTYPE),
                    np.zeros(new_capacity, dtype=bool),
                )
            return (
                _extended(self._children, new_capacity, EMPTY_CHILD),
                _extended(self._values, new_capacity, 0),
                _extended(self._has_value, new_capacity, False),
                _extended(self._child_count, new_capacity, 0),
                _extended(self._live, new_capacity, False),
            )
        except (MemoryError, ValueError) as error:
            # numpy raises ValueError when the requested size overflows.
            self._logger.warning(
                "node_arena_allocation_failed",
                capacity=capacity or 0,
                requested_capacity=new_capacity,
                element_size=self._element_size,
            )
            raise TrieAllocationError(
                f"Cannot reserve {new_capacity} nodes of {self._element_size}-byte "
                f"elements: {error}"
            ) from error


def _extended(array: np.ndarray, new_capacity: int, fill_value: Any) -> np.ndarray:
    """Copy ``array`` into a larger first dimension filled with ``fill_value``.

    Args:
        array: Existing per-node array.
        new_capacity: Row count of the result.
        fill_value: Value for the new rows.

    Returns:
        New array sharing dtype and trailing shape with ``array``.
    """
    extended = np.full((new_capacity, *array.shape[1:]), fill_value, dtype=array.dtype)
    extended[: array.shape[0]] = array
    return extended
