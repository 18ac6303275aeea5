"""A concurrent hash map of cache nodes.

The table is split into buckets, each guarded by its own lock, so that
writers touching different buckets do not block each other. Readers take
no locks. Every bucket holds a chain of slots in groups of
``NODES_PER_BUCKET``. The table grows when a chain runs out of free slots
and the map is loaded past ``LOAD_FACTOR``. It shrinks, down to its initial
length, when a deletion empties a group of slots and the map has become
sparse.

Stored nodes are any objects with a ``key`` attribute.
"""

from __future__ import annotations

import enum
import threading
from collections.abc import Callable, Iterator
from typing import Any

from .xmath import round_up_power_of_2
from .xruntime import Hasher

NODES_PER_BUCKET = 5
LOAD_FACTOR = 0.75
SHRINK_FRACTION = 128
DEFAULT_MIN_TABLE_LEN = 32


class _Resize(enum.Enum):
    GROW = 0
    SHRINK = 1
    CLEAR = 2


class _Outcome(enum.Enum):
    DONE = 0
    GROW = 1
    SHRINK = 2


class _Bucket:
    __slots__ = ("lock", "slots")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.slots: list[Any] = [None] * NODES_PER_BUCKET

    def append(self, node: Any) -> None:
        for idx, slot in enumerate(self.slots):
            if slot is None:
                self.slots[idx] = node
                return
        self.slots.extend([node] + [None] * (NODES_PER_BUCKET - 1))

    def nodes(self) -> list[Any]:
        return [n for n in self.slots if n is not None]


class _Table:
    def __init__(self, length: int) -> None:
        self.buckets = [_Bucket() for _ in range(length)]
        self.hasher = Hasher()
        self._size = 0
        self._size_lock = threading.Lock()

    def bucket_for(self, key: Any) -> _Bucket:
        index = (self.hasher.hash(key) >> 7) & (len(self.buckets) - 1)
        return self.buckets[index]

    def add_size(self, delta: int) -> None:
        with self._size_lock:
            self._size += delta

    @property
    def size(self) -> int:
        return self._size


class ConcurrentMap:
    """A thread-safe map from keys to nodes, updated through ``compute``."""

    def __init__(self, size_hint: int | None = None) -> None:
        if size_hint is None or size_hint <= DEFAULT_MIN_TABLE_LEN * NODES_PER_BUCKET:
            length = DEFAULT_MIN_TABLE_LEN
        else:
            length = round_up_power_of_2(int((size_hint / NODES_PER_BUCKET) / LOAD_FACTOR))
        table = _Table(length)
        self._min_table_len = length
        self._table = table
        self._resizing = False
        self._resize_cond = threading.Condition()
        self.total_growths = 0
        self.total_shrinks = 0

    def get(self, key: Any) -> Any:
        """Return the node stored for ``key``, or None."""
        bucket = self._table.bucket_for(key)
        for node in list(bucket.slots):
            if node is not None and node.key == key:
                return node
        return None

    def compute(self, key: Any, compute_func: Callable[[Any], Any]) -> Any:
        """Replace, insert or delete the node for ``key``.

        ``compute_func`` receives the current node (or None) and returns the
        node to store, or None to delete. It runs under the bucket's lock and
        must not use this map. Returns the stored node, or None.
        """
        while True:
            table = self._table
            bucket = table.bucket_for(key)
            bucket.lock.acquire()
            if self._resizing:
                bucket.lock.release()
                self._wait_for_resize()
                continue
            if table is not self._table:
                bucket.lock.release()
                continue
            try:
                outcome, result = self._compute_locked(table, bucket, key, compute_func)
            finally:
                bucket.lock.release()
            if outcome is _Outcome.GROW:
                self._resize(table, _Resize.GROW)
                continue
            if outcome is _Outcome.SHRINK:
                self._resize(table, _Resize.SHRINK)
            return result

    def _compute_locked(self, table, bucket, key, compute_func):
        slots = bucket.slots
        empty_idx = None
        for idx, node in enumerate(slots):
            if node is None:
                if empty_idx is None:
                    empty_idx = idx
                continue
            if node.key == key:
                new_node = compute_func(node)
                if new_node is None:
                    slots[idx] = None
                    table.add_size(-1)
                    start = idx - idx % NODES_PER_BUCKET
                    group = slots[start : start + NODES_PER_BUCKET]
                    if all(s is None for s in group):
                        return _Outcome.SHRINK, None
                    return _Outcome.DONE, None
                slots[idx] = new_node
                return _Outcome.DONE, new_node

        if empty_idx is not None:
            new_node = compute_func(None)
            if new_node is not None:
                slots[empty_idx] = new_node
                table.add_size(1)
            return _Outcome.DONE, new_node

        grow_threshold = int(len(table.buckets) * NODES_PER_BUCKET * LOAD_FACTOR)
        if table.size > grow_threshold:
            return _Outcome.GROW, None

        new_node = compute_func(None)
        if new_node is not None:
            slots.extend([new_node] + [None] * (NODES_PER_BUCKET - 1))
            table.add_size(1)
        return _Outcome.DONE, new_node

    def _wait_for_resize(self) -> None:
        with self._resize_cond:
            while self._resizing:
                self._resize_cond.wait()

    def _resize(self, known: _Table, hint: _Resize) -> None:
        known_len = len(known.buckets)
        if hint is _Resize.SHRINK:
            if (
                self._min_table_len == known_len
                or known.size > (known_len * NODES_PER_BUCKET) // SHRINK_FRACTION
            ):
                return

        with self._resize_cond:
            if self._resizing:
                while self._resizing:
                    self._resize_cond.wait()
                return
            self._resizing = True

        try:
            table = self._table
            table_len = len(table.buckets)
            if hint is _Resize.GROW:
                self.total_growths += 1
                new_table = _Table(table_len << 1)
            elif hint is _Resize.SHRINK:
                threshold = (table_len * NODES_PER_BUCKET) // SHRINK_FRACTION
                if not (table_len > self._min_table_len and table.size <= threshold):
                    return
                self.total_shrinks += 1
                new_table = _Table(table_len >> 1)
            else:
                new_table = _Table(self._min_table_len)

            if hint is not _Resize.CLEAR:
                copied = 0
                for bucket in table.buckets:
                    with bucket.lock:
                        for node in bucket.nodes():
                            new_table.bucket_for(node.key).append(node)
                            copied += 1
                new_table.add_size(copied)
            self._table = new_table
        finally:
            with self._resize_cond:
                self._resizing = False
                self._resize_cond.notify_all()

    def range(self, fn: Callable[[Any], bool]) -> None:
        """Call ``fn`` for each node until it returns a false value.

        The nodes of one bucket are copied under its lock and ``fn`` is called
        without it, so ``fn`` may modify the map.
        """
        for node in self:
            if not fn(node):
                return

    def __iter__(self) -> Iterator[Any]:
        table = self._table
        for bucket in table.buckets:
            with bucket.lock:
                nodes = bucket.nodes()
            yield from nodes

    def clear(self) -> None:
        """Remove every node."""
        self._resize(self._table, _Resize.CLEAR)

    def table_length(self) -> int:
        """Return the number of buckets in the current table."""
        return len(self._table.buckets)

    def __len__(self) -> int:
        return self._table.size