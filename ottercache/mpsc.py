"""A bounded multiple-producer / single-consumer FIFO queue."""

from __future__ import annotations

import threading
from collections import deque
from typing import Generic, TypeVar

from .xmath import round_up_power_of_2

T = TypeVar("T")


class MPSCQueue(Generic[T]):
    """A FIFO queue for many producers and one consumer.

    Both capacities are rounded up to a power of two. The queue holds at
    most ``capacity()`` items; pushing onto a full queue fails instead of
    blocking, and popping from an empty queue returns None.
    """

    def __init__(self, initial_capacity: int, max_capacity: int) -> None:
        if initial_capacity < 2:
            raise ValueError(
                f"initial capacity must be 2 or more. initial_capacity = {initial_capacity}"
            )
        if max_capacity < 4:
            raise ValueError(f"max capacity must be 4 or more. max_capacity = {max_capacity}")

        p2_initial = round_up_power_of_2(initial_capacity)
        p2_max = round_up_power_of_2(max_capacity)
        if p2_max < p2_initial:
            raise ValueError(
                "initial capacity cannot exceed maximum capacity (both rounded up to a "
                f"power of 2). initial_capacity = {initial_capacity}, "
                f"max_capacity = {max_capacity}"
            )

        self._initial_capacity = p2_initial
        self._capacity = p2_max
        self._items: deque[T] = deque()
        self._lock = threading.Lock()

    def try_push(self, item: T) -> bool:
        """Append ``item`` unless the queue is full; return whether it was added."""
        if item is None:
            raise ValueError("cannot push None onto the queue")
        with self._lock:
            if len(self._items) >= self._capacity:
                return False
            self._items.append(item)
            return True

    def try_pop(self) -> T | None:
        """Remove and return the oldest item, or None when the queue is empty."""
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    def is_empty(self) -> bool:
        return not self._items

    def capacity(self) -> int:
        """Return the maximum number of items the queue can hold."""
        return self._capacity

    def __len__(self) -> int:
        return len(self._items)