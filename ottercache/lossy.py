"""Lossy buffers that carry nodes from many producers to one consumer.

A producer never blocks: an add may fail when the buffer is full or when
another producer got there first. The striped buffer spreads producers over
several rings and adds rings when it sees contention, up to a limit.
"""

from __future__ import annotations

import enum
import threading
from collections.abc import Callable
from typing import Any

from .xruntime import fastrand

BUFFER_SIZE = 16
ATTEMPTS = 3

_MASK = BUFFER_SIZE - 1
_MASK64 = (1 << 64) - 1


class Status(enum.IntEnum):
    """The result of adding a node to a buffer."""

    SUCCESS = 0
    FAILED = -1
    FULL = 1


class Ring:
    """A bounded ring buffer of ``BUFFER_SIZE`` nodes.

    Read and write counts increase monotonically (modulo 2**64) and index the
    slots by their low bits. Producers race for the next write count and do
    not retry; the single consumer takes every published node.
    """

    def __init__(self, n: Any = None, *, start: int = 0) -> None:
        start &= _MASK64
        self._head = start
        self._tail = start
        self._buffer: list[Any] = [None] * BUFFER_SIZE
        self._lock = threading.Lock()
        if n is not None:
            self._buffer[start & _MASK] = n
            self._tail = (start + 1) & _MASK64

    def add(self, n: Any) -> Status:
        """Try once to add ``n``; never blocks."""
        if n is None:
            raise ValueError("cannot add None to a buffer")
        head = self._head
        tail = self._tail
        if (tail - head) & _MASK64 >= BUFFER_SIZE:
            return Status.FULL
        if not self._lock.acquire(blocking=False):
            return Status.FAILED
        try:
            if self._tail != tail:
                return Status.FAILED
            # Publish the slot before the new write count becomes visible.
            self._buffer[tail & _MASK] = n
            self._tail = (tail + 1) & _MASK64
            return Status.SUCCESS
        finally:
            self._lock.release()

    def drain_to(self, consumer: Callable[[Any], None]) -> None:
        """Hand every published node to ``consumer`` in insertion order."""
        head = self._head
        tail = self._tail
        buffer = self._buffer
        while head != tail:
            index = head & _MASK
            n = buffer[index]
            if n is None:
                # Not published yet.
                break
            buffer[index] = None
            consumer(n)
            head = (head + 1) & _MASK64
        self._head = head

    def __len__(self) -> int:
        return (self._tail - self._head) & _MASK64


class _Token:
    __slots__ = ("idx",)

    def __init__(self) -> None:
        self.idx = fastrand()


class StripedBuffer:
    """A multiple-producer / single-consumer buffer built from rings.

    Elements are neither FIFO nor LIFO ordered, and additions may be rejected
    when the buffer is full or contended.
    """

    def __init__(self, max_len: int) -> None:
        self._max_len = max_len
        self._stripes: list[Ring | None] | None = None
        self._busy = threading.Lock()
        self._local = threading.local()

    def _token(self) -> _Token:
        token = getattr(self._local, "token", None)
        if token is None:
            token = _Token()
            self._local.token = token
        return token

    def add(self, n: Any) -> Status:
        """Try to add ``n``; may fail spuriously under contention."""
        if n is None:
            raise ValueError("cannot add None to a buffer")
        token = self._token()
        stripes = self._stripes
        if stripes is None:
            return self._expand_or_retry(n, token, True)
        buffer = stripes[token.idx & (len(stripes) - 1)]
        if buffer is None:
            return self._expand_or_retry(n, token, True)
        result = buffer.add(n)
        if result is Status.FAILED:
            return self._expand_or_retry(n, token, False)
        return result

    def _expand_or_retry(self, n: Any, token: _Token, was_uncontended: bool) -> Status:
        result = Status.FAILED
        # True if the last slot was non-empty.
        collide = True

        for _ in range(ATTEMPTS):
            stripes = self._stripes
            if stripes:
                buffer = stripes[token.idx & (len(stripes) - 1)]
                if buffer is None:
                    if self._busy.acquire(blocking=False):
                        created = False
                        try:
                            current = self._stripes
                            if current:
                                j = token.idx & (len(current) - 1)
                                if current[j] is None:
                                    current[j] = Ring(n)
                                    created = True
                        finally:
                            self._busy.release()
                        if created:
                            return Status.SUCCESS
                        # The slot is now non-empty.
                        continue
                    collide = False
                elif not was_uncontended:
                    # The add is already known to have failed; rehash.
                    was_uncontended = True
                else:
                    result = buffer.add(n)
                    if result is not Status.FAILED:
                        return result
                    if len(stripes) >= self._max_len or self._stripes is not stripes:
                        # At the maximum size or stale.
                        collide = False
                    elif not collide:
                        collide = True
                    elif self._busy.acquire(blocking=False):
                        try:
                            if self._stripes is stripes:
                                self._stripes = list(stripes) + [None] * len(stripes)
                        finally:
                            self._busy.release()
                        collide = False
                        continue
                token.idx = fastrand()
            elif self._stripes is stripes and self._busy.acquire(blocking=False):
                initialized = False
                try:
                    if self._stripes is stripes:
                        self._stripes = [Ring(n)]
                        initialized = True
                finally:
                    self._busy.release()
                if initialized:
                    return Status.SUCCESS

        return result

    def drain_to(self, consumer: Callable[[Any], None]) -> None:
        """Hand every buffered node to ``consumer``.

        The caller must be the only consumer at a time.
        """
        stripes = self._stripes
        if stripes is None:
            return
        for ring in list(stripes):
            if ring is not None:
                ring.drain_to(consumer)

    def stripe_count(self) -> int:
        """Return the number of ring slots currently allocated."""
        stripes = self._stripes
        return 0 if stripes is None else len(stripes)

    def __len__(self) -> int:
        stripes = self._stripes
        if stripes is None:
            return 0
        return sum(len(ring) for ring in list(stripes) if ring is not None)