"""A hierarchical timer wheel for variable expiration.

Nodes are scheduled by their ``expires_at`` (nanoseconds) and linked through
their ``prev_exp``/``next_exp`` attributes into circular bucket lists.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .xmath import round_up_power_of_2_64

_MASK64 = (1 << 64) - 1
_MAX_INT64 = (1 << 63) - 1

_SECOND = 1_000_000_000
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR

BUCKETS = (64, 64, 32, 4, 1)
SPANS = (
    round_up_power_of_2_64(_SECOND),  # 1.07s
    round_up_power_of_2_64(_MINUTE),  # 1.14m
    round_up_power_of_2_64(_HOUR),  # 1.22h
    round_up_power_of_2_64(_DAY),  # 1.63d
    BUCKETS[3] * round_up_power_of_2_64(_DAY),  # 6.5d
    BUCKETS[3] * round_up_power_of_2_64(_DAY),  # 6.5d
)
SHIFT = tuple((span & -span).bit_length() - 1 for span in SPANS[:5])


class _Sentinel:
    """The head of a bucket's circular list."""

    __slots__ = ("prev_exp", "next_exp", "expires_at")

    def __init__(self) -> None:
        self.prev_exp: Any = self
        self.next_exp: Any = self
        self.expires_at = _MAX_INT64


def _link(root: Any, n: Any) -> None:
    n.prev_exp = root.prev_exp
    n.next_exp = root
    root.prev_exp.next_exp = n
    root.prev_exp = n


def _unlink(n: Any) -> None:
    next_node = n.next_exp
    if next_node is not None:
        prev_node = n.prev_exp
        next_node.prev_exp = prev_node
        prev_node.next_exp = next_node


class TimerWheel:
    """Schedules nodes for expiration in O(1) and expires them in batches."""

    def __init__(self, now_nanos: int = 0) -> None:
        self._wheel = [[_Sentinel() for _ in range(count)] for count in BUCKETS]
        self._time = now_nanos & _MASK64

    def _find_bucket(self, expiration: int) -> _Sentinel:
        duration = (expiration - self._time) & _MASK64
        last = len(self._wheel) - 1
        for i in range(last):
            if duration < SPANS[i + 1]:
                ticks = expiration >> SHIFT[i]
                return self._wheel[i][ticks & (BUCKETS[i] - 1)]
        return self._wheel[last][0]

    def add(self, n: Any) -> None:
        """Schedule ``n`` by its ``expires_at``."""
        _link(self._find_bucket(n.expires_at & _MASK64), n)

    def delete(self, n: Any) -> None:
        """Remove ``n`` from its bucket, if it is scheduled."""
        _unlink(n)
        n.next_exp = None
        n.prev_exp = None

    def delete_expired(self, now_nanos: int, expire_node: Callable[[Any, int], None]) -> None:
        """Advance the wheel to ``now_nanos`` and expire what has fallen due.

        ``expire_node`` is called with each expired node and the current time;
        nodes that are not yet due are rescheduled.
        """
        current_time = now_nanos & _MASK64
        prev_time = self._time
        self._time = current_time

        for index, shift in enumerate(SHIFT):
            previous_ticks = prev_time >> shift
            current_ticks = current_time >> shift
            delta = (current_ticks - previous_ticks) & _MASK64
            if delta == 0:
                break
            self._expire_from_level(index, previous_ticks, delta, expire_node)

    def _expire_from_level(
        self,
        index: int,
        prev_ticks: int,
        delta: int,
        expire_node: Callable[[Any, int], None],
    ) -> None:
        mask = BUCKETS[index] - 1
        steps = min(delta + 1, BUCKETS[index])
        start = prev_ticks & mask
        level = self._wheel[index]
        for i in range(start, start + steps):
            root = level[i & mask]
            n = root.next_exp
            root.prev_exp = root
            root.next_exp = root

            while n is not root:
                next_node = n.next_exp
                n.prev_exp = None
                n.next_exp = None

                if (n.expires_at & _MASK64) < self._time:
                    expire_node(n, self._time)
                else:
                    self.add(n)

                n = next_node

    def bucket_nodes(self, level: int) -> list[list[Any]]:
        """Return the scheduled nodes of each bucket on ``level``, in order."""
        result = []
        for root in self._wheel[level]:
            nodes = []
            n = root.next_exp
            while n is not root:
                nodes.append(n)
                n = n.next_exp
            result.append(nodes)
        return result