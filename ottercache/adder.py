"""A striped unsigned 64-bit counter."""

import threading

from .xmath import round_up_power_of_2
from .xruntime import fastrand, parallelism

_MASK64 = (1 << 64) - 1


class Adder:
    """A counter split into stripes to reduce contention between threads."""

    def __init__(self) -> None:
        count = round_up_power_of_2(parallelism())
        self._stripes = [0] * count
        self._locks = [threading.Lock() for _ in range(count)]
        self._mask = count - 1
        self._local = threading.local()

    def add(self, delta: int) -> None:
        """Add ``delta`` to the counter."""
        idx = getattr(self._local, "idx", None)
        if idx is None:
            idx = fastrand()
        while True:
            i = idx & self._mask
            lock = self._locks[i]
            if lock.acquire(blocking=False):
                try:
                    self._stripes[i] = (self._stripes[i] + delta) & _MASK64
                finally:
                    lock.release()
                break
            # Contended: try another randomly selected stripe.
            idx = fastrand()
        self._local.idx = idx

    def value(self) -> int:
        """Return the current total; concurrent additions may not be included."""
        return sum(self._stripes) & _MASK64