"""Runtime helpers: randomness, parallelism and seeded hashing."""

import os
import random

CACHE_LINE_SIZE = 64
MAX_DURATION = (1 << 63) - 1

_MASK64 = (1 << 64) - 1


def fastrand() -> int:
    """Return a non-cryptographic random unsigned 32-bit integer."""
    return random.getrandbits(32)


def parallelism() -> int:
    """Return the maximum number of threads that can run at the same time."""
    num_cpu = os.cpu_count() or 1
    try:
        procs = len(os.sched_getaffinity(0))
    except AttributeError:
        procs = num_cpu
    return max(1, min(procs, num_cpu))


def _mix64(z: int) -> int:
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK64
    return z ^ (z >> 31)


class Hasher:
    """Hashes hashable values to unsigned 64-bit integers with a per-instance seed."""

    def __init__(self, seed: int | None = None) -> None:
        self._seed = random.getrandbits(64) if seed is None else seed & _MASK64

    def hash(self, value) -> int:
        """Return a 64-bit hash of ``value``; raises TypeError if it is unhashable."""
        return _mix64((hash(value) ^ self._seed) & _MASK64)