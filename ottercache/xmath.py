"""Small integer helpers with fixed-width semantics."""

MAX_INT64 = (1 << 63) - 1
_MASK32 = (1 << 32) - 1
_MASK64 = (1 << 64) - 1


def _to_int64(value: int) -> int:
    value &= _MASK64
    return value - (1 << 64) if value > MAX_INT64 else value


def absolute(a: int) -> int:
    """Return the absolute value of ``a``."""
    return -a if a < 0 else a


def round_up_power_of_2(v: int) -> int:
    """Round a 32-bit unsigned value up to the next power of two (0 maps to 1)."""
    v &= _MASK32
    if v == 0:
        return 1
    v = (v - 1) & _MASK32
    for shift in (1, 2, 4, 8, 16):
        v |= v >> shift
    return (v + 1) & _MASK32


def round_up_power_of_2_64(x: int) -> int:
    """Round a 64-bit unsigned value up to the next power of two (0 maps to 1)."""
    x &= _MASK64
    if x == 0:
        return 1
    x = (x - 1) & _MASK64
    for shift in (1, 2, 4, 8, 16, 32):
        x |= x >> shift
    return (x + 1) & _MASK64


def saturated_add(a: int, b: int) -> int:
    """Add two signed 64-bit values, returning ``MAX_INT64`` when the sum wraps."""
    s = _to_int64(a + b)
    if s < a or s < b:
        return MAX_INT64
    return s