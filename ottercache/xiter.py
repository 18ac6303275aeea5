"""Iterator combinators."""

from collections.abc import Callable, Iterable, Iterator
from typing import TypeVar

T = TypeVar("T")

_MISSING = object()


def concat(*seqs: Iterable[T]) -> Iterator[T]:
    """Yield the items of each sequence in turn."""
    for seq in seqs:
        yield from seq


def merge_func(x: Iterable[T], y: Iterable[T], f: Callable[[T, T], int]) -> Iterator[T]:
    """Merge two sequences ordered by the comparison ``f``.

    Equal values from ``x`` come before those from ``y``.
    """
    y_iter = iter(y)
    v2 = next(y_iter, _MISSING)
    for v1 in x:
        while v2 is not _MISSING and f(v1, v2) > 0:
            yield v2
            v2 = next(y_iter, _MISSING)
        yield v1
    while v2 is not _MISSING:
        yield v2
        v2 = next(y_iter, _MISSING)