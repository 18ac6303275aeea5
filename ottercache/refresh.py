"""Calculators that decide when cache entries become eligible for refresh.

Durations are integers of nanoseconds; the ready-made constructors also
accept :class:`datetime.timedelta`. An entry passed to a calculator must
offer ``refreshable_after()``, the time left until it may be refreshed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import timedelta
from typing import Any

_NANOS_PER_SECOND = 1_000_000_000


def _to_nanos(duration: int | timedelta) -> int:
    if isinstance(duration, timedelta):
        return (
            (duration.days * 86_400 + duration.seconds) * _NANOS_PER_SECOND
            + duration.microseconds * 1_000
        )
    return int(duration)


class RefreshCalculator(ABC):
    """Computes after how long an entry becomes eligible for refresh."""

    @abstractmethod
    def refresh_after_create(self, entry: Any) -> int:
        """Return the refresh delay after the entry's creation."""

    @abstractmethod
    def refresh_after_update(self, entry: Any, old_value: Any) -> int:
        """Return the refresh delay after an explicit update of the value."""

    @abstractmethod
    def refresh_after_reload(self, entry: Any, old_value: Any) -> int:
        """Return the refresh delay after the value was reloaded."""

    @abstractmethod
    def refresh_after_reload_failure(self, entry: Any, err: BaseException | None) -> int:
        """Return the refresh delay after a reload failed."""


class _RefreshCreating(RefreshCalculator):
    def __init__(self, f: Callable[[Any], int]) -> None:
        self._f = f

    def refresh_after_create(self, entry: Any) -> int:
        return self._f(entry)

    def refresh_after_update(self, entry: Any, old_value: Any) -> int:
        return entry.refreshable_after()

    def refresh_after_reload(self, entry: Any, old_value: Any) -> int:
        return entry.refreshable_after()

    def refresh_after_reload_failure(self, entry: Any, err: BaseException | None) -> int:
        return entry.refreshable_after()


class _RefreshWriting(RefreshCalculator):
    def __init__(self, f: Callable[[Any], int]) -> None:
        self._f = f

    def refresh_after_create(self, entry: Any) -> int:
        return self._f(entry)

    def refresh_after_update(self, entry: Any, old_value: Any) -> int:
        return self._f(entry)

    def refresh_after_reload(self, entry: Any, old_value: Any) -> int:
        return self._f(entry)

    def refresh_after_reload_failure(self, entry: Any, err: BaseException | None) -> int:
        return entry.refreshable_after()


def refresh_creating(duration: int | timedelta) -> RefreshCalculator:
    """Refresh once ``duration`` has passed since creation; updates keep the time."""
    nanos = _to_nanos(duration)
    return refresh_creating_func(lambda entry: nanos)


def refresh_creating_func(f: Callable[[Any], int]) -> RefreshCalculator:
    """Refresh once ``f(entry)`` has passed since creation; updates keep the time."""
    return _RefreshCreating(f)


def refresh_writing(duration: int | timedelta) -> RefreshCalculator:
    """Refresh once ``duration`` has passed since the last write or reload."""
    nanos = _to_nanos(duration)
    return refresh_writing_func(lambda entry: nanos)


def refresh_writing_func(f: Callable[[Any], int]) -> RefreshCalculator:
    """Refresh once ``f(entry)`` has passed since the last write or reload.

    A failed reload keeps the current refresh time.
    """
    return _RefreshWriting(f)