"""Configuration of a cache and its validation."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .logger import DefaultLogger, Logger

DEFAULT_INITIAL_CAPACITY = 16


def _default_executor(fn: Callable[[], Any]) -> None:
    threading.Thread(target=fn, daemon=True).start()


def _unit_weigher(key: Any, value: Any) -> int:
    return 1


@dataclass
class Options:
    """Options for building a cache.

    Every feature is optional. ``maximum_size`` and ``maximum_weight`` are
    mutually exclusive, and ``maximum_weight`` goes together with ``weigher``.
    Durations and clock readings are integers of nanoseconds.
    """

    maximum_size: int = 0
    maximum_weight: int = 0
    stats_recorder: Any = None
    initial_capacity: int = 0
    weigher: Callable[[Any, Any], int] | None = None
    expiry_calculator: Any = None
    on_deletion: Callable[[Any], None] | None = None
    on_atomic_deletion: Callable[[Any], None] | None = None
    refresh_calculator: Any = None
    executor: Callable[[Callable[[], Any]], None] | None = None
    clock: Any = None
    logger: Logger | None = None

    def validate(self) -> None:
        """Raise ValueError if the options contradict each other."""
        if self.maximum_size > 0 and self.maximum_weight > 0:
            raise ValueError("ottercache: both maximum_size and maximum_weight are set")
        if self.maximum_size > 0 and self.weigher is not None:
            raise ValueError("ottercache: both maximum_size and weigher are set")
        if self.maximum_weight > 0 and self.weigher is None:
            raise ValueError("ottercache: maximum_weight requires weigher")
        if self.weigher is not None and self.maximum_weight <= 0:
            raise ValueError("ottercache: weigher requires maximum_weight")
        if self.maximum_size < 0:
            raise ValueError("ottercache: maximum_size should be positive")
        if self.initial_capacity < 0:
            raise ValueError("ottercache: initial capacity should be positive")

    def effective_maximum(self) -> int:
        """Return the size or weight bound, or 0 when the cache is unbounded."""
        if self.maximum_size > 0:
            return self.maximum_size
        if self.maximum_weight > 0:
            return self.maximum_weight
        return 0

    def effective_initial_capacity(self) -> int:
        """Return the initial capacity, falling back to the default."""
        if self.initial_capacity > 0:
            return self.initial_capacity
        return DEFAULT_INITIAL_CAPACITY

    def effective_executor(self) -> Callable[[Callable[[], Any]], None]:
        """Return the executor; by default each task runs on a new daemon thread."""
        return self.executor if self.executor is not None else _default_executor

    def effective_weigher(self) -> Callable[[Any, Any], int]:
        """Return the weigher; by default every entry weighs 1."""
        return self.weigher if self.weigher is not None else _unit_weigher

    def effective_logger(self) -> Logger:
        """Return the logger; by default a :class:`DefaultLogger`."""
        return self.logger if self.logger is not None else DefaultLogger()