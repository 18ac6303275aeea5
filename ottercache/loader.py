"""Loaders that compute or retrieve values for populating a cache."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class NotFoundError(LookupError):
    """Raised by a loader when the entry was not found in the data source."""

    def __init__(self, message: str = "ottercache: the entry was not found in the data source"):
        super().__init__(message)


class Loader(ABC, Generic[K, V]):
    """Computes or retrieves a value for a key.

    Loading must not update mappings of the cache directly. Raise
    :class:`NotFoundError` when the entry is not in the data source.
    """

    @abstractmethod
    def load(self, key: K) -> V:
        """Compute or retrieve the value for ``key``."""

    def reload(self, key: K, old_value: V) -> V:
        """Compute a replacement value for an already cached ``key``.

        Errors raised here are logged and swallowed by the cache; a
        :class:`NotFoundError` removes the mapping. By default this loads again.
        """
        return self.load(key)


class LoaderFunc(Loader[K, V]):
    """A :class:`Loader` that calls an ordinary function for both load and reload."""

    def __init__(self, func: Callable[[K], V]) -> None:
        self._func = func

    def load(self, key: K) -> V:
        return self._func(key)

    def reload(self, key: K, old_value: V) -> V:
        return self._func(key)


class BulkLoader(ABC, Generic[K, V]):
    """Computes or retrieves values for many keys at once.

    A result missing some keys yields partial results; extra keys are cached
    but not returned to the caller.
    """

    @abstractmethod
    def bulk_load(self, keys: Sequence[K]) -> Mapping[K, V]:
        """Compute or retrieve the values for ``keys``."""

    def bulk_reload(self, keys: Sequence[K], old_values: Sequence[V]) -> Mapping[K, V]:
        """Compute replacement values for already cached ``keys``.

        Keys missing from the result are removed from the cache. By default
        this loads again.
        """
        return self.bulk_load(keys)


class BulkLoaderFunc(BulkLoader[K, V]):
    """A :class:`BulkLoader` that calls an ordinary function for both operations."""

    def __init__(self, func: Callable[[Sequence[K]], Mapping[K, V]]) -> None:
        self._func = func

    def bulk_load(self, keys: Sequence[K]) -> Mapping[K, V]:
        return self._func(keys)

    def bulk_reload(self, keys: Sequence[K], old_values: Sequence[V]) -> Mapping[K, V]:
        return self._func(keys)


@dataclass(frozen=True)
class RefreshResult(Generic[K, V]):
    """The outcome of refreshing one entry."""

    key: K
    value: V | None = None
    err: BaseException | None = None