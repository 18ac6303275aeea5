"""Deduplication of concurrent loads of the same key."""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping, MutableMapping, Sequence
from typing import Any

from .hashmap import ConcurrentMap
from .loader import NotFoundError


class Call:
    """One in-flight load of a key, shared by every caller waiting for it."""

    def __init__(
        self,
        key: Any,
        is_refresh: bool = False,
        *,
        value: Any = None,
        is_fake: bool = False,
    ) -> None:
        self.key = key
        self.value = value
        self.err: BaseException | None = None
        self.is_refresh = is_refresh
        self.is_not_found = False
        self.is_fake = is_fake
        self._cancelled = False
        self._cancel_lock = threading.Lock()
        self._finished = threading.Event()
        if is_fake:
            # Nobody waits on a call created for an extra bulk-loaded key.
            self._finished.set()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def done(self) -> None:
        """Release every caller waiting on this call."""
        self._finished.set()

    def cancel(self) -> None:
        """Mark the call cancelled and release its waiters, once."""
        if self.is_fake or self._cancelled:
            return
        with self._cancel_lock:
            if self._cancelled:
                return
            self._cancelled = True
        self._finished.set()

    def wait(self) -> None:
        """Block until the call is done or cancelled."""
        self._finished.wait()


class Group:
    """Tracks in-flight calls so that each key is loaded by one caller at a time."""

    def __init__(self) -> None:
        self._calls = ConcurrentMap()

    def get_call(self, key: Any) -> Call | None:
        """Return the in-flight call for ``key``, or None."""
        return self._calls.get(key)

    def start_call(self, key: Any, is_refresh: bool) -> tuple[Call, bool]:
        """Return the call for ``key`` and whether the caller must perform the load."""
        existing = self.get_call(key)
        if existing is not None:
            return existing, False

        should_load = False

        def compute(prev: Call | None) -> Call:
            nonlocal should_load
            if prev is not None:
                return prev
            should_load = True
            return Call(key, is_refresh)

        return self._calls.compute(key, compute), should_load

    def do_call(
        self,
        call: Call,
        load: Callable[[Any], Any],
        after_finish: Callable[[Call], None],
    ) -> Any:
        """Run ``load`` for the call's key and record the outcome on the call.

        ``after_finish`` runs in every case; an exception from ``load`` is
        recorded on the call and then re-raised. Returns the loaded value.
        """
        try:
            call.value = load(call.key)
            call.err = None
            call.is_not_found = False
            return call.value
        except Exception as exc:
            call.err = exc
            call.is_not_found = isinstance(exc, NotFoundError)
            raise
        finally:
            after_finish(call)

    def do_bulk_call(
        self,
        calls: MutableMapping[Any, Call],
        bulk_load: Callable[[Sequence[Any]], Mapping[Any, Any]],
        after_finish: Callable[[Call], None],
    ) -> None:
        """Load every key of ``calls`` at once and record the outcomes.

        Keys missing from the result are marked not found. Extra keys in the
        result get fake calls added to ``calls``. ``after_finish`` runs for
        every call; an exception from ``bulk_load`` is recorded on every call
        and re-raised.
        """
        try:
            result = bulk_load(list(calls))
            is_refresh = next(iter(calls.values())).is_refresh if calls else False
            for key, call in calls.items():
                if key in result:
                    call.value = result[key]
                else:
                    call.is_not_found = True
            for key, value in result.items():
                if key not in calls:
                    calls[key] = Call(key, is_refresh, value=value, is_fake=True)
        except Exception as exc:
            for call in calls.values():
                call.err = exc
                call.is_not_found = False
            raise
        finally:
            for call in list(calls.values()):
                after_finish(call)

    def delete_call(self, call: Call) -> bool:
        """Forget ``call`` if it is still the one registered for its key."""
        if self.get_call(call.key) is not call:
            return False

        def compute(prev: Call | None) -> Call | None:
            if prev is call:
                return None
            return prev

        return self._calls.compute(call.key, compute) is None

    def delete(self, key: Any) -> None:
        """Forget the call for ``key``, cancelling it if there was one."""
        prev: Call | None = None

        def compute(existing: Call | None) -> None:
            nonlocal prev
            prev = existing
            return None

        self._calls.compute(key, compute)
        if prev is not None:
            prev.cancel()