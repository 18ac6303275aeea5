"""Loggers used by the cache to report warnings and errors."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod


class Logger(ABC):
    """Receives the warnings and errors that the cache reports."""

    @abstractmethod
    def warn(self, msg: str, err: BaseException | None) -> None:
        """Log ``msg`` at the warning level together with ``err``."""

    @abstractmethod
    def error(self, msg: str, err: BaseException | None) -> None:
        """Log ``msg`` at the error level together with ``err``."""


class DefaultLogger(Logger):
    """Writes to a standard :mod:`logging` logger, ``ottercache`` by default.

    The error is rendered into the message as ``err="..."`` and is also
    attached to the record as its ``err`` attribute.
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log if log is not None else logging.getLogger("ottercache")

    def warn(self, msg: str, err: BaseException | None) -> None:
        self._log.warning('%s err="%s"', msg, err, extra={"err": err})

    def error(self, msg: str, err: BaseException | None) -> None:
        self._log.error('%s err="%s"', msg, err, extra={"err": err})


class NoopLogger(Logger):
    """Discards everything; useful when error logging is not wanted."""

    def warn(self, msg: str, err: BaseException | None) -> None:
        pass

    def error(self, msg: str, err: BaseException | None) -> None:
        pass