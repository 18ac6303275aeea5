import logging

import pytest

from ottercache.loader import NotFoundError
from ottercache.logger import DefaultLogger, Logger, NoopLogger


def test_default_logger_error(caplog):
    logger = DefaultLogger()
    with caplog.at_level(logging.WARNING, logger="ottercache"):
        logger.error("lololol", NotFoundError())
    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.levelname == "ERROR"
    assert record.getMessage() == (
        'lololol err="ottercache: the entry was not found in the data source"'
    )
    assert isinstance(record.err, NotFoundError)


def test_default_logger_warn_wrapped_error(caplog):
    logger = DefaultLogger()
    wrapped = RuntimeError(f"gol: {NotFoundError()}")
    with caplog.at_level(logging.WARNING, logger="ottercache"):
        logger.warn("qokpokp", wrapped)
    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.levelname == "WARNING"
    assert record.getMessage() == (
        'qokpokp err="gol: ottercache: the entry was not found in the data source"'
    )
    assert record.err is wrapped


def test_default_logger_uses_given_logger(caplog):
    custom = logging.getLogger("custom.cache.log")
    logger = DefaultLogger(custom)
    with caplog.at_level(logging.WARNING, logger="custom.cache.log"):
        logger.warn("msg", ValueError("bad"))
    assert [r.name for r in caplog.records] == ["custom.cache.log"]
    assert caplog.records[0].getMessage() == 'msg err="bad"'


def test_noop_logger_emits_nothing(caplog):
    logger = NoopLogger()
    with caplog.at_level(logging.DEBUG):
        assert logger.warn("lololoo", NotFoundError()) is None
        assert logger.error("ytuvut", ValueError("hjihiuh")) is None
    assert caplog.records == []


def test_logger_is_abstract():
    with pytest.raises(TypeError):
        Logger()