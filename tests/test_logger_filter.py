import logging
import sys

from document_browser.logger import get_logger, setup_logger


def _record(name: str) -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, __file__, 1, "msg", None, None)


def _stderr_handler(logger: logging.Logger) -> logging.Handler:
    return next(h for h in logger.handlers if getattr(h, "stream", None) is sys.stderr)


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("DOCUMENT_BROWSER_LOG_LEVEL", "debug")
    try:
        assert setup_logger().level == logging.DEBUG
    finally:
        monkeypatch.delenv("DOCUMENT_BROWSER_LOG_LEVEL")
        setup_logger()


def test_category_filter(monkeypatch):
    monkeypatch.setenv("DOCUMENT_BROWSER_LOG_CATS", "loader, thumbnails")
    try:
        handler = _stderr_handler(setup_logger())
        assert handler.filter(_record("document_browser.loader"))
        assert not handler.filter(_record("document_browser.view_model"))
    finally:
        monkeypatch.delenv("DOCUMENT_BROWSER_LOG_CATS")
        setup_logger()


def test_repeated_setup_reuses_handler():
    base = setup_logger()
    before = len(base.handlers)
    setup_logger()
    assert len(base.handlers) == before
    assert not base.propagate
    assert get_logger("loader").name == "document_browser.loader"
    assert get_logger() is base
