import logging
import warnings

import pytest

from coordinatediagrams.logging_config import LOG_LEVEL_ENV, level_from_env, parse_level, setup_logging


@pytest.fixture
def clean_logger():
    yield
    for name in ("coordinatediagrams", "py.warnings"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
    logging.captureWarnings(False)


def test_parse_level():
    assert parse_level("warning") == logging.WARNING
    assert parse_level(" 10 ") == logging.DEBUG
    assert parse_level(logging.ERROR) == logging.ERROR
    assert parse_level("chatty", logging.CRITICAL) == logging.CRITICAL
    assert parse_level(None) == logging.INFO


def test_level_from_env(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
    assert level_from_env() == logging.DEBUG
    monkeypatch.setenv(LOG_LEVEL_ENV, "30")
    assert level_from_env() == logging.WARNING
    monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")
    assert level_from_env(logging.ERROR) == logging.ERROR
    monkeypatch.delenv(LOG_LEVEL_ENV)
    assert level_from_env() == logging.INFO


def test_setup_logging_does_not_duplicate_handlers(tmp_path, clean_logger):
    log_file = tmp_path / "app.log"
    setup_logging(logging.DEBUG, str(log_file))
    logger = setup_logging("debug", str(log_file))
    assert logger is logging.getLogger("coordinatediagrams")
    assert len(logger.handlers) == 2
    assert logger.level == logging.DEBUG
    assert not logger.propagate
    for handler in logger.handlers:
        handler.flush()
    assert "Logging initialized at DEBUG." in log_file.read_text(encoding="utf-8")


def test_level_defaults_to_environment(monkeypatch, clean_logger):
    monkeypatch.setenv(LOG_LEVEL_ENV, "WARNING")
    logger = setup_logging()
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1


def test_warnings_are_logged(tmp_path, clean_logger):
    log_file = tmp_path / "app.log"
    setup_logging(logging.INFO, str(log_file))
    with warnings.catch_warnings():
        warnings.simplefilter("always")
        warnings.warn("invalid value encountered in divide", RuntimeWarning)
    for handler in logging.getLogger("py.warnings").handlers:
        handler.flush()
    assert "invalid value encountered in divide" in log_file.read_text(encoding="utf-8")
