"""Tests for logging_config.py - stderr console handler and optional log file."""

import logging

import pytest
from rich.logging import RichHandler

from crosslayer.logging_config import LOGGER_NAME, console_level, get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


class TestConsoleLevel:
    def test_default_warns(self):
        assert console_level() == logging.WARNING

    def test_verbose(self):
        assert console_level(verbose=True) == logging.DEBUG

    def test_quiet_wins(self):
        assert console_level(verbose=True, quiet=True) == logging.ERROR


class TestSetupLogging:
    def test_console_on_stderr(self):
        logger = setup_logging()
        [handler] = logger.handlers
        assert isinstance(handler, RichHandler)
        assert handler.console.stderr
        assert logger.level == logging.WARNING

    def test_repeated_setup_replaces_handlers(self):
        setup_logging()
        logger = setup_logging(verbose=True)
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_root_logger_untouched(self):
        root_handlers = list(logging.getLogger().handlers)
        setup_logging(quiet=True)
        assert logging.getLogger().handlers == root_handlers

    def test_log_file_gets_debug_while_quiet(self, tmp_path):
        log_file = tmp_path / "run.log"
        logger = setup_logging(quiet=True, log_file=log_file)
        console, file_handler = logger.handlers
        assert console.level == logging.ERROR
        assert logger.level == logging.DEBUG

        get_logger("crosslayer.linkage.files").debug("u1: 3 files")
        file_handler.flush()
        assert "u1: 3 files" in log_file.read_text(encoding="utf-8")


class TestGetLogger:
    def test_prefixes_foreign_names(self):
        assert get_logger("linkage").name == "crosslayer.linkage"

    def test_keeps_package_names(self):
        assert get_logger("crosslayer.layers").name == "crosslayer.layers"

    def test_root(self):
        assert get_logger().name == LOGGER_NAME
