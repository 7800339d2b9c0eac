"""Unit tests for logging configuration."""

import logging

from minhypr.cli.logging_config import (
    ColoredFormatter,
    log_subprocess_call,
    log_timing,
    setup_logging,
)


class TestSetupLogging:
    """Test setup_logging levels."""

    def test_default_level_is_warning(self):
        assert setup_logging().level == logging.WARNING

    def test_verbose(self):
        assert setup_logging(verbose=True).level == logging.INFO

    def test_debug_wins_over_verbose(self):
        assert setup_logging(verbose=True, debug=True).level == logging.DEBUG

    def test_handlers_are_replaced(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1


def test_colored_formatter_restores_levelname():
    record = logging.LogRecord("minhypr", logging.ERROR, __file__, 1, "boom", None, None)
    output = ColoredFormatter("%(levelname)s: %(message)s").format(record)

    assert "\033[31m" in output
    assert record.levelname == "ERROR"


def test_log_subprocess_call(caplog):
    logger = logging.getLogger("minhypr.test")
    with caplog.at_level(logging.DEBUG, logger="minhypr.test"):
        log_subprocess_call(["hyprctl", "-j", "clients"], 0, logger, stdout=b"[]", stderr=b"  ")

    messages = [r.getMessage() for r in caplog.records]
    assert "Subprocess call: hyprctl -j clients" in messages
    assert "  stdout: []" in messages
    assert not any("stderr" in m for m in messages)


def test_log_timing(caplog):
    logger = logging.getLogger("minhypr.test")
    with caplog.at_level(logging.INFO, logger="minhypr.test"):
        with log_timing("restore-all", logger):
            pass

    assert caplog.records[0].getMessage() == "Starting: restore-all"
    assert "restore-all completed in" in caplog.records[1].getMessage()
