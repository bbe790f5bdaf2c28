"""Tests for the package logging setup."""
import logging

import pytest

from ekmagrid.logging_config import QUIET_LOGGERS, setup_logging


@pytest.fixture(autouse=True)
def restore_loggers():
    names = ("ekmagrid",) + QUIET_LOGGERS
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    package = logging.getLogger("ekmagrid")
    for handler in package.handlers:
        handler.close()
    package.handlers.clear()
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


class TestSetupLogging:

    def test_repeated_setup_keeps_one_console_handler(self):
        setup_logging(logging.INFO)
        setup_logging(logging.DEBUG)
        package = logging.getLogger("ekmagrid")
        assert package.level == logging.DEBUG
        assert len(package.handlers) == 1

    def test_log_file(self, tmp_path):
        path = tmp_path / "ekmagrid.log"
        setup_logging(logging.INFO, log_file=str(path))
        logging.getLogger("ekmagrid.model.grid").info("Grid built: 4 samples")
        for handler in logging.getLogger("ekmagrid").handlers:
            handler.flush()
        text = path.read_text(encoding="utf-8")
        assert "ekmagrid.model.grid - INFO - Grid built: 4 samples" in text

    def test_third_party_loggers_quieted(self):
        setup_logging(logging.DEBUG)
        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_quiet_loggers_follow_stricter_level(self):
        setup_logging(logging.ERROR)
        assert logging.getLogger("matplotlib").level == logging.ERROR
