import logging

import pytest

from broken_md_links.core.enums import Verbosity
from broken_md_links.utils.logger import (
    SILENT,
    TRACE,
    ElapsedFormatter,
    setup_logger,
    verbosity_to_level,
)


@pytest.mark.parametrize(
    ("verbosity", "level"),
    [
        (Verbosity.SILENT, SILENT),
        (Verbosity.ERRORS, logging.ERROR),
        ("warn", logging.WARNING),
        (Verbosity.INFO, logging.INFO),
        (Verbosity.VERBOSE, logging.DEBUG),
        ("trace", TRACE),
    ],
)
def test_verbosity_to_level(verbosity, level):  # type: ignore
    assert verbosity_to_level(verbosity) == level


def test_unknown_verbosity_rejected():  # type: ignore
    with pytest.raises(ValueError):
        verbosity_to_level("loud")


def test_elapsed_formatter_labels():  # type: ignore
    record = logging.LogRecord("broken_md_links", TRACE, __file__, 1, "read %d bytes", (12,), None)
    record.relativeCreated = 61_042.7

    assert ElapsedFormatter().format(record) == "[ 1m  1.042s] DEBUG: read 12 bytes"

    record.levelno = logging.DEBUG
    assert ElapsedFormatter().format(record).endswith("VERBOSE: read 12 bytes")


def test_setup_logger_updates_level_without_duplicating_handlers():  # type: ignore
    logger = setup_logger(verbosity=Verbosity.ERRORS)
    assert logger.level == logging.ERROR
    assert len(logger.handlers) == 1

    logger = setup_logger(verbosity=Verbosity.TRACE)
    assert logger.level == TRACE
    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == TRACE


def test_setup_logger_writes_log_file(tmp_path):  # type: ignore
    log_dir = tmp_path / "logs"
    logger = setup_logger(verbosity=Verbosity.INFO, log_dir=str(log_dir))
    logger.info("hello from the checker")
    for handler in logger.handlers:
        handler.flush()

    (log_file,) = list(log_dir.glob("broken_md_links_*.log"))
    assert "INFO - hello from the checker" in log_file.read_text(encoding="utf-8")


def test_setup_logger_adds_file_handler_on_later_call(tmp_path):  # type: ignore
    setup_logger(verbosity=Verbosity.WARN)
    logger = setup_logger(verbosity=Verbosity.WARN, log_dir=str(tmp_path / "logs"))
    logger.warning("late file logging")
    for handler in logger.handlers:
        handler.flush()

    assert len(logger.handlers) == 2
    assert sum(isinstance(h, logging.FileHandler) for h in logger.handlers) == 1
    (log_file,) = list((tmp_path / "logs").glob("broken_md_links_*.log"))
    assert "late file logging" in log_file.read_text(encoding="utf-8")

    setup_logger(verbosity=Verbosity.WARN, log_dir=str(tmp_path / "logs"))
    assert len(logger.handlers) == 2
