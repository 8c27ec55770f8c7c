"""Project-wide logging utilities."""

import logging
import os
from datetime import datetime
from typing import Optional, Union

from broken_md_links.core.enums import Verbosity

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Above CRITICAL: nothing gets through.
SILENT = logging.CRITICAL + 10

_VERBOSITY_LEVELS = {
    Verbosity.SILENT: SILENT,
    Verbosity.ERRORS: logging.ERROR,
    Verbosity.WARN: logging.WARNING,
    Verbosity.INFO: logging.INFO,
    Verbosity.VERBOSE: logging.DEBUG,
    Verbosity.TRACE: TRACE,
}

_LEVEL_LABELS = {
    TRACE: "DEBUG",
    logging.DEBUG: "VERBOSE",
    logging.INFO: "INFO",
    logging.WARNING: "WARNING",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
}


def verbosity_to_level(verbosity: Union[Verbosity, str]) -> int:
    """Map a command-line verbosity onto a :mod:`logging` level."""
    return _VERBOSITY_LEVELS[Verbosity(verbosity)]


class ElapsedFormatter(logging.Formatter):
    """Prefix records with the time elapsed since start-up, e.g. ``[ 0m  1.042s] INFO: ...``."""

    def format(self, record: logging.LogRecord) -> str:
        elapsed_ms = int(record.relativeCreated)
        seconds, millis = divmod(elapsed_ms, 1000)
        minutes, seconds = divmod(seconds, 60)
        label = _LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"[{minutes:>2}m {seconds:>2}.{millis:03}s] {label}: {record.getMessage()}"


def setup_logger(
    name: str = "broken_md_links",
    verbosity: Union[Verbosity, str] = Verbosity.WARN,
    log_dir: Optional[str] = None,
) -> logging.Logger:
    """
    Set up a logger with a console handler and an optional file handler.

    Args:
        name (str): Logger name
        verbosity (Verbosity): Command-line verbosity level
        log_dir (str): Directory to store log files (no file logging if None)

    Returns:
        logging.Logger: Configured logger instance
    """
    level = verbosity_to_level(verbosity)

    # Create a logger
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Existing handlers only follow the new level
    for handler in logger.handlers:
        handler.setLevel(level)

    if not any(type(handler) is logging.StreamHandler for handler in logger.handlers):
        # Create console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(ElapsedFormatter())
        logger.addHandler(console_handler)

    has_file_handler = any(isinstance(h, logging.FileHandler) for h in logger.handlers)
    if log_dir is not None and not has_file_handler:
        # Create the logs directory if it doesn't exist
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)

        # Create a file handler
        log_filename = f"{log_dir}/{name}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        file_handler = logging.FileHandler(log_filename)
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)

    logger.debug(f"Logger {name} is set up and ready to log.")
    return logger
