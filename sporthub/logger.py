import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from . import settings

LOG_FILE_NAME = "sporthub.log"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3

# Chatty HTTP internals; a sheet refresh only needs our own "Fetched N rows" lines.
NOISY_LOGGERS = ("urllib3", "requests")


def _console_handler(level: int | str) -> logging.Handler:
    # Report lines carry their own emoji/indent prefixes, so print them bare.
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _file_handler(log_dir: Path, level: int | str) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s (%(threadName)s): %(message)s"
        )
    )
    return handler


def setup_logger(
    name: Optional[str] = None,
    log_level: int | str = settings.LOG_LEVEL,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """
    Wires the refresh logs to stdout and to `<log_dir>/sporthub.log`.

    The file keeps thread names because the stock sheets are fetched in
    parallel. Calling it again for an already configured logger only
    updates the level.
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    if logger.handlers:
        return logger

    logger.addHandler(_console_handler(log_level))
    logger.addHandler(_file_handler(log_dir or settings.LOG_DIR, log_level))

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger
