"""Logging setup for the storefront client.

All module loggers hang off the ``storefront`` root so one call to
`setup_logger` (or `setup_from_config`) configures the whole package.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

ROOT_LOGGER = "storefront"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logger(
    name: str = ROOT_LOGGER,
    level: int | str = logging.INFO,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure and return a logger. A logger that already has handlers is
    returned untouched.

    Args:
        name: Logger name.
        level: Logging level, numeric or a name such as "DEBUG".
        log_file: Optional path to log file. If None, logs to stderr only.
    """
    log = logging.getLogger(name)
    if log.handlers:
        return log

    log.setLevel(level)
    fmt = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(fmt)
    log.addHandler(stream)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(fmt)
        log.addHandler(fh)

    return log


def setup_from_config() -> logging.Logger:
    """Configure the root package logger from STOREFRONT_LOG_LEVEL / STOREFRONT_LOG_FILE."""
    from storefront.utils.config import log_file, log_level

    return setup_logger(ROOT_LOGGER, level=log_level(), log_file=log_file())


def get_logger(component: str | None = None) -> logging.Logger:
    """Return the package logger, or a child such as ``storefront.sync``."""
    if not component:
        return logging.getLogger(ROOT_LOGGER)
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")
