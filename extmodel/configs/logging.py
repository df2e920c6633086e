"""
extmodel Logging

All modules log under the `extmodel` logger tree (`extmodel.jsdoc`,
`extmodel.ast.parser`, ...). The command line installs the handlers; as a
library extmodel adds none and leaves routing to the host application.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

ROOT_LOGGER = "extmodel"
LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.setLevel(level)
    return handler


def setup_logging(debug: bool = False, log_file: Optional[str] = None) -> logging.Logger:
    """
    Route extmodel logs to stderr and, optionally, a file.

    Console output goes to stderr. With a log file, stderr keeps warnings
    only and the file gets everything at the configured level.

    Args:
        debug: Log at DEBUG instead of INFO
        log_file: Path of a log file; empty or None logs to stderr only

    Returns:
        The `extmodel` root logger
    """
    level = logging.DEBUG if debug else logging.INFO

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    logger.addHandler(_handler(logging.StreamHandler(sys.stderr), logging.WARNING if log_file else level))

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_handler(logging.FileHandler(path, encoding="utf-8"), level))
        logger.debug(f"Logging to {path}")

    return logger


def get_logger(component: str) -> logging.Logger:
    """Logger for one extmodel component, e.g. "registry" or "ast.parser"."""
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")
