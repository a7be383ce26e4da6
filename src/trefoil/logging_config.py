"""
Logging Configuration
Console (and optional file) output for the viewer's 'trefoil' loggers.
"""
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "trefoil"

# Third-party loggers that are chatty at INFO level
QUIET_LOGGERS = ("pyvista", "vtkmodules", "matplotlib")

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def _make_handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path; the log is also written there (overwritten per run).

    Returns:
        The configured 'trefoil' logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # calling this twice must not duplicate output
    if logger.hasHandlers():
        logger.handlers.clear()

    logger.addHandler(_make_handler(logging.StreamHandler(sys.stdout), level))
    if log_file:
        logger.addHandler(_make_handler(logging.FileHandler(log_file, mode='w', encoding='utf-8'), level))

    third_party_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    logger.info(f"Logging initialized (level {logging.getLevelName(level)}).")
    return logger
