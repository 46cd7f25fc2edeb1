"""Logging configuration for the billios command-line tools."""

from __future__ import annotations

import logging
import sys

LOGGER_NAMESPACE = "billios"


def setup_logging(level: int | str = logging.WARNING, log_file: str | None = None) -> None:
    """Configure the 'billios' logger namespace.

    Logs go to stderr so that stdout stays reserved for JSON output.

    Args:
        level: Logging level, as an int or a name such as "DEBUG".
        log_file: Optional path to also write logs to.
    """
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(level)

    # Avoid duplicate handlers when called more than once
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
