"""Logging setup for ledgerkit."""

import logging
import sys

LOGGER_NAME = "ledgerkit"

LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: int | str = logging.WARNING) -> logging.Logger:
    """Configure the ledgerkit logger.

    Args:
        level: Logging level (e.g., logging.INFO, "DEBUG")

    Returns:
        The configured logger instance.
    """
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Re-configuring replaces the handler instead of stacking a second one
    if logger.handlers:
        logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger in the ledgerkit namespace.

    Accepts either a short name ("ledger") or a module ``__name__``
    ("ledgerkit.domain.ledger").
    """
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
