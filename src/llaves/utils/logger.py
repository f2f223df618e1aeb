"""Minimal logging utilities for Llaves.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from llaves.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Scanning template")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "llaves." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'llaves.mymodule'
    """
    # Ensure llaves prefix for consistent namespacing
    if not (name == "llaves" or name.startswith("llaves.")):
        name = f"llaves.{name}"
    return logging.getLogger(name)
