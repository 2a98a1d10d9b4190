# src/plotalgebra/log.py

"""
Logging helpers.

Library modules call ``get_logger(__name__)`` and log at DEBUG only; the CLI
calls ``setup_logging`` once at startup.

Usage:
    from plotalgebra.log import get_logger

    logger = get_logger(__name__)
    logger.debug("crossed %d x %d layers", n, m)
"""

import logging
import sys

__all__ = ["get_logger", "setup_logging"]

_configured = False

logging.getLogger("plotalgebra").addHandler(logging.NullHandler())


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging. Subsequent calls are no-ops."""
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger for ``name`` (typically ``__name__``)."""
    return logging.getLogger(name)
