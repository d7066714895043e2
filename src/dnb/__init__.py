"""dnb - Deepnote notebook document validation and block compilation."""

from __future__ import annotations

import logging

__version__ = "0.1.0"


def setup_logging(level: str = "WARNING") -> None:
    """Configure logging for the dnb package.

    Sets up a consistent log format with timestamps, logger names, and levels.
    Call this once at application startup (CLI or embedding service).
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)
    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger("dnb")
    root_logger.setLevel(log_level)
    # Avoid duplicate handlers on repeated calls
    if not root_logger.handlers:
        root_logger.addHandler(handler)
