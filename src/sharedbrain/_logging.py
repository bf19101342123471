"""Logging configuration for sharedbrain.

Usage in other modules:
    import logging
    log = logging.getLogger(__name__)

The log level can be configured via the SHAREDBRAIN_LOG_LEVEL environment variable:
    - DEBUG: Per-document progress (which files are read, which are stubs)
    - INFO: Run summary (default)
    - WARNING: Unexpected but handled situations
    - ERROR: Errors that aborted the run
"""

import logging
import sys

from .config import get_log_level

PACKAGE_LOGGER = "sharedbrain"


def configure_logging() -> None:
    """Configure logging for the sharedbrain package.

    Call this once at application startup (in cli.py).
    Subsequent calls are no-ops.
    """
    root_logger = logging.getLogger(PACKAGE_LOGGER)

    # Skip if already configured (has handlers)
    if root_logger.handlers:
        return

    level_name = get_log_level()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    # Use a clean format: [level] logger: message
    formatter = logging.Formatter(
        fmt="[%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    # Prevent propagation to root logger (avoids duplicate messages)
    root_logger.propagate = False


def set_log_level(level: int) -> None:
    """Change the threshold of the package logger and its handlers."""
    root_logger = logging.getLogger(PACKAGE_LOGGER)
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def set_quiet_mode(quiet: bool) -> None:
    """Suppress progress output, keeping warnings and errors."""
    if quiet:
        set_log_level(logging.WARNING)
