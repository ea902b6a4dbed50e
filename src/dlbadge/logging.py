"""Logging configuration for dlbadge."""

import logging
import sys

# Create package logger
logger = logging.getLogger("dlbadge")

# Default format for console output
DEFAULT_FORMAT = "%(message)s"
VERBOSE_FORMAT = "%(levelname)s: %(message)s"

# Third-party loggers that log every request at INFO
HTTP_LOGGERS = ("httpx", "httpcore")


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging for the CLI.

    Args:
        verbose: If True, show DEBUG level messages (request and response
            details) with level prefix.
        quiet: If True, suppress INFO messages (only show WARNING+).
    """
    # Remove existing handlers
    logger.handlers.clear()

    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    # Create console handler
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt = VERBOSE_FORMAT if verbose else DEFAULT_FORMAT
    handler.setFormatter(logging.Formatter(fmt))

    logger.addHandler(handler)
    logger.setLevel(level)

    # Request lines from httpx duplicate our own; only show them when verbose
    for name in HTTP_LOGGERS:
        http_logger = logging.getLogger(name)
        http_logger.handlers.clear()
        if verbose:
            http_logger.addHandler(handler)
            http_logger.setLevel(logging.DEBUG)
        else:
            http_logger.setLevel(logging.WARNING)
