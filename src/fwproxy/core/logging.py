"""
Logging setup for fwproxy.

Modules log through ``logging.getLogger(__name__)``; ``setup_logging`` wires
the package logger to a Rich console handler once at startup.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "fwproxy"


def setup_logging(level: str = "INFO", *, console: Console | None = None) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Log level name (e.g. "DEBUG", "INFO").
        console: Optional Rich console; defaults to stderr.

    Returns:
        The configured "fwproxy" logger.
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Repeated calls replace the handler instead of stacking them
    if logger.handlers:
        logger.handlers.clear()

    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_level=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        log_time_format="[%H:%M:%S]",
    )
    handler.setLevel(log_level)
    logger.addHandler(handler)
    logger.propagate = False

    return logger
