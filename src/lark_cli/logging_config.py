"""
Logging configuration for the Lark CLI.

Library modules only create loggers; the CLI configures output once.
"""

import logging
import sys

# Package logger; module loggers (lark_cli.*) propagate to it
logger = logging.getLogger("lark_cli")


def configure_logging(level: str = "WARNING") -> None:
    """
    Configure logging for the Lark CLI.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    resolved = getattr(logging, level.upper(), None)
    if not isinstance(resolved, int):
        resolved = logging.WARNING
    logger.setLevel(resolved)

    # Only add handler if not already configured
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        logger.addHandler(handler)
