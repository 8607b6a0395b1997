#!/usr/bin/env python3
"""
Logging setup and the logging event sink used by the command line.
"""

import logging

from .core.events import Aborted, Done, Fraction, Message, Starting


def setup_logging(verbose, silent):
    """Configure logging based on verbosity settings."""
    if silent:
        log_level = logging.ERROR
    elif verbose:
        log_level = logging.DEBUG
    else:
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S',
        force=True,
    )
    return logging.getLogger("cbarchiver")


def make_logging_sink(logger):
    """Return an ``emit(event)`` callable that writes progress events to ``logger``."""

    def emit(event):
        if isinstance(event, Starting):
            logger.info(event.text)
        elif isinstance(event, Fraction):
            logger.info(f"Progress: {event.value:.0%}")
        elif isinstance(event, Message):
            logger.info(event.text)
        elif isinstance(event, Aborted):
            logger.error(f"Aborted: {event.reason}")
        elif isinstance(event, Done):
            logger.debug("Run finished")

    return emit
