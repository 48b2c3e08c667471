"""Logging setup for the jkv application."""

from __future__ import annotations

import logging

from textual.logging import TextualHandler

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(log_file: str = "", *, verbose: bool = False) -> logging.Logger:
    """Configure the ``jkv`` logger.

    Records go to *log_file* when given, otherwise to Textual's handler so
    they never land on the terminal the UI is drawing on.
    """
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = TextualHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    logger = logging.getLogger("jkv")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return logger
