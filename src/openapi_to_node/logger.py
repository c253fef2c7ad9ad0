"""Logging for the property building pipeline.

Library code logs through ``get_logger()``; the CLI calls ``setup_logging``
once to attach a terminal handler. Operation bindings passed via ``extra``
are rendered after the message.
"""

from __future__ import annotations

import logging
import sys
import time

LOGGER_NAME = "openapi_to_node"

BINDING_KEYS = ("pattern", "method", "operationId", "error")


class _BindingsFormatter(logging.Formatter):
    """Terminal formatter with ANSI colours and ``key=value`` bindings."""

    _GREY = "\033[90m"
    _CYAN = "\033[96m"
    _YELLOW = "\033[93m"
    _RED = "\033[91m"
    _BOLD = "\033[1m"
    _RST = "\033[0m"

    LEVEL_COLOURS = {
        logging.DEBUG: _GREY,
        logging.INFO: _CYAN,
        logging.WARNING: _YELLOW,
        logging.ERROR: _RED,
        logging.CRITICAL: _RED + _BOLD,
    }

    def format(self, record: logging.LogRecord) -> str:
        colour = self.LEVEL_COLOURS.get(record.levelno, self._RST)
        timestamp = time.strftime("%H:%M:%S", time.localtime(record.created))
        bindings = format_bindings(record)
        suffix = f" {self._GREY}{bindings}{self._RST}" if bindings else ""
        return f"{self._GREY}{timestamp}{self._RST} {colour}{record.getMessage()}{self._RST}{suffix}"


def format_bindings(record: logging.LogRecord) -> str:
    """Render the known binding attributes of a record as ``key=value`` pairs."""
    parts = []
    for key in BINDING_KEYS:
        value = getattr(record, key, None)
        if value is not None:
            parts.append(f"{key}={value}")
    return " ".join(parts)


_logger = logging.getLogger(LOGGER_NAME)
_handler: logging.StreamHandler | None = None


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure and return the package logger."""
    global _handler
    _logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(_BindingsFormatter())
        _logger.addHandler(_handler)
    else:
        # stderr may have been swapped since the last call
        _handler.stream = sys.stderr

    return _logger


def get_logger() -> logging.Logger:
    return _logger
