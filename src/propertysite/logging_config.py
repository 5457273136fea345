"""
Logging for the Property Site Generator

All package loggers hang off the ``propertysite`` logger. Records written while
a Flask request is being handled carry the request line (``POST /api/generate``)
so publish and delete logs can be traced back to the call that caused them.

    from propertysite.logging_config import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from flask import has_request_context, request

from propertysite.config import get_config

PACKAGE_LOGGER = "propertysite"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(request)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logging_configured = False


class RequestContextFilter(logging.Filter):
    """Stamp each record with the current request line, or ``-`` outside one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            record.request = f"{request.method} {request.path}"
        else:
            record.request = "-"
        return True


def _build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(RequestContextFilter())
    return handlers


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    force: bool = False,
) -> None:
    """Attach console (and optional file) handlers to the package logger.

    Level and file default to ``config.logging``. Calling again is a no-op
    unless ``force`` is set.
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    settings = get_config().logging
    numeric_level = getattr(logging, (level or settings.level).upper(), logging.INFO)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(numeric_level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    for handler in _build_handlers(log_file or settings.log_file):
        package_logger.addHandler(handler)
    package_logger.propagate = False

    # Blob uploads open many connections; keep urllib3 to warnings
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("werkzeug").setLevel(max(numeric_level, logging.INFO))

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Logger named under the package, configuring logging on first use."""
    if not _logging_configured:
        setup_logging()

    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def reset_logging() -> None:
    """Drop package handlers so the next get_logger reconfigures (tests)."""
    global _logging_configured
    _logging_configured = False

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
