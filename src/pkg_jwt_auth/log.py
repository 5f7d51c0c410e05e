"""
Package loggers.

Events are structlog key/value events handed to stdlib ``logging`` under
the ``pkg_jwt_auth`` logger, so nothing is written until the host adds a
handler (or runs the ``pkg-jwt-auth`` CLI, which adds one on stderr).
Processors come from the host's structlog configuration.
"""

from __future__ import annotations

import logging

import structlog

LOGGER_NAME = "pkg_jwt_auth"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger bound to the stdlib logger ``name``."""
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
