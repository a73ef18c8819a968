# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

The engine modules log through the standard library (``logging.getLogger``
with %-style arguments) while the service layer uses structlog key/value
events. Both are rendered by one ``ProcessorFormatter`` attached to the
``eduforge`` logger, so every record carries the same timestamp, level,
logger name and bound context (for example ``session_id``).

Logs are formatted as JSON in production and as console output in
development.

Example:
    >>> from eduforge.utils.logging import setup_logging, get_logger
    >>> from eduforge.core.config import get_settings
    >>> setup_logging(get_settings())
    >>> logger = get_logger(__name__)
    >>> with bound_context(session_id="abc"):
    ...     logger.info("Session started")
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from eduforge.core.config.settings import Settings

ROOT_LOGGER_NAME = "eduforge"


def _shared_processors() -> list[Processor]:
    """Processors applied to both structlog and stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def setup_logging(settings: "Settings") -> None:
    """Configure structured logging for the application.

    Replaces any handler previously installed on the ``eduforge`` logger,
    so calling it again (e.g. after reloading settings) does not
    duplicate output.

    Args:
        settings: Application settings containing log_level and debug flag.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    shared_processors = _shared_processors()

    if settings.is_development or settings.debug:
        renderers: list[Processor] = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderers,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.handlers = [handler]
    root.setLevel(log_level)
    root.propagate = False


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        A bound structlog logger instance.
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: object) -> None:
    """Bind context variables to all subsequent log calls in this context.

    Args:
        **kwargs: Key-value pairs to bind to the logging context.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


@contextmanager
def bound_context(**kwargs: object) -> Iterator[None]:
    """Bind context variables for the duration of a block.

    On exit the previous values are restored and bindings made by the
    caller outside the block are left alone.

    Example:
        >>> bind_context(request_id="req-1")
        >>> with bound_context(session_id="abc-123"):
        ...     logger.info("Signal recorded")  # request_id and session_id
        >>> logger.info("Done")  # request_id only
    """
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield


def clear_context() -> None:
    """Clear all bound context variables.

    Intended for the owner of the context (a request or worker entry
    point), not for library code running inside it.
    """
    structlog.contextvars.clear_contextvars()
