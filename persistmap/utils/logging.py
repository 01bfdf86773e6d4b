"""Structured logging for persistmap.

Library modules only ever ask for a logger through :func:`get_logger`; they
never configure anything, so importing persistmap leaves the host's
structlog and root-logger setup alone.

Hosts that want persistmap's rendering opt in by calling
:func:`configure_logging` (or :func:`configure_logging_from_config` with the
output of :func:`persistmap.config.load_config`).  The same shared processor
chain feeds either a coloured ConsoleRenderer for local development or a
JSONRenderer when ``json_output`` is set, which ``load_config`` does when
``PERSISTMAP_APP_ENV=production``.
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Configure structlog and the root logger with a shared processor chain.

    Args:
        log_level: Logging level string (DEBUG, INFO, WARNING, ERROR).
        json_output: Render JSON instead of coloured console output.

    Returns:
        A configured structlog BoundLogger.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            *shared_processors,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # aiosqlite and friends log through the stdlib; give them the same format.
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *shared_processors,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    return structlog.get_logger()


def configure_logging_from_config(config: dict[str, Any]) -> structlog.BoundLogger:
    """Apply the ``logging`` section of :func:`~persistmap.config.load_config` output."""
    section = config.get("logging") or {}
    return configure_logging(
        log_level=section.get("level", "INFO"),
        json_output=bool(section.get("json_output", False)),
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a named structlog logger without touching global configuration."""
    return structlog.get_logger(logger_name=name)
