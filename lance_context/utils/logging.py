"""Structured logging setup using structlog.

Dual-renderer pattern: the same shared processor chain (context vars, log
level, timestamps, stack info) feeds either a coloured ConsoleRenderer for
local development or a JSONRenderer for production.  The renderer is picked
by the ``json_output`` flag, which :func:`configure_logging_from` derives from
``Settings.app_env``.

lance-context is a library: importing it never touches logging
configuration.  The host calls :func:`configure_logging` (or
:func:`configure_logging_from`) once at startup, or keeps its own setup.

Standard-library ``logging`` is rewired through the same formatter so that
httpx and openai produce identically formatted output; their per-request
chatter is capped at WARNING.  Once configured, everything goes to stderr;
stdout stays free for whatever the embedding host process prints.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from lance_context.config.settings import Settings

_NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Configure structlog and the root stdlib logger.

    Nothing in lance-context calls this on import; the host application opts
    in, usually through :func:`configure_logging_from`.

    Args:
        log_level: Logging level string (DEBUG, INFO, WARNING, ERROR).
        json_output: Render JSON lines instead of the coloured console format.

    Returns:
        A configured structlog BoundLogger.
    """
    # Order matters: contextvars first, then level/timestamps, then exceptions.
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
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *shared_processors,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    # httpx logs every request at INFO.
    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(max(logging.WARNING, root_logger.level))

    return structlog.get_logger()


def configure_logging_from(settings: Settings) -> structlog.BoundLogger:
    """Configure logging from resolved :class:`Settings`.

    ``log_level`` sets the threshold; ``app_env == "production"`` selects
    JSON output.
    """
    return configure_logging(
        log_level=settings.log_level,
        json_output=settings.app_env == "production",
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a named structlog logger.

    Never configures logging itself, so importing a module that holds a
    logger leaves the host's handlers alone.

    Args:
        name: Logger name, typically the module name.

    Returns:
        A structlog BoundLogger bound with the given name.
    """
    return structlog.get_logger(logger_name=name)
