"""Optional structlog setup for applications embedding xmlmarshal.

The library itself only calls ``structlog.get_logger(__name__)`` and never
configures logging. An application that wants the ``marshal_failed`` and
``unmarshal_failed`` events (and the ``binding_context_built`` debug
events) routed through the ``xmlmarshal`` stdlib logger calls
:func:`configure_logging` once at startup::

    from xmlmarshal import configure_logging

    configure_logging(log_json=True)

Two output modes:
- Human (default): console-rendered lines
- JSON (``log_json=True``): one JSON object per line
"""

from __future__ import annotations

import logging
import sys
from typing import IO

import structlog

LOGGER_NAME = "xmlmarshal"


def _processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Route xmlmarshal's structlog events to ``stream`` (stderr by default).

    Args:
        verbose: Also emit DEBUG events. When False, only WARNING+.
        log_json: Render JSON lines instead of console output.
        stream: Where the handler writes.

    Returns:
        The configured ``xmlmarshal`` logger. It no longer propagates, so
        calling this twice replaces the handler instead of adding one.
    """
    stream = stream or sys.stderr
    shared = _processors()

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
    return logger
