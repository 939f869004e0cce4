"""
structlog configuration.

Production emits one JSON object per line; every other environment gets
the coloured console renderer. The API middleware binds ``request_id``
into contextvars, and ``add_trace_context`` adds span ids when tracing
is on.

Never log raw IP addresses or fingerprints; the gate logs hashes only.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from mulaboard.config.settings import get_settings
from mulaboard.observability.tracing import add_trace_context

# Libraries whose INFO output drowns the request log.
_QUIET_LOGGERS = ("asyncio", "uvicorn.access", "asyncpg")


def _renderer_chain(json_output: bool) -> list[Processor]:
    if json_output:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=True)]


def setup_logging() -> None:
    """Configure structlog and the stdlib root logger from settings."""
    settings = get_settings()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_trace_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        *_renderer_chain(settings.is_production),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Repositories log through the stdlib; route them to the same stream.
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
