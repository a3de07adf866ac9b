"""
Structured logging for lock operations.

The lock modules log through ``logging.getLogger(__name__)`` with ``extra=``
fields, so they work under any host logging setup. Hosts that want
structured output can call ``setup_logging()``; records logged while a job
holds its lock then carry ``job_type`` and ``lock_key``, including records
emitted by the job body itself.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from opentelemetry import trace

from job_lock.config import get_settings


def add_trace_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Add the current span's trace_id and span_id, if one is recording."""
    span = trace.get_current_span()
    if span and span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """
    Route the root logger through structlog.

    Args:
        level: Log level name. Defaults to ``log_level`` from settings.
        log_format: ``json`` or ``console``. Defaults to ``log_format`` from settings.
    """
    settings = get_settings()
    level = level or settings.log_level
    log_format = log_format or settings.log_format

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_trace_context,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ExtraAdder(),
    ]

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Connection pool chatter
    logging.getLogger("redis").setLevel(logging.WARNING)


@contextmanager
def lock_log_context(job_type: str, lock_key: str) -> Iterator[None]:
    """
    Tag log records emitted inside the block with the job and its lock.

    Previous context values are restored on exit, so nested jobs do not leak
    their tags into the caller.
    """
    with structlog.contextvars.bound_contextvars(job_type=job_type, lock_key=lock_key):
        yield
