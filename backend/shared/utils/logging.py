"""
Structured logging for the Club Live service.

Every entry carries the service name and instance id; entries emitted while a
request is in flight also carry its request id, so one request's upstream
calls and enrichment steps can be read together.
"""
from __future__ import annotations

import logging
import sys
from contextlib import AbstractContextManager
from typing import Any

import structlog
from shared.config import Environment, Settings, get_settings

# Third-party loggers that only matter when something is wrong
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "asyncio")


class StaticFields:
    """Processor adding fixed fields to every entry, whichever task logs it."""

    def __init__(self, fields: dict[str, Any]) -> None:
        self._fields = fields

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        for key, value in self._fields.items():
            event_dict.setdefault(key, value)
        return event_dict


def _processors(settings: Settings) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if settings.debug:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                {
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.LINENO,
                }
            )
        )
    return processors


def _renderer(settings: Settings) -> structlog.types.Processor:
    if settings.environment == Environment.DEV:
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return structlog.processors.JSONRenderer()


def setup_logging(service_name: str, extra_context: dict[str, Any] | None = None) -> None:
    """
    Route stdlib and structlog output through one stdout handler.

    Console rendering in dev, one JSON object per line elsewhere.

    Args:
        service_name: Bound to every entry as ``service``.
        extra_context: Additional static fields bound to every entry.
    """
    settings = get_settings()
    static = {"service": service_name, "instance_id": settings.instance_id, **(extra_context or {})}
    shared = [*_processors(settings), StaticFields(static)]

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings),
            ],
            foreign_pre_chain=shared,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def request_context(request_id: str, **fields: Any) -> AbstractContextManager[Any]:
    """Bind ``request_id`` (and any extra fields) to entries logged inside the block."""
    return structlog.contextvars.bound_contextvars(request_id=request_id, **fields)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a named structured logger."""
    return structlog.get_logger(name)
